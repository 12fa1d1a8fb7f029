"""
Filter parameter models

Defines the typed key/value/name triples a host pipeline hands to the
filter, and the reserved setting keys the filter understands.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional, Set, Union


class ParameterKind(Enum):
    """
    Kinds of parameters accepted by the filter

    The value of each member is the type string a host uses to tag a
    parameter.
    """
    SETTING = "setting"                 # name=key, value=setting value
    SEARCHDIR = "searchdir"             # value=directory
    PROPERTIESFILE = "propertiesfile"   # value=path of a key=value file


# Reserved setting keys
KEY_PREFIX = "prefix"
KEY_SUFFIX = "suffix"
KEY_PATTERN = "pattern"
KEY_GROUP = "group"

RESERVED_KEYS: Set[str] = {KEY_PREFIX, KEY_SUFFIX, KEY_PATTERN, KEY_GROUP}

# Properties file entries carrying this key are search directories
SEARCHDIR_KEY = "searchdir"


@dataclass(frozen=True)
class Parameter:
    """
    One configuration parameter supplied by the host

    Attributes:
        kind: Parameter kind, either a ParameterKind or its type string
        value: Setting value, directory, or properties file path
        name: Setting key (only used by ParameterKind.SETTING)

    Example:
        Parameter(ParameterKind.SETTING, value="> ", name="prefix")
        Parameter("searchdir", value="include/")
    """
    kind: Union[ParameterKind, str]
    value: Optional[str] = None
    name: Optional[str] = None

    def kind_resolve(self) -> Optional[ParameterKind]:
        """
        Map the declared kind onto a ParameterKind

        Returns:
            Matching ParameterKind, or None for kinds the filter does not
            recognize (those parameters are ignored)
        """
        if isinstance(self.kind, ParameterKind):
            return self.kind
        try:
            return ParameterKind(self.kind)
        except ValueError:
            return None


def reserved_is(key: str) -> bool:
    """Check if a setting key is reserved"""
    return key in RESERVED_KEYS
