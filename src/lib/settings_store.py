"""
Settings store for the include filter

Holds setting key/value pairs supplied by the host and fills in the
reserved keys (prefix, suffix, pattern, group) with their defaults when the
configuration is materialized.
"""

import re
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from ..models.filter import FilterSettings
from ..models.parameters import KEY_PREFIX, KEY_SUFFIX, KEY_PATTERN, KEY_GROUP, RESERVED_KEYS, reserved_is
from .errors import ConfigurationError, SettingNotFoundError
from .log import LOG


BUILTIN_DEFAULTS: Dict[str, str] = {
    KEY_PREFIX: "",
    KEY_SUFFIX: "",
    KEY_PATTERN: '^##include "(.*)"$',
    KEY_GROUP: "1",
}


class SettingsStore:
    """
    Key to value store with defaulting for the reserved keys

    Lookups never return an empty string for a key that was not set: the
    reserved keys fall back to their defaults and every other key raises
    SettingNotFoundError.
    """

    def __init__(self, defaults: Optional[Mapping[str, str]] = None) -> None:
        """
        Args:
            defaults: Overrides for the built-in reserved-key defaults
                      (typically AppSettings.defaults_asSettings())
        """
        self.entries: Dict[str, str] = {}
        self.defaults: Dict[str, str] = dict(BUILTIN_DEFAULTS)
        if defaults:
            self.defaults.update({k: v for k, v in defaults.items() if k in RESERVED_KEYS})

    def set(self, key: Optional[str], value: Optional[str]) -> None:
        """
        Add or override one setting

        Raises:
            ConfigurationError: If key is None or empty
        """
        if key is None:
            raise ConfigurationError("Key for a setting must not be None")
        if len(key) == 0:
            raise ConfigurationError("Key for a setting must not be an empty string")
        self.entries[key] = "" if value is None else value
        LOG(f"Setting {key!r} = {self.entries[key]!r}", level=3)

    def get(self, key: str) -> str:
        """
        Look up a setting, falling back to reserved-key defaults

        Raises:
            SettingNotFoundError: If the key is neither set nor reserved
        """
        if key in self.entries:
            return self.entries[key]
        if key in self.defaults:
            return self.defaults[key]
        raise SettingNotFoundError(f"Setting '{key}' is not defined")

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def copy(self) -> "SettingsStore":
        """Independent store with the same entries and defaults"""
        clone = SettingsStore()
        clone.defaults = dict(self.defaults)
        clone.entries = dict(self.entries)
        return clone

    def group_parse(self, raw: str) -> int:
        """
        Parse the capture group setting

        Args:
            raw: Group index as a decimal string (e.g., "1")

        Returns:
            Group index as a positive integer

        Raises:
            ConfigurationError: If raw is not a positive decimal integer
        """
        text = raw.strip()
        if not text.isdigit():
            raise ConfigurationError(f"Setting '{KEY_GROUP}' must be a positive integer, got {raw!r}")
        group = int(text)
        if group < 1:
            raise ConfigurationError(f"Setting '{KEY_GROUP}' must be a positive integer, got {raw!r}")
        return group

    def pattern_validate(self, pattern: str, group: int) -> None:
        """
        Check that the directive pattern compiles and has the filename group

        Raises:
            ConfigurationError: If the pattern is not a valid regular
                                expression or has fewer than `group` groups
        """
        try:
            compiled = re.compile(pattern, re.MULTILINE)
        except re.error as e:
            raise ConfigurationError(f"Setting '{KEY_PATTERN}' is not a valid regular expression: {e}") from e
        if compiled.groups == 0:
            raise ConfigurationError(f"Setting '{KEY_PATTERN}' has no capture group: {pattern!r}")
        if group > compiled.groups:
            raise ConfigurationError(
                f"Setting '{KEY_GROUP}' is {group} but pattern {pattern!r} "
                f"only has {compiled.groups} capture group(s)"
            )

    def materialize(self) -> FilterSettings:
        """
        Apply defaults for unset reserved keys and freeze the result

        Returns:
            FilterSettings snapshot; later changes to this store do not
            affect it

        Raises:
            ConfigurationError: If the group index or the pattern is invalid
        """
        group = self.group_parse(self.get(KEY_GROUP))
        pattern = self.get(KEY_PATTERN)
        self.pattern_validate(pattern, group)

        extra = {k: v for k, v in self.entries.items() if not reserved_is(k)}
        settings = FilterSettings(
            prefix=self.get(KEY_PREFIX),
            suffix=self.get(KEY_SUFFIX),
            pattern=pattern,
            group=group,
            extra=MappingProxyType(extra),
        )
        LOG(f"Settings materialized: pattern={pattern!r} group={group}", level=2)
        return settings
