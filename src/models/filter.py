"""
Filter data models

Immutable configuration snapshot, stream states and the transient directive
match record used during an expansion pass.
"""

from enum import Enum
from types import MappingProxyType
from dataclasses import dataclass, field
from typing import Mapping, Tuple


class FilterState(Enum):
    """
    Lifecycle of one IncludeFilter instance

    States only move forward:
        UNCONFIGURED -> INITIALIZED -> DRAINING -> EXHAUSTED
    INITIALIZED may go straight to EXHAUSTED when the source is empty.
    """
    UNCONFIGURED = "unconfigured"   # parameters not yet turned into a config
    INITIALIZED = "initialized"     # config frozen, source not yet drained
    DRAINING = "draining"           # serving units from the expanded buffer
    EXHAUSTED = "exhausted"         # end-of-stream reported from now on


@dataclass(frozen=True)
class FilterSettings:
    """
    Materialized settings with all reserved keys resolved

    Attributes:
        prefix: Text placed before every spliced line
        suffix: Text placed after every spliced line
        pattern: Directive regular expression (compiled in multi-line mode)
        group: Capture group holding the filename (1-based)
        extra: Non-reserved settings, kept verbatim but otherwise unused
    """
    prefix: str = ""
    suffix: str = ""
    pattern: str = '^##include "(.*)"$'
    group: int = 1
    extra: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class FilterConfig:
    """
    Frozen configuration shared by IncludeResolver and IncludeFilter

    Built once from the host parameters (or copied by chain()), never
    mutated afterwards.

    Attributes:
        settings: Materialized settings
        search_dirs: Search directories in priority order
        encoding: Text encoding used to read include files
        line_separator: Terminator written after each spliced line
    """
    settings: FilterSettings = field(default_factory=FilterSettings)
    search_dirs: Tuple[str, ...] = ()
    encoding: str = "utf-8"
    line_separator: str = "\n"


@dataclass
class IncludeDirective:
    """
    A directive found in the buffer during one expansion pass

    Attributes:
        text: The matched directive text
        filename: Filename extracted from the configured capture group
        start: Offset of the match in the buffer
        end: Offset just past the match
        line_number: 1-based line of the match (for error reporting)

    Example:
        For buffer 'a\\n##include "inc.txt"\\n':
        IncludeDirective(text='##include "inc.txt"', filename="inc.txt",
                         start=2, end=21, line_number=2)
    """
    text: str
    filename: str
    start: int
    end: int
    line_number: int
