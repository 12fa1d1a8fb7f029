"""
includefilter - Include-directive preprocessor for text pipelines

Splices files named by include directives into a text stream.
"""

__version__ = "1.0.0"

from .errors import (
    IncludeFilterError,
    ConfigurationError,
    SettingNotFoundError,
    IncludeNotFoundError,
    IOFailure,
)
from .settings_store import SettingsStore
from .search_path import SearchPath
from .resolver import IncludeResolver
from .expander import IncludeFilter
from .parameters import config_build
from .properties import properties_load
from .log import LOG, state_connectToLogger

__all__ = [
    "IncludeFilter",
    "IncludeResolver",
    "SearchPath",
    "SettingsStore",
    "config_build",
    "properties_load",
    "IncludeFilterError",
    "ConfigurationError",
    "SettingNotFoundError",
    "IncludeNotFoundError",
    "IOFailure",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
