"""
includefilter - Include-directive preprocessor for text pipelines

Scans a text stream for include directives (by default lines of the form
##include "file"), resolves each file against an ordered search path and
splices its decorated content in place of the directive.
"""

__version__ = "1.0.0"

from .lib import (
    IncludeFilter,
    IncludeResolver,
    SearchPath,
    SettingsStore,
    config_build,
    IncludeFilterError,
    ConfigurationError,
    IncludeNotFoundError,
    IOFailure,
    LOG,
    state_connectToLogger,
)
from .models import Parameter, ParameterKind, FilterConfig, FilterSettings, FilterState

__all__ = [
    "IncludeFilter",
    "IncludeResolver",
    "SearchPath",
    "SettingsStore",
    "config_build",
    "IncludeFilterError",
    "ConfigurationError",
    "IncludeNotFoundError",
    "IOFailure",
    "LOG",
    "state_connectToLogger",
    "Parameter",
    "ParameterKind",
    "FilterConfig",
    "FilterSettings",
    "FilterState",
    "__version__",
]
