"""
Models package for includefilter

Contains data structures and type definitions for the filter and its host.
"""

from .state import ProgramState, pipeline
from .parameters import Parameter, ParameterKind, RESERVED_KEYS
from .filter import FilterState, FilterSettings, FilterConfig, IncludeDirective

__all__ = [
    "ProgramState",
    "pipeline",
    "Parameter",
    "ParameterKind",
    "RESERVED_KEYS",
    "FilterState",
    "FilterSettings",
    "FilterConfig",
    "IncludeDirective",
]
