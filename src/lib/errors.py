"""Filter exceptions.

Every error the filter raises derives from IncludeFilterError, and also from
the builtin exception a caller would naturally catch for that failure.
"""


class IncludeFilterError(Exception):
    """Base exception for include filter errors."""


class ConfigurationError(IncludeFilterError, ValueError):
    """Raised when a setting, search directory or parameter is invalid."""


class SettingNotFoundError(IncludeFilterError, KeyError):
    """Raised when a non-reserved setting key was never set."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class IncludeNotFoundError(IncludeFilterError, FileNotFoundError):
    """Raised when no search directory contains the requested include file."""

    def __init__(self, filename: str, search_dirs=()) -> None:
        self.include_name = filename
        self.search_dirs = tuple(search_dirs)
        if self.search_dirs:
            where = ", ".join(self.search_dirs)
            message = f"Include file '{filename}' not found in search path: {where}"
        else:
            message = f"Include file '{filename}' not found: search path is empty"
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])


class IOFailure(IncludeFilterError, OSError):
    """Raised when the source stream or an include file cannot be read."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


__all__ = [
    "IncludeFilterError",
    "ConfigurationError",
    "SettingNotFoundError",
    "IncludeNotFoundError",
    "IOFailure",
]
