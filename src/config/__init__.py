"""
Configuration package for includefilter

Provides environment-level defaults via environment variables using pydantic-settings.
"""

from .settings import appsettings, AppSettings

__all__ = ["appsettings", "AppSettings"]
