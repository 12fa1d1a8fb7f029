"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use INCLUDEFILTER_ prefix (e.g., INCLUDEFILTER_DEFAULT_PREFIX="> ").

Settings can also be loaded from a .env file in the project root.

These values only seed the defaults of the reserved setting keys. Settings
supplied as filter parameters always win over them.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.parameters import KEY_PREFIX, KEY_SUFFIX, KEY_PATTERN, KEY_GROUP


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use INCLUDEFILTER_ prefix.

    Examples:
        INCLUDEFILTER_DEFAULT_PATTERN='^#include <(.*)>$'
        INCLUDEFILTER_DEFAULT_GROUP=1
        INCLUDEFILTER_INCLUDE_ENCODING=latin-1
    """

    model_config = SettingsConfigDict(
        env_prefix="INCLUDEFILTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Directive configuration
    default_pattern: str = Field(
        default='^##include "(.*)"$',
        description="Directive regular expression, matched per line (multi-line mode)",
    )

    default_group: int = Field(
        default=1,
        description="Capture group of the directive pattern holding the filename",
    )

    # Splice decoration
    default_prefix: str = Field(
        default="",
        description="Text placed before every spliced line",
    )

    default_suffix: str = Field(
        default="",
        description="Text placed after every spliced line",
    )

    # Include file reading
    include_encoding: str = Field(
        default="utf-8",
        description="Text encoding used to read include files",
    )

    source_encoding: str = Field(
        default="utf-8",
        description="Text encoding used by the command line host to read the source file",
    )

    line_separator: str = Field(
        default="\n",
        description="Terminator written after each spliced line",
    )

    @field_validator("default_group")
    @classmethod
    def group_validate(cls, value: int) -> int:
        """Reject group indices that can never name a capture group"""
        if value < 1:
            raise ValueError("default_group must be a positive integer")
        return value

    def defaults_asSettings(self) -> dict[str, str]:
        """
        Render the reserved-key defaults as string settings.

        Returns:
            Mapping of reserved setting key to its default value, in the
            same string form the filter parameters use

        Example:
            >>> AppSettings().defaults_asSettings()["group"]
            '1'
        """
        return {
            KEY_PREFIX: self.default_prefix,
            KEY_SUFFIX: self.default_suffix,
            KEY_PATTERN: self.default_pattern,
            KEY_GROUP: str(self.default_group),
        }


# Singleton instance - import this in your code
appsettings = AppSettings()
