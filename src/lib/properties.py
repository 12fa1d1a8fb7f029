"""
Properties file loader

Reads flat key=value files, one entry per line. Lines whose first
non-blank character is '#' or '!' are comments. The key is everything
before the first '=' (surrounding whitespace removed); the value is
everything after it with only leading whitespace removed, so trailing
blanks and '#' characters inside values are kept. A value that must start
with a blank escapes it with a backslash:

    prefix=// <blank>   ->  {"prefix": "// "}
    suffix= #           ->  {"suffix": "#"}
    suffix=\\ #          ->  {"suffix": " #"}
    pattern=^INC:(.+)$  ->  {"pattern": "^INC:(.+)$"}

Decoding uses the platform default encoding.
"""

import locale
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from .errors import ConfigurationError
from .log import LOG


COMMENT_MARKERS = ('#', '!')


def property_parse(line: str) -> Optional[Tuple[str, str]]:
    """
    Split one properties line into key and value

    Args:
        line: Line without its terminator

    Returns:
        (key, value), or None for blank lines, comments and lines without
        a key=value separator
    """
    stripped = line.lstrip()
    if not stripped or stripped.startswith(COMMENT_MARKERS):
        return None
    if '=' not in stripped:
        return None
    key, value = stripped.split('=', 1)
    key = key.strip()
    if not key:
        return None
    value = value.lstrip()
    if value[:1] == '\\' and value[1:2].isspace():
        value = value[1:]
    return key, value


def properties_load(path: Union[str, Path]) -> Dict[str, str]:
    """
    Load a properties file into a dict

    Values are taken literally. Lines without '=' are skipped. A key that
    appears twice keeps its last value.

    Args:
        path: Properties file to read

    Returns:
        Mapping of key to value, in file order

    Raises:
        ConfigurationError: If the file does not exist or cannot be read
    """
    properties_file = Path(path)
    if not properties_file.is_file():
        raise ConfigurationError(f"Properties file not found: {properties_file}")

    encoding = locale.getpreferredencoding(False)
    properties: Dict[str, str] = {}
    try:
        with open(properties_file, 'r', encoding=encoding, newline=None) as handle:
            for line_number, line in enumerate(handle, start=1):
                entry = property_parse(line[:-1] if line.endswith('\n') else line)
                if entry is None:
                    LOG(f"{properties_file}:{line_number}: skipped", level=3)
                    continue
                key, value = entry
                properties[key] = value
    except (OSError, UnicodeError) as e:
        raise ConfigurationError(f"Cannot read properties file {properties_file}: {e}") from e

    LOG(f"Loaded {len(properties)} entries from {properties_file}", level=2)
    return properties
