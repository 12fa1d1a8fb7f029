"""
Include resolution and splicing

Finds include directives in a text buffer, resolves each named file against
the search path and replaces the directive with the decorated file content.

The resolver makes exactly one pass over the buffer it is given:
1. Scanning: the directive pattern is matched in multi-line mode, so `^` and
   `$` anchor at every line of the buffer
2. Splicing: each match is replaced by the block built from its include file,
   and the text between matches is copied through unchanged

Text introduced by a splice is never scanned again. An included file that
itself contains a directive line keeps that line verbatim in the output;
nested includes are a hard limitation of this filter, not an oversight.

Example:
    >>> config = FilterConfig(search_dirs=("/tmp/x",))
    >>> IncludeResolver(config).expand('a\\n##include "inc.txt"\\nb\\n')
    'a\\n1\\n2\\nb\\n'          # with /tmp/x/inc.txt containing "1\\n2\\n"
"""

import re
from pathlib import Path
from typing import List, Optional

from ..models.filter import FilterConfig, IncludeDirective
from .errors import ConfigurationError, IOFailure
from .search_path import SearchPath
from .log import LOG


class IncludeResolver:
    """
    Single-pass include expander for one frozen configuration

    Attributes:
        config: Frozen filter configuration
        search_path: Search path rebuilt from config.search_dirs
        pattern: Compiled directive pattern (re.MULTILINE)
    """

    def __init__(self, config: FilterConfig) -> None:
        self.config = config
        self.search_path = SearchPath.from_dirs(config.search_dirs)
        self.pattern = self.pattern_compile()

    def pattern_compile(self) -> re.Pattern[str]:
        """
        Compile the configured directive pattern in multi-line mode

        Raises:
            ConfigurationError: If the pattern does not compile or lacks the
                                configured capture group
        """
        settings = self.config.settings
        try:
            compiled = re.compile(settings.pattern, re.MULTILINE)
        except re.error as e:
            raise ConfigurationError(f"Invalid directive pattern {settings.pattern!r}: {e}") from e
        if settings.group < 1 or settings.group > compiled.groups:
            raise ConfigurationError(
                f"Capture group {settings.group} is not defined by directive "
                f"pattern {settings.pattern!r} ({compiled.groups} group(s))"
            )
        return compiled

    def directive_make(self, text: str, match: re.Match[str]) -> IncludeDirective:
        """
        Turn a pattern match into an IncludeDirective

        Raises:
            ConfigurationError: If the filename group did not take part in
                                the match
        """
        line_number = text.count('\n', 0, match.start()) + 1
        filename: Optional[str] = match.group(self.config.settings.group)
        if filename is None:
            raise ConfigurationError(
                f"Line {line_number}: capture group {self.config.settings.group} "
                f"of the directive pattern did not match in {match.group(0)!r}"
            )
        return IncludeDirective(
            text=match.group(0),
            filename=filename,
            start=match.start(),
            end=match.end(),
            line_number=line_number,
        )

    def directives_find(self, text: str) -> List[IncludeDirective]:
        """
        List the directives one expansion pass over text would splice

        Args:
            text: Buffer to scan

        Returns:
            Non-overlapping directives, in order of occurrence
        """
        return [self.directive_make(text, match) for match in self.pattern.finditer(text)]

    def lines_read(self, path: Path) -> List[str]:
        """
        Read an include file as lines without terminators

        Lines end at '\\n', '\\r\\n' or '\\r'. A final line without a
        terminator is still a line. The file is closed on every exit path.

        Raises:
            IOFailure: If the file cannot be opened, read or decoded
        """
        try:
            with open(path, 'r', encoding=self.config.encoding, newline=None) as handle:
                return [line[:-1] if line.endswith('\n') else line for line in handle]
        except (OSError, UnicodeError) as e:
            raise IOFailure(f"Cannot read include file {path}: {e}") from e

    def block_build(self, path: Path) -> str:
        """
        Build the decorated block that replaces a directive

        Every line becomes prefix + line + suffix followed by the line
        separator, and exactly one trailing separator is then removed, so the
        block never ends with an extra empty line. An empty include file
        yields an empty block.

        Args:
            path: Resolved include file

        Returns:
            Decorated block text
        """
        settings = self.config.settings
        lines = self.lines_read(path)
        if not lines:
            LOG(f"Include file {path} is empty, splicing nothing", level=2)
            return ""
        block = ''.join(
            f"{settings.prefix}{line}{settings.suffix}{self.config.line_separator}" for line in lines
        )
        return block[:-len(self.config.line_separator)] if self.config.line_separator else block

    def expand(self, text: str) -> str:
        """
        Replace every top-level directive in text with its include block

        All directives are resolved before anything is returned; the first
        missing or unreadable include aborts the whole pass.

        The buffer is matched as given. In multi-line mode `$` anchors only
        before '\\n', so a directive line ending in '\\r\\n' does not match a
        pattern ending in `$`. Normalise CRLF text first, or end the pattern
        with `(?=\\r?$)` to accept both terminators.

        Args:
            text: Buffer to expand

        Returns:
            Buffer with directives spliced (unchanged if none match)

        Raises:
            IncludeNotFoundError: If an include file is in no search directory
            IOFailure: If an include file cannot be read
            ConfigurationError: If a match lacks the filename group
        """
        parts: List[str] = []
        position = 0

        for directive in self.directives_find(text):
            path = self.search_path.resolve(directive.filename)
            block = self.block_build(path)
            LOG(f"Line {directive.line_number}: splicing {path} ({len(block)} chars)", level=2)
            parts.append(text[position:directive.start])
            # Literal splice, no backreference expansion of the block
            parts.append(block)
            position = directive.end

        if not parts:
            return text

        parts.append(text[position:])
        return ''.join(parts)
