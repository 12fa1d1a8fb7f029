"""
Search path for include files

An ordered list of directories. Resolution walks the list in insertion
order and returns the first directory that contains the requested file.
Nothing is cached: the filesystem is consulted on every resolve() call.
"""

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import ConfigurationError, IncludeNotFoundError
from .log import LOG


class SearchPath:
    """
    Ordered directories consulted to resolve include filenames

    Duplicates are kept and directories are not checked for existence when
    added; a missing directory simply never matches.
    """

    def __init__(self) -> None:
        self.dirs: List[str] = []

    @classmethod
    def from_dirs(cls, dirs: Iterable[str]) -> "SearchPath":
        """Build a search path from directories in priority order"""
        search_path = cls()
        for directory in dirs:
            search_path.add(directory)
        return search_path

    def add(self, directory: Optional[str]) -> None:
        """
        Append a directory (lowest priority so far)

        Raises:
            ConfigurationError: If directory is None or empty
        """
        if directory is None:
            raise ConfigurationError("Search dir must not be None")
        directory = str(directory)
        if len(directory) == 0:
            raise ConfigurationError("Search dir must not be an empty string")
        self.dirs.append(directory)
        LOG(f"Search dir #{len(self.dirs)}: {directory}", level=3)

    def candidates_iter(self, filename: str) -> Iterator[Path]:
        """Yield candidate paths for filename, in search order"""
        for directory in self.dirs:
            yield Path(directory + os.sep + filename)

    def resolve(self, filename: str) -> Path:
        """
        Find the first search directory containing filename

        Args:
            filename: Include filename as written in the directive

        Returns:
            Path of the first existing candidate

        Raises:
            IncludeNotFoundError: If no directory contains the file
        """
        for candidate in self.candidates_iter(filename):
            LOG(f"Trying {candidate}", level=3)
            if candidate.exists():
                LOG(f"Resolved '{filename}' -> {candidate}", level=2)
                return candidate
        raise IncludeNotFoundError(filename, self.dirs)

    def freeze(self) -> Tuple[str, ...]:
        """Snapshot of the directories, safe to share between filters"""
        return tuple(self.dirs)

    def __iter__(self) -> Iterator[str]:
        return iter(self.dirs)

    def __len__(self) -> int:
        return len(self.dirs)
