"""Executable search path."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

from .exceptions import CommandNotFound

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_PATH = ("/bin",)
SEPARATOR = ";"


def _absolute(directory: str) -> str:
    return os.path.abspath(os.path.expanduser(directory))


class SearchPath:
    """Ordered list of directories consulted for external commands.

    Only the controlling shell process reads or mutates it.
    """

    def __init__(self, directories: Iterable[str] | None = None) -> None:
        if directories is None:
            directories = DEFAULT_SEARCH_PATH
        self._directories: list[str] = [_absolute(directory) for directory in directories]

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._directories)

    def __len__(self) -> int:
        return len(self._directories)

    def append(self, directory: str) -> str:
        """Append ``directory``, made absolute against the current directory."""

        resolved = _absolute(directory)
        self._directories.append(resolved)
        logger.debug("search path += %s", resolved)
        return resolved

    def clear(self) -> None:
        self._directories.clear()
        logger.debug("search path cleared")

    def resolve(self, name: str) -> str:
        """Return the first ``directory/name`` that is an executable file.

        ``name`` is always taken relative to a search directory, even when it
        is absolute or climbs out with ``..``.
        """

        for directory in self._directories:
            candidate = f"{directory}/{name}"
            if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
                logger.debug("resolved %s -> %s", name, candidate)
                return candidate
        raise CommandNotFound(f"{name} not found on search path {self.render()!r}")

    def render(self) -> str:
        return SEPARATOR.join(self._directories)


__all__ = ["DEFAULT_SEARCH_PATH", "SearchPath"]
