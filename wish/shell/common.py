"""Shared shell types and raw descriptor I/O helpers."""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..exceptions import ERROR_MESSAGE

if TYPE_CHECKING:
    from .core import Shell

STDIN_FILENO = 0
STDOUT_FILENO = 1
STDERR_FILENO = 2
CHUNK_SIZE = 64 * 1024

# Built-ins report failure by raising a WishError; returning means success.
CommandHandler = Callable[[list[str]], None]
ShellCommand = Callable[["Shell", list[str]], None]


def write_fd(fd: int, data: str | bytes) -> None:
    """Write all of ``data`` to ``fd``, bypassing Python's buffered streams."""

    view = memoryview(data.encode() if isinstance(data, str) else data)
    while view:
        written = os.write(fd, view)
        view = view[written:]


def copy_fd(source: int, dest: int) -> None:
    while chunk := os.read(source, CHUNK_SIZE):
        write_fd(dest, chunk)


def report_error() -> None:
    write_fd(STDERR_FILENO, ERROR_MESSAGE)


__all__ = [
    "CHUNK_SIZE",
    "CommandHandler",
    "ShellCommand",
    "STDERR_FILENO",
    "STDIN_FILENO",
    "STDOUT_FILENO",
    "copy_fd",
    "report_error",
    "write_fd",
]
