"""File built-ins."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..common import STDIN_FILENO, STDOUT_FILENO, copy_fd
from ..registry import COMMAND_REGISTRY
from ...exceptions import ShellIOError

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import Shell


@COMMAND_REGISTRY.command("cat", description="Concatenate files to standard output")
def cat(shell: "Shell", args: list[str]) -> None:
    if not args:
        try:
            copy_fd(STDIN_FILENO, STDOUT_FILENO)
        except OSError as exc:
            raise ShellIOError(f"cat: {exc.strerror}") from exc
        return
    for path in args:
        try:
            with open(path, "rb") as handle:
                copy_fd(handle.fileno(), STDOUT_FILENO)
        except (OSError, ValueError) as exc:
            raise ShellIOError(f"cat: {path}: {exc}") from exc
