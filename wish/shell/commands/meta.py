"""Built-ins about the shell itself."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..common import STDOUT_FILENO, write_fd
from ..registry import COMMAND_REGISTRY
from ...exceptions import ArgumentError

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import Shell


@COMMAND_REGISTRY.command("exit", description="Exit the shell")
def exit(shell: "Shell", args: list[str]) -> None:  # noqa: A001
    if args:
        raise ArgumentError(f"exit takes no arguments, got {len(args)}")
    raise SystemExit(0)


@COMMAND_REGISTRY.command("history", description="List previous command lines")
def history(shell: "Shell", args: list[str]) -> None:
    if args:
        raise ArgumentError(f"history takes no arguments, got {len(args)}")
    write_fd(STDOUT_FILENO, shell.history.format())
