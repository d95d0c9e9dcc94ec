"""Working-directory and search-path built-ins."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from ..common import STDOUT_FILENO, write_fd
from ..registry import COMMAND_REGISTRY
from ...exceptions import ArgumentError, ShellIOError

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import Shell


@COMMAND_REGISTRY.command("cd", description="Change directory")
def cd(shell: "Shell", args: list[str]) -> None:
    if len(args) != 1:
        raise ArgumentError(f"cd expects exactly one path, got {len(args)}")
    try:
        target = os.path.join(os.getcwd(), args[0])
        os.chdir(target)
    except (OSError, ValueError) as exc:
        raise ShellIOError(f"cd: {args[0]}: {exc}") from exc


@COMMAND_REGISTRY.command("path", description="Clear or extend the search path")
def path(shell: "Shell", args: list[str]) -> None:
    if not args:
        shell.search_path.clear()
        return
    for directory in args:
        shell.search_path.append(directory)


@COMMAND_REGISTRY.command("showpath", description="Print the search path")
def showpath(shell: "Shell", _: list[str]) -> None:
    write_fd(STDOUT_FILENO, shell.search_path.render() + "\n")
