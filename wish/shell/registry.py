"""Table of built-in commands, filled in as the command modules import."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass

from .common import ShellCommand


@dataclass(frozen=True, slots=True)
class BuiltinSpec:
    name: str
    handler: ShellCommand
    description: str = ""


class CommandRegistry(Mapping[str, BuiltinSpec]):
    """Read-only view of the declared built-ins, keyed by command name.

    Names are unique: declaring the same built-in twice is a programming
    error and fails at import time.
    """

    def __init__(self) -> None:
        self._specs: dict[str, BuiltinSpec] = {}

    def __getitem__(self, name: str) -> BuiltinSpec:
        return self._specs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def command(self, name: str, *, description: str = "") -> Callable[[ShellCommand], ShellCommand]:
        """Declare the decorated function as the built-in ``name``."""

        if name in self._specs:
            raise ValueError(f"Built-in {name!r} is already registered")

        def declare(func: ShellCommand) -> ShellCommand:
            self._specs[name] = BuiltinSpec(name, func, description)
            return func

        return declare


COMMAND_REGISTRY = CommandRegistry()


__all__ = ["COMMAND_REGISTRY", "BuiltinSpec", "CommandRegistry"]
