"""Core Shell implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..exceptions import WishError
from ..history import History
from ..search_path import SearchPath
from ..shell_parser import CommandLine, parse_command_line
from ..tokenizer import strip_terminator
from .common import STDOUT_FILENO, CommandHandler, ShellCommand, report_error, write_fd
from .engine import ExecutionEngine
from .registry import COMMAND_REGISTRY

logger = logging.getLogger(__name__)


class Shell:
    """Evaluates one command line at a time against the host system."""

    def __init__(
        self,
        *,
        search_path: Iterable[str] | None = None,
        history: History | None = None,
        history_size: int | None = None,
    ) -> None:
        self.search_path = SearchPath(search_path)
        self.history = history if history is not None else History(history_size)
        self.commands: dict[str, CommandHandler] = {}
        self.command_docs: dict[str, str] = {}
        self.engine = ExecutionEngine(self)
        self._register_builtin_commands()

    # ------------------------------------------------------------------
    # Built-in registration
    # ------------------------------------------------------------------
    def register_command(
        self,
        name: str,
        handler: CommandHandler,
        *,
        description: str = "",
    ) -> None:
        self.commands[name] = handler
        if description:
            self.command_docs[name] = description

    def available_commands(self) -> list[str]:
        return sorted(self.commands)

    def _bind_registered_handler(self, func: ShellCommand) -> CommandHandler:
        def bound(args: list[str]) -> None:
            return func(self, args)

        return bound

    def _register_builtin_commands(self) -> None:
        # Import command modules for their side effects (registration)
        from . import commands  # noqa: F401

        for spec in COMMAND_REGISTRY.values():
            self.register_command(
                spec.name,
                self._bind_registered_handler(spec.handler),
                description=spec.description,
            )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def compile(self, line: str) -> CommandLine:
        """Expand history events, record the line and parse it."""

        line = strip_terminator(line)
        if self.history.has_events(line):
            line = self.history.expand(line)
            write_fd(STDOUT_FILENO, line + "\n")
        self.history.record(line)
        return parse_command_line(line)

    def exec(self, line: str) -> bool:
        """Evaluate one line; return ``False`` if it was rejected before running.

        Rejected lines and failed stages print the generic diagnostic and
        leave the shell ready for the next line. :class:`ResourceExhaustion`
        and the ``SystemExit`` raised by ``exit`` propagate to the caller.
        """

        try:
            command_line = self.compile(line)
            self.engine.run(command_line)
        except WishError as exc:
            if exc.fatal:
                raise
            logger.debug("line %r failed: %s", line, exc)
            report_error()
            return False
        return True


__all__ = ["Shell"]
