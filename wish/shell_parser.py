"""Pipeline builder: turns a command line into process groups."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .exceptions import ShellSyntaxError
from .tokenizer import BACKGROUND, Token, TokenKind, normalize_line, tokenize

logger = logging.getLogger(__name__)


@dataclass
class Process:
    """One pipeline stage."""

    argv: list[str] = field(default_factory=list)
    stdin: str | None = None
    stdout: str | None = None
    index: int = 0
    pid: int | None = None
    launched: bool = False

    @property
    def name(self) -> str:
        return self.argv[0]

    @property
    def args(self) -> list[str]:
        return self.argv[1:]


@dataclass
class ProcessGroup:
    """Processes joined by pipes, left to right."""

    processes: list[Process]
    background: bool = True
    run: bool = False
    index: int = 0

    def __len__(self) -> int:
        return len(self.processes)

    def __iter__(self) -> Iterator[Process]:
        return iter(self.processes)


@dataclass
class CommandLine:
    """Every process group parsed from one input line."""

    groups: list[ProcessGroup] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.groups)

    def __iter__(self) -> Iterator[ProcessGroup]:
        return iter(self.groups)

    @property
    def is_empty(self) -> bool:
        return not self.groups

    @property
    def is_single_process(self) -> bool:
        return len(self.groups) == 1 and len(self.groups[0]) == 1

    def iter_processes(self) -> Iterator[Process]:
        for group in self.groups:
            yield from group


class ParserState(enum.Enum):
    EXPECTING_ARGUMENT = "expecting-argument"
    ARGUMENT = "argument"
    EXPECTING_INPUT_FILE = "expecting-input-file"
    EXPECTING_OUTPUT_FILE = "expecting-output-file"
    # Argument list closed by a redirect target; only redirects may follow.
    END = "end"


class ProcessParser:
    """Finite-state machine that builds a single :class:`Process`.

    Feed it the tokens of one pipeline stage (no ``|`` or ``&``), then call
    :meth:`finish`. Arguments go to argv until a redirect operator is seen;
    the token right after ``<`` or ``>`` is the redirect target.
    """

    def __init__(self, index: int = 0) -> None:
        self.process = Process(index=index)
        self.state = ParserState.EXPECTING_ARGUMENT

    def _transition(self, state: ParserState) -> None:
        logger.debug("stage %d: %s -> %s", self.process.index, self.state.value, state.value)
        self.state = state

    def feed(self, token: Token) -> None:
        kind = token.kind
        if kind is TokenKind.ARGUMENT:
            self._feed_argument(token.text)
        elif kind is TokenKind.INPUT_REDIRECT:
            self._feed_redirect(
                already_set=self.process.stdin is not None,
                target_state=ParserState.EXPECTING_INPUT_FILE,
                operator=token.text,
            )
        elif kind is TokenKind.OUTPUT_REDIRECT:
            self._feed_redirect(
                already_set=self.process.stdout is not None,
                target_state=ParserState.EXPECTING_OUTPUT_FILE,
                operator=token.text,
            )
        else:
            raise ShellSyntaxError(f"Unexpected {token.text!r} inside a pipeline stage")

    def _feed_argument(self, text: str) -> None:
        if self.state is ParserState.EXPECTING_INPUT_FILE:
            self.process.stdin = text
            self._transition(ParserState.END)
        elif self.state is ParserState.EXPECTING_OUTPUT_FILE:
            self.process.stdout = text
            self._transition(ParserState.END)
        elif self.state is ParserState.END:
            raise ShellSyntaxError(f"Argument {text!r} after redirection")
        else:
            self.process.argv.append(text)
            self._transition(ParserState.ARGUMENT)

    def _feed_redirect(self, *, already_set: bool, target_state: ParserState, operator: str) -> None:
        if self.state in (ParserState.EXPECTING_INPUT_FILE, ParserState.EXPECTING_OUTPUT_FILE):
            raise ShellSyntaxError(f"{operator!r} where a redirect target was expected")
        if not self.process.argv:
            raise ShellSyntaxError(f"No command before {operator!r}")
        if already_set:
            raise ShellSyntaxError(f"Multiple {operator!r} redirections")
        self._transition(target_state)

    def finish(self) -> Process:
        if self.state in (ParserState.EXPECTING_INPUT_FILE, ParserState.EXPECTING_OUTPUT_FILE):
            raise ShellSyntaxError("No redirection file specified")
        if not self.process.argv:
            raise ShellSyntaxError("Missing command before pipe or end of line")
        self._transition(ParserState.END)
        return self.process


def _split(tokens: Iterable[Token], kind: TokenKind) -> list[list[Token]]:
    parts: list[list[Token]] = [[]]
    for token in tokens:
        if token.kind is kind:
            parts.append([])
        else:
            parts[-1].append(token)
    return parts


def parse_process(tokens: Iterable[Token], index: int = 0) -> Process:
    parser = ProcessParser(index)
    for token in tokens:
        parser.feed(token)
    return parser.finish()


def parse_command_line(line: str) -> CommandLine:
    """Validate ``line`` and build its :class:`CommandLine`.

    Every group starts in the background; unless the line ends with ``&``
    the last group alone is switched to the foreground. Raises
    :class:`ShellSyntaxError` and builds nothing if any stage is malformed.
    """

    normalized = normalize_line(line)
    if not normalized:
        return CommandLine()

    groups: list[ProcessGroup] = []
    for group_tokens in _split(tokenize(normalized), TokenKind.BACKGROUND):
        # A leading or trailing '&' leaves an empty group behind.
        if not group_tokens:
            continue
        processes = [
            parse_process(stage_tokens, index)
            for index, stage_tokens in enumerate(_split(group_tokens, TokenKind.PIPE))
        ]
        groups.append(ProcessGroup(processes=processes, index=len(groups)))

    if groups and not normalized.endswith(BACKGROUND):
        groups[-1].background = False
    logger.debug("parsed %d group(s) from %r", len(groups), normalized)
    return CommandLine(groups=groups)


__all__ = [
    "CommandLine",
    "ParserState",
    "Process",
    "ProcessGroup",
    "ProcessParser",
    "parse_command_line",
    "parse_process",
]
