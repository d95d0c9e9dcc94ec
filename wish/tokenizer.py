"""Whitespace normalization, operator validation and tokenization."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from .exceptions import ShellSyntaxError

logger = logging.getLogger(__name__)

PIPE = "|"
BACKGROUND = "&"
INPUT_REDIRECT = "<"
OUTPUT_REDIRECT = ">"

OPERATORS = frozenset((PIPE, BACKGROUND, INPUT_REDIRECT, OUTPUT_REDIRECT))
# Operators that need a command on their left and an operand on their right.
BINARY_OPERATORS = frozenset((PIPE, INPUT_REDIRECT, OUTPUT_REDIRECT))
_BLANKS = frozenset(" \t")


class TokenKind(enum.Enum):
    ARGUMENT = "argument"
    PIPE = "pipe"
    INPUT_REDIRECT = "input-redirect"
    OUTPUT_REDIRECT = "output-redirect"
    BACKGROUND = "background-separator"


_OPERATOR_KINDS = {
    PIPE: TokenKind.PIPE,
    BACKGROUND: TokenKind.BACKGROUND,
    INPUT_REDIRECT: TokenKind.INPUT_REDIRECT,
    OUTPUT_REDIRECT: TokenKind.OUTPUT_REDIRECT,
}


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str

    @property
    def is_operator(self) -> bool:
        return self.kind is not TokenKind.ARGUMENT


def strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


def normalize_line(line: str) -> str:
    """Return ``line`` with redundant whitespace removed.

    Tabs become spaces, leading and trailing blanks are dropped, runs of
    blanks collapse to one space and no space is kept next to an operator.
    Operator placement is validated in the same pass: ``|``, ``<`` and ``>``
    may neither start nor end the line, and no two operators may be
    adjacent. Raises :class:`ShellSyntaxError` on a violation.
    """

    line = strip_terminator(line)
    chars: list[str] = []
    for idx, char in enumerate(line):
        prev = chars[-1] if chars else ""
        nxt = line[idx + 1] if idx + 1 < len(line) else ""
        if char in _BLANKS:
            if not chars or prev in OPERATORS or not nxt or nxt in _BLANKS or nxt in OPERATORS:
                continue
            chars.append(" ")
        elif char in OPERATORS:
            if char in BINARY_OPERATORS and not chars:
                raise ShellSyntaxError(f"{char!r} found at beginning of line")
            if prev in OPERATORS:
                raise ShellSyntaxError(f"{char!r} found after {prev!r}")
            chars.append(char)
        else:
            chars.append(char)

    if chars and chars[-1] in BINARY_OPERATORS:
        raise ShellSyntaxError(f"dangling {chars[-1]!r} at end of line")
    normalized = "".join(chars)
    logger.debug("normalized %r -> %r", line, normalized)
    return normalized


def tokenize(line: str) -> list[Token]:
    """Split a normalized line into argument and operator tokens."""

    tokens: list[Token] = []
    word: list[str] = []

    def flush() -> None:
        if word:
            tokens.append(Token(TokenKind.ARGUMENT, "".join(word)))
            word.clear()

    for char in line:
        if char in _BLANKS:
            flush()
        elif char in OPERATORS:
            flush()
            tokens.append(Token(_OPERATOR_KINDS[char], char))
        else:
            word.append(char)
    flush()
    return tokens


__all__ = [
    "Token",
    "TokenKind",
    "normalize_line",
    "strip_terminator",
    "tokenize",
]
