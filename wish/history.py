"""Command history and ``!N`` event substitution."""

from __future__ import annotations

import logging
import re
from collections import deque

from .exceptions import HistoryError
from .tokenizer import strip_terminator

logger = logging.getLogger(__name__)

MAX_EVENT_DIGITS = 9
_EVENT_RE = re.compile(r"!([0-9]+)")


class History:
    """Recorded command lines, oldest first.

    ``max_entries=None`` keeps everything; otherwise only the newest
    ``max_entries`` lines are retained.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive or None")
        self.max_entries = max_entries
        self._entries: deque[str] = deque(maxlen=max_entries)

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, event: int) -> str:
        """Return entry ``event`` (1-based)."""

        if not 1 <= event <= len(self._entries):
            raise HistoryError(f"Event out of range: !{event} [1-{len(self._entries)}]")
        return self._entries[event - 1]

    def record(self, line: str) -> bool:
        """Store ``line`` unless it starts with whitespace or repeats the last entry."""

        if not line or line[0] in " \t\r\n":
            return False
        line = strip_terminator(line)
        if self._entries and self._entries[-1] == line:
            return False
        self._entries.append(line)
        return True

    def has_events(self, line: str) -> bool:
        return _EVENT_RE.search(line) is not None

    def expand(self, line: str) -> str:
        """Replace every ``!N`` in ``line`` with history entry N."""

        def replacer(match: re.Match[str]) -> str:
            digits = match.group(1)
            if len(digits) > MAX_EVENT_DIGITS:
                raise HistoryError(f"Event out of range: !{digits}... Max digits is {MAX_EVENT_DIGITS}")
            return self.get(int(digits))

        expanded = _EVENT_RE.sub(replacer, strip_terminator(line))
        logger.debug("history expansion %r -> %r", line, expanded)
        return expanded

    def format(self) -> str:
        return "".join(f"{index:5d} {entry}\n" for index, entry in enumerate(self._entries, start=1))


__all__ = ["History", "MAX_EVENT_DIGITS"]
