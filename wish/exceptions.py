"""Exception hierarchy for the wish shell."""

from __future__ import annotations

ERROR_MESSAGE = "An error has occurred\n"


class WishError(Exception):
    """Base class for every failure the shell knows how to report."""

    fatal = False


class ShellSyntaxError(WishError):
    """Malformed token sequence on the command line."""


class ArgumentError(WishError):
    """Wrong number of arguments given to a built-in."""


class ShellIOError(WishError):
    """Missing or inaccessible file, directory or redirect target."""


class CommandNotFound(WishError):
    """The search path was exhausted without finding an executable."""


class HistoryError(WishError):
    """A history event reference could not be substituted."""


class ResourceExhaustion(WishError):
    """Pipe or process creation failed; the shell cannot continue."""

    fatal = True


__all__ = [
    "ERROR_MESSAGE",
    "WishError",
    "ShellSyntaxError",
    "ArgumentError",
    "ShellIOError",
    "CommandNotFound",
    "HistoryError",
    "ResourceExhaustion",
]
