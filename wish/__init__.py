"""wish: a small Unix shell with pipelines, redirection and built-ins."""

from .exceptions import (
    ArgumentError,
    CommandNotFound,
    HistoryError,
    ResourceExhaustion,
    ShellIOError,
    ShellSyntaxError,
    WishError,
)
from .history import History
from .search_path import SearchPath
from .shell import ExecutionEngine, Shell
from .shell_parser import CommandLine, Process, ProcessGroup, parse_command_line
from .tokenizer import normalize_line, tokenize

__all__ = [
    "Shell",
    "ExecutionEngine",
    "SearchPath",
    "History",
    "CommandLine",
    "ProcessGroup",
    "Process",
    "parse_command_line",
    "normalize_line",
    "tokenize",
    "WishError",
    "ShellSyntaxError",
    "ArgumentError",
    "ShellIOError",
    "CommandNotFound",
    "HistoryError",
    "ResourceExhaustion",
]
