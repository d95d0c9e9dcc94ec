"""Command-line compiler front end and execution engine."""

from .core import Shell
from .engine import ExecutionEngine

__all__ = ["Shell", "ExecutionEngine"]
