"""Command-line interface for wish."""

from __future__ import annotations

import argparse
import logging
import sys

from .exceptions import ResourceExhaustion
from .shell import Shell
from .shell.common import report_error

PROMPT = "wish> "


def _build_shell(args: argparse.Namespace) -> Shell:
    return Shell(search_path=args.path, history_size=args.history_size)


def _run_command(shell: Shell, args: argparse.Namespace) -> int:
    shell.exec(args.command)
    return 0


def _run_batch(shell: Shell, args: argparse.Namespace) -> int:
    try:
        handle = open(args.batch_file)
    except OSError:
        report_error()
        return 1
    with handle:
        for line in handle:
            shell.exec(line)
    return 0


def _run_interactive(shell: Shell, args: argparse.Namespace) -> int:
    try:
        while True:
            line = input(PROMPT)
            shell.exec(line)
    except (EOFError, KeyboardInterrupt):
        return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="wish")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "batch_file",
        nargs="?",
        help="Run every line of this file instead of prompting.",
    )
    source.add_argument("-c", "--command", help="Run a single command line and exit.")
    parser.add_argument(
        "--path",
        action="append",
        metavar="DIR",
        help="Initial search path directory (repeatable, default: /bin).",
    )
    parser.add_argument(
        "--history-size",
        type=int,
        default=None,
        metavar="N",
        help="Keep only the newest N history entries (default: unbounded).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Diagnostic logging level written to stderr.",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        stream=sys.stderr,
        format="[%(name)s] %(message)s",
    )
    if args.history_size is not None and args.history_size < 1:
        parser.error("--history-size must be positive")

    shell = _build_shell(args)
    if args.command is not None:
        run = _run_command
    elif args.batch_file is not None:
        run = _run_batch
    else:
        run = _run_interactive
    try:
        exit_code = run(shell, args)
    except ResourceExhaustion:
        report_error()
        exit_code = 1
    raise SystemExit(exit_code)


__all__ = ["main"]
