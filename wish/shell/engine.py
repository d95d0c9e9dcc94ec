"""Execution engine: realizes a CommandLine as OS processes."""

from __future__ import annotations

import contextlib
import errno
import logging
import os
import signal
import subprocess
import sys
from collections.abc import Iterator
from typing import TYPE_CHECKING

from ..exceptions import ResourceExhaustion, ShellIOError, WishError
from ..shell_parser import CommandLine, Process, ProcessGroup
from .common import STDIN_FILENO, STDOUT_FILENO, CommandHandler, report_error

if TYPE_CHECKING:
    from .core import Shell

logger = logging.getLogger(__name__)

_EXHAUSTION_ERRNOS = frozenset((errno.EAGAIN, errno.ENOMEM))


@contextlib.contextmanager
def saved_stdio() -> Iterator[None]:
    """Restore the current fd 0 and fd 1 when the block exits, however it exits."""

    sys.stdout.flush()
    saved_in = os.dup(STDIN_FILENO)
    saved_out = os.dup(STDOUT_FILENO)
    logger.debug("saved stdio on %d and %d", saved_in, saved_out)
    try:
        yield
    finally:
        sys.stdout.flush()
        os.dup2(saved_in, STDIN_FILENO)
        os.dup2(saved_out, STDOUT_FILENO)
        os.close(saved_in)
        os.close(saved_out)
        logger.debug("restored stdio from %d and %d", saved_in, saved_out)


def _redirect(path: str, flags: int, target_fd: int) -> None:
    try:
        fd = os.open(path, flags, 0o666)
    except (OSError, ValueError) as exc:
        raise ShellIOError(f"Cannot open {path}: {exc}") from exc
    try:
        os.dup2(fd, target_fd)
    finally:
        os.close(fd)


def apply_redirections(process: Process) -> None:
    """Point fd 0/1 at the process's redirect targets, if it has any."""

    if process.stdin is not None:
        logger.debug("redirecting input from %s", process.stdin)
        _redirect(process.stdin, os.O_RDONLY, STDIN_FILENO)
    if process.stdout is not None:
        logger.debug("redirecting output to %s", process.stdout)
        _redirect(process.stdout, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, STDOUT_FILENO)


class ExecutionEngine:
    """Wires pipes and redirections, dispatches built-ins and spawns commands.

    A line holding a single process takes a fast path with no pipes. Any
    other line launches every stage of every group first and only then
    waits on them in declaration order, so groups joined by ``&`` run
    concurrently. The shell's own fd 0 and fd 1 are restored after each
    stage and after the whole line.
    """

    def __init__(self, shell: "Shell") -> None:
        self.shell = shell
        self._children: dict[int, subprocess.Popen[bytes]] = {}

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    def run(self, command_line: CommandLine) -> None:
        if command_line.is_empty:
            logger.debug("no processes to execute")
            return
        with saved_stdio():
            if command_line.is_single_process:
                self._run_single(command_line.groups[0].processes[0])
            else:
                self._launch_all(command_line)
                self._wait_all(command_line)

    # ------------------------------------------------------------------
    # Fast path
    # ------------------------------------------------------------------
    def _run_single(self, process: Process) -> None:
        logger.debug("running single process %s", process.argv)
        try:
            apply_redirections(process)
            handler = self.shell.commands.get(process.name)
            if handler is None:
                self._spawn(process)
            else:
                self._call_builtin(process, handler)
        except WishError as exc:
            self._stage_failed(process, exc)
        self._wait(process)

    # ------------------------------------------------------------------
    # General path
    # ------------------------------------------------------------------
    def _launch_all(self, command_line: CommandLine) -> None:
        last_group = len(command_line) - 1
        for position, group in enumerate(command_line):
            self._launch_group(group, more_groups=position < last_group)

    def _launch_group(self, group: ProcessGroup, *, more_groups: bool) -> None:
        group.run = True
        logger.debug(
            "launching group %d (%d stage(s), background=%s)",
            group.index,
            len(group),
            group.background,
        )
        pipe_in: int | None = None
        for process in group:
            is_last = process.index == len(group) - 1
            pipe_in = self._launch_stage(
                process,
                pipe_in,
                pipe_out=not is_last,
                in_background=not is_last or more_groups,
            )

    def _launch_stage(
        self,
        process: Process,
        pipe_in: int | None,
        *,
        pipe_out: bool,
        in_background: bool,
    ) -> int | None:
        """Launch one stage and return the read end its successor consumes.

        A built-in stage is forked when ``in_background`` is set, that is when
        a later stage or group still has to be launched after it.
        """

        read_end: int | None = None
        with saved_stdio():
            try:
                if pipe_in is not None:
                    os.dup2(pipe_in, STDIN_FILENO)
                if pipe_out:
                    read_end, write_end = self._pipe()
                    os.dup2(write_end, STDOUT_FILENO)
                    os.close(write_end)
            finally:
                if pipe_in is not None:
                    os.close(pipe_in)

            try:
                apply_redirections(process)
                handler = self.shell.commands.get(process.name)
                if handler is None:
                    self._spawn(process)
                elif in_background:
                    self._fork_builtin(process, handler, read_end)
                else:
                    self._call_builtin(process, handler)
            except WishError as exc:
                self._stage_failed(process, exc)
        return read_end

    def _wait_all(self, command_line: CommandLine) -> None:
        for group in command_line:
            if not group.run:
                continue
            for process in group:
                self._wait(process)

    # ------------------------------------------------------------------
    # Launch helpers
    # ------------------------------------------------------------------
    def _pipe(self) -> tuple[int, int]:
        try:
            return os.pipe()
        except OSError as exc:
            raise ResourceExhaustion(f"pipe failed: {exc.strerror}") from exc

    def _spawn(self, process: Process) -> None:
        executable = self.shell.search_path.resolve(process.name)
        try:
            child = subprocess.Popen(process.argv, executable=executable, close_fds=True)
        except OSError as exc:
            if exc.errno in _EXHAUSTION_ERRNOS:
                raise ResourceExhaustion(f"spawn of {executable} failed: {exc.strerror}") from exc
            raise ShellIOError(f"Cannot execute {executable}: {exc.strerror}") from exc
        except ValueError as exc:
            raise ShellIOError(f"Cannot execute {executable}: {exc}") from exc
        process.pid = child.pid
        process.launched = True
        self._children[child.pid] = child
        logger.debug("stage %d (%s) started as pid %d", process.index, executable, child.pid)

    def _call_builtin(self, process: Process, handler: CommandHandler) -> None:
        logger.debug("running built-in %s", process.name)
        try:
            handler(process.args)
        except OSError as exc:
            raise ShellIOError(f"{process.name}: {exc.strerror}") from exc

    def _fork_builtin(self, process: Process, handler: CommandHandler, read_end: int | None) -> None:
        # Later stages are not running yet; an in-shell built-in would block
        # them on a full pipe or a slow reader.
        try:
            pid = os.fork()
        except OSError as exc:
            raise ResourceExhaustion(f"fork failed: {exc.strerror}") from exc
        if pid == 0:
            status = 1
            try:
                signal.signal(signal.SIGPIPE, signal.SIG_DFL)
                if read_end is not None:
                    os.close(read_end)
                self._call_builtin(process, handler)
                status = 0
            except SystemExit as exc:
                status = exc.code if isinstance(exc.code, int) else 0
            except WishError:
                report_error()
            finally:
                os._exit(status)
        process.pid = pid
        process.launched = True
        logger.debug("built-in %s forked as pid %d", process.name, pid)

    def _stage_failed(self, process: Process, exc: WishError) -> None:
        if exc.fatal:
            raise exc
        logger.debug("stage %d (%s) failed: %s", process.index, process.name, exc)
        report_error()

    def _wait(self, process: Process) -> None:
        if not process.launched or process.pid is None:
            return
        child = self._children.pop(process.pid, None)
        if child is not None:
            status = child.wait()
        else:
            _, raw_status = os.waitpid(process.pid, 0)
            status = os.waitstatus_to_exitcode(raw_status)
        logger.debug("pid %d (%s) exited with %d", process.pid, process.name, status)


__all__ = ["ExecutionEngine", "apply_redirections", "saved_stdio"]
