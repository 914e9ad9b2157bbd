#
# src/tapstream/streams/process.py
#
"""
A Stream backed by a child process.

The child is spawned with its command as an argument vector (never through a
shell). Its standard output is read line by line on demand; with ``merge``
its standard error is redirected into the same pipe, otherwise standard
error is inherited from the parent untouched.

The stream reaps its child exactly once: at end of output, or on ``close()``,
or when the stream object is abandoned. No global SIGCHLD handler is used.
"""

import subprocess
from collections.abc import Callable, Iterator, Sequence
from typing import Optional

import structlog

from tapstream.exceptions import NoCommandError, SpawnError
from tapstream.streams.protocols import ExitStatus, Stream, StreamState
from tapstream.telemetry import StructLogger

log: StructLogger = structlog.get_logger("streams.process")

DEFAULT_ENCODING = "utf-8"
DEFAULT_TERMINATE_TIMEOUT = 5.0

StreamHook = Callable[["ProcessStream"], None]


class ProcessStream(Stream):
    """Streams the output lines of one child process."""

    def __init__(
        self,
        command: Sequence[str],
        merge: bool = False,
        encoding: str = DEFAULT_ENCODING,
        terminate_timeout: float = DEFAULT_TERMINATE_TIMEOUT,
        setup: Optional[StreamHook] = None,
        teardown: Optional[StreamHook] = None,
    ) -> None:
        self._state = StreamState.CREATED
        self._proc: subprocess.Popen[str] | None = None
        self._pending: str | None = None
        self._exhausted = False
        self._exit_status: ExitStatus | None = None
        self._teardown = teardown

        self.command: tuple[str, ...] = tuple(command)
        self.merge = merge
        self.encoding = encoding
        self.terminate_timeout = terminate_timeout
        self._log = log.bind(command=" ".join(self.command), merge=merge)

        if not self.command:
            self._log.error("Refusing to create a stream without a command")
            raise NoCommandError()

        if setup is not None:
            setup(self)

        try:
            self._proc = subprocess.Popen(
                list(self.command),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge else None,
                encoding=encoding,
                errors="replace",
            )
        except OSError as e:
            self._log.error("Failed to spawn child process", error=str(e))
            raise SpawnError(self.command, e) from e

        self._state = StreamState.RUNNING
        self._log = self._log.bind(pid=self._proc.pid)
        self._log.debug("Child process spawned")

    # --- Introspection ---
    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def pid(self) -> int | None:
        return self._proc.pid if self._proc is not None else None

    @property
    def exit_status(self) -> ExitStatus | None:
        return self._exit_status

    @property
    def is_reaped(self) -> bool:
        return self._exit_status is not None

    # --- Line delivery ---
    def has_more(self) -> bool:
        if self._pending is None:
            self._pending = self._read_line()
        return self._pending is not None

    def next_line(self) -> str | None:
        if self._pending is not None:
            line, self._pending = self._pending, None
            return line
        return self._read_line()

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        line = self.next_line()
        if line is None:
            raise StopIteration
        return line

    def _read_line(self) -> str | None:
        if self._exhausted or self._proc is None or self._proc.stdout is None:
            return None
        if self._proc.stdout.closed:
            return None
        line = self._proc.stdout.readline()
        if not line:
            self._finish()
            return None
        return line[:-1] if line.endswith("\n") else line

    def _finish(self) -> None:
        """End of output: reap the child and record how it ended."""
        self._exhausted = True
        self._state = StreamState.DRAINING
        self._close_pipe()
        self._reap()
        self._state = StreamState.EXITED

    # --- Process control ---
    def terminate(self) -> None:
        """Ask a still-running child to stop (SIGTERM on POSIX)."""
        if self._proc is not None and not self.is_reaped and self._proc.poll() is None:
            self._log.info("Terminating child process")
            self._proc.terminate()

    def kill(self) -> None:
        """Kill a still-running child (SIGKILL on POSIX)."""
        if self._proc is not None and not self.is_reaped and self._proc.poll() is None:
            self._log.warning("Killing child process")
            self._proc.kill()

    def close(self, terminate: bool = False) -> None:
        """
        Release the pipe and reap the child if that has not happened yet.

        Without ``terminate`` this waits for the child to exit on its own;
        closing the pipe makes any further write by the child fail. With
        ``terminate`` the child is signalled first and killed if it is still
        alive after ``terminate_timeout`` seconds.
        """
        if self._state is StreamState.CLOSED:
            return
        if self._proc is None:
            self._state = StreamState.CLOSED
            return

        if not self.is_reaped:
            self._exhausted = True
            self._pending = None
            self._close_pipe()
            if terminate:
                self.terminate()
                try:
                    self._reap(timeout=self.terminate_timeout)
                except subprocess.TimeoutExpired:
                    self._log.warning(
                        "Child did not exit after terminate",
                        timeout=self.terminate_timeout,
                    )
                    self.kill()
                    self._reap()
            else:
                self._reap()

        self._state = StreamState.CLOSED
        self._log.debug("Stream closed")

    def _close_pipe(self) -> None:
        if self._proc is not None and self._proc.stdout is not None and not self._proc.stdout.closed:
            self._proc.stdout.close()

    def _reap(self, timeout: float | None = None) -> ExitStatus:
        """Wait for the child exactly once and cache its status."""
        if self._exit_status is not None:
            return self._exit_status
        assert self._proc is not None
        returncode = self._proc.wait(timeout=timeout)
        self._exit_status = ExitStatus.from_returncode(returncode)
        self._log.info(
            "Child process exited",
            exit_code=self._exit_status.code,
            signal=self._exit_status.signal,
        )
        if self._teardown is not None:
            self._teardown(self)
        return self._exit_status

    # --- Resource management ---
    def __enter__(self) -> "ProcessStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close(terminate=exc_type is not None)

    def __del__(self) -> None:
        if getattr(self, "_proc", None) is not None and self._state is not StreamState.CLOSED:
            self.close(terminate=True)

    def __repr__(self) -> str:
        return f"<ProcessStream pid={self.pid} state={self._state.name} command={self.command!r}>"


# 🔼⚙️
