#
# src/tapstream/streams/protocols.py
#
"""
Defines the Stream protocol and its terminal status.
"""
from collections.abc import Iterator
from enum import Enum, auto
from typing import Protocol, runtime_checkable

from attrs import define, field


class StreamState(Enum):
    """Lifecycle of a stream backed by a child process."""

    CREATED = auto()  # Command validated, nothing spawned yet.
    RUNNING = auto()  # Child spawned, output may still arrive.
    DRAINING = auto()  # Output exhausted, child being reaped.
    EXITED = auto()  # Child reaped, exit status known.
    CLOSED = auto()  # Pipes and process table entry released.


@define(frozen=True, slots=True)
class ExitStatus:
    """
    How a child process ended.

    Exactly one of ``code`` and ``signal`` is set. A non-zero code or a
    signal is not an error at this level; callers decide what it means.
    """
    code: int | None = field(default=None)
    signal: int | None = field(default=None)

    @classmethod
    def from_returncode(cls, returncode: int) -> "ExitStatus":
        """Build from a ``subprocess`` return code (negative means signalled)."""
        if returncode < 0:
            return cls(signal=-returncode)
        return cls(code=returncode)

    @property
    def success(self) -> bool:
        return self.code == 0

    @property
    def exited_normally(self) -> bool:
        return self.signal is None

    @property
    def shell_code(self) -> int:
        """Exit code as a POSIX shell would report it (128 + signal when signalled)."""
        if self.signal is not None:
            return 128 + self.signal
        return self.code if self.code is not None else 1


@runtime_checkable
class Stream(Protocol):
    """
    A live, pull-based sequence of output lines with a terminal status.
    """

    @property
    def exit_status(self) -> ExitStatus | None:
        """The terminal status, or None while output is still pending."""
        ...

    def has_more(self) -> bool:
        """Block until the next line is available or output has ended."""
        ...

    def next_line(self) -> str | None:
        """Return the next line without its newline, or None at end of output."""
        ...

    def close(self) -> None:
        """Release every resource held by the stream."""
        ...

    def __iter__(self) -> Iterator[str]:
        ...


# 🔼⚙️
