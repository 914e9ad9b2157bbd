# src/tapstream/exceptions.py

"""
Exception hierarchy for tapstream.

Every failure names a specific cause. Nothing here is retried internally;
retry policy belongs to the caller.
"""

from collections.abc import Sequence
from typing import Any


class TapstreamError(Exception):
    """Base class for all tapstream errors."""

    def __init__(self, message: str, details: Exception | None = None):
        self.details = details
        super().__init__(message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


class ConfigurationError(TapstreamError):
    """Raised for invalid configuration files, values or detector names."""

    pass


class SourceShapeError(TapstreamError, TypeError):
    """Raised when a raw source has none of the accepted shapes."""

    def __init__(self, value: Any, message: str | None = None):
        self.value = value
        super().__init__(
            message
            or f"argument must be a sequence or a mapping with an `exec` key, got {type(value).__name__}"
        )


class NoCommandError(TapstreamError, ValueError):
    """Raised when a stream is requested for an empty command."""

    def __init__(self, message: str = "no command found"):
        super().__init__(message)


class NoMatchingSourceError(TapstreamError):
    """Raised when no registered detector scores a raw source above zero."""

    def __init__(self, raw: Any, detectors: Sequence[str] = ()):
        self.raw = raw
        self.detectors = tuple(detectors)
        message = f"no matching source strategy for {raw!r}"
        if self.detectors:
            message += f" (tried: {', '.join(self.detectors)})"
        super().__init__(message)


class DetectorError(TapstreamError):
    """Raised when a detector breaks the scoring contract."""

    pass


class RegistryFrozenError(DetectorError):
    """Raised when registering a detector after the registry was frozen."""

    pass


class SpawnError(TapstreamError, OSError):
    """Raised when the OS refuses to create the child process."""

    def __init__(self, command: Sequence[str], details: OSError):
        self.command = tuple(command)
        super().__init__(f"failed to spawn {self.command[0]!r}: {details.strerror or details}", details)
        if details.errno is not None:
            self.errno = details.errno


# 🔼⚙️
