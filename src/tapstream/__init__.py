#
# src/tapstream/__init__.py
#
"""
tapstream: detect where test output comes from and stream it line by line.
"""
from tapstream.exceptions import (
    ConfigurationError,
    DetectorError,
    NoCommandError,
    NoMatchingSourceError,
    SourceShapeError,
    SpawnError,
    TapstreamError,
)
from tapstream.sources import (
    ExecutableDetector,
    Source,
    SourceRegistry,
    build_registry,
)
from tapstream.streams import ExitStatus, ProcessStream, Stream

__all__ = [
    "ConfigurationError",
    "DetectorError",
    "ExecutableDetector",
    "ExitStatus",
    "NoCommandError",
    "NoMatchingSourceError",
    "ProcessStream",
    "Source",
    "SourceRegistry",
    "SourceShapeError",
    "SpawnError",
    "Stream",
    "TapstreamError",
    "build_registry",
]
