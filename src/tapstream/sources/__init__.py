#
# src/tapstream/sources/__init__.py
#
"""
Source detection sub-package for tapstream.

Exports the registry, the detector contract and the executable strategy.
"""
from .executable import Command, ExecutableDetector, ExecutableSource, normalize_command
from .factory import DETECTOR_MAP, build_registry
from .meta import FileMeta, SourceMeta, assemble_meta
from .protocols import Candidate, Detector, DetectorRegistration
from .raw import CommandSource, FileSource, MappingSource, RawSource, from_raw
from .registry import SourceRegistry
from .source import Source

__all__ = [
    "DETECTOR_MAP",
    "Candidate",
    "Command",
    "CommandSource",
    "Detector",
    "DetectorRegistration",
    "ExecutableDetector",
    "ExecutableSource",
    "FileMeta",
    "FileSource",
    "MappingSource",
    "RawSource",
    "Source",
    "SourceMeta",
    "SourceRegistry",
    "assemble_meta",
    "build_registry",
    "from_raw",
    "normalize_command",
]

# 🔼⚙️
