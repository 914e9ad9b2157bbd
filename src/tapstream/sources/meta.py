#
# src/tapstream/sources/meta.py
#
"""
Derived, read-only facts about a raw source.

Detectors score a source from its meta rather than poking at the raw value
or the filesystem themselves, so the facts are gathered exactly once.
"""

import os
from pathlib import Path

import structlog
from attrs import define, field

from tapstream.sources.raw import CommandSource, FileSource, MappingSource, RawSource

log = structlog.get_logger("sources.meta")

SHEBANG_PREFIX = "#!"
SHEBANG_READ_LIMIT = 256


@define(frozen=True, slots=True)
class FileMeta:
    """Filesystem facts about a path-like raw source."""
    exists: bool = field(default=True)
    is_dir: bool = field(default=False)
    is_symlink: bool = field(default=False)
    size: int = field(default=0)
    lowercase_extension: str = field(default="")
    basename: str = field(default="")
    directory: str = field(default="")
    readable: bool = field(default=False)
    writable: bool = field(default=False)
    is_executable: bool = field(default=False)
    shebang: str | None = field(default=None)

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    @classmethod
    def from_path(cls, path: Path) -> "FileMeta":
        """Stat ``path`` and collect everything detectors may need."""
        path = Path(path)
        facts = {
            "lowercase_extension": path.suffix.lower(),
            "basename": path.name,
            "directory": str(path.parent),
            "is_symlink": path.is_symlink(),
        }
        try:
            stat = path.stat()
        except OSError:
            return cls(exists=False, **facts)

        is_dir = path.is_dir()
        return cls(
            exists=True,
            is_dir=is_dir,
            size=stat.st_size,
            readable=os.access(path, os.R_OK),
            writable=os.access(path, os.W_OK),
            is_executable=os.access(path, os.X_OK),
            shebang=None if is_dir else _read_shebang(path),
            **facts,
        )


def _read_shebang(path: Path) -> str | None:
    try:
        with path.open("rb") as fh:
            head = fh.readline(SHEBANG_READ_LIMIT)
    except OSError as e:
        log.debug("Could not read shebang line", path=str(path), error=str(e))
        return None
    line = head.decode("utf-8", errors="replace").rstrip("\r\n")
    return line if line.startswith(SHEBANG_PREFIX) else None


@define(frozen=True, slots=True)
class SourceMeta:
    """
    Shape and filesystem facts for one raw source.

    ``is_file`` is only true for a path that exists and is not a directory.
    """
    is_file: bool = field(default=False)
    is_dir: bool = field(default=False)
    is_mapping: bool = field(default=False)
    is_sequence: bool = field(default=False)
    is_scalar: bool = field(default=False)
    file: FileMeta | None = field(default=None)

    @property
    def lowercase_extension(self) -> str:
        return self.file.lowercase_extension if self.file else ""

    @property
    def is_executable(self) -> bool:
        return bool(self.file and self.file.is_executable)


def assemble_meta(raw: RawSource) -> SourceMeta:
    """Compute the meta for a raw source."""
    if isinstance(raw, MappingSource):
        return SourceMeta(is_mapping=True)
    if isinstance(raw, CommandSource):
        return SourceMeta(is_sequence=True)
    if isinstance(raw, FileSource):
        file = raw.file if raw.file is not None else FileMeta.from_path(raw.path)
        return SourceMeta(
            is_file=file.exists and not file.is_dir,
            is_dir=file.exists and file.is_dir,
            is_scalar=True,
            file=file,
        )
    raise TypeError(f"Unknown raw source variant: {type(raw).__name__}")


# 🔼⚙️
