#
# src/tapstream/sources/raw.py
#
"""
The three shapes a raw source can take.

A raw source is the caller's unvalidated description of where output comes
from. It is modelled as a closed union of immutable variants so that every
consumer can match on it exhaustively instead of probing Python types.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeAlias

from attrs import define, field

from tapstream.exceptions import SourceShapeError

if TYPE_CHECKING:
    from tapstream.sources.meta import FileMeta


def _to_argv(value: Any) -> tuple[str, ...]:
    return tuple(value)


@define(frozen=True, slots=True)
class CommandSource:
    """An argv-style command, already split into strings."""
    argv: tuple[str, ...] = field(converter=_to_argv)


@define(frozen=True, slots=True)
class MappingSource:
    """A structured spec, e.g. ``{"exec": ["ruby", "t/test.rb"]}``."""
    data: Mapping[str, Any] = field()

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.data


@define(frozen=True, slots=True)
class FileSource:
    """
    A single path-like value.

    ``file`` holds filesystem facts supplied by the caller. When it is left
    as ``None`` the facts are read from disk when meta is assembled.
    """
    path: Path = field(converter=Path)
    file: "FileMeta | None" = field(default=None, eq=False)

    def __str__(self) -> str:
        return str(self.path)


RawSource: TypeAlias = CommandSource | MappingSource | FileSource


def is_string_sequence(value: Any) -> bool:
    """True for a list or tuple whose items are all strings."""
    return isinstance(value, list | tuple) and all(isinstance(item, str) for item in value)


def from_raw(value: Any) -> RawSource:
    """
    Map a plain Python value onto one of the raw source variants.

    Raises:
        SourceShapeError: for anything that is not a path, a mapping or a
            sequence of strings.
    """
    if isinstance(value, CommandSource | MappingSource | FileSource):
        return value
    if isinstance(value, str | os.PathLike):
        return FileSource(path=value)
    if isinstance(value, Mapping):
        return MappingSource(data=value)
    if is_string_sequence(value):
        return CommandSource(argv=value)
    raise SourceShapeError(value)


# 🔼⚙️
