#
# src/tapstream/sources/executable.py
#
"""
The executable source strategy.

Recognizes shell and batch scripts, files with the execute bit, and explicit
``{"exec": [...]}`` specs, and streams the output of running them.

    detector = ExecutableDetector()
    stream = detector.make_stream(Source.coerce({"exec": ["ruby", "t/test.rb"]}))
"""
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeAlias

import structlog

from tapstream.exceptions import NoCommandError, SourceShapeError
from tapstream.sources.protocols import Detector
from tapstream.sources.raw import CommandSource, FileSource, MappingSource, is_string_sequence
from tapstream.sources.source import Source
from tapstream.streams.process import DEFAULT_ENCODING, DEFAULT_TERMINATE_TIMEOUT, ProcessStream
from tapstream.telemetry import StructLogger

log: StructLogger = structlog.get_logger("sources.executable")

Command: TypeAlias = tuple[str, ...]

EXEC_KEY = "exec"
SCRIPT_EXTENSIONS = (".sh", ".bat")

# Scores sit below 1.0 so more specific detectors can out-vote this one,
# and an explicit exec spec always beats a file that merely looks runnable.
SCRIPT_SCORE = 0.8
EXECUTABLE_FILE_SCORE = 0.7
EXEC_SPEC_SCORE = 0.99
NO_SCORE = 0.0


def normalize_command(value: Any) -> Command:
    """
    Turn any accepted raw shape into a command.

    Accepts a sequence of strings (used verbatim), a mapping whose ``exec``
    value is a sequence of strings, or a single path-like scalar (wrapped
    as a one-element command). The result may be empty; emptiness is
    rejected when a stream is created.

    Raises:
        SourceShapeError: for every other shape.
    """
    if isinstance(value, CommandSource):
        return value.argv
    if isinstance(value, MappingSource):
        value = value.data
    if isinstance(value, FileSource):
        return (str(value.path),)

    if isinstance(value, Mapping):
        if EXEC_KEY not in value:
            raise SourceShapeError(value, "argument must be a sequence or a mapping with an `exec` key")
        exec_value = value[EXEC_KEY]
        if not is_string_sequence(exec_value):
            raise SourceShapeError(
                exec_value, "the `exec` value must be a sequence of strings"
            )
        return tuple(exec_value)
    if is_string_sequence(value):
        return tuple(value)
    if isinstance(value, str | os.PathLike):
        return (os.fspath(value),)
    raise SourceShapeError(value)


def _spawn_path(path: Path) -> str:
    # A bare name would be looked up on PATH instead of in the cwd.
    if path.is_absolute() or path.parent != Path("."):
        return str(path)
    return os.path.join(os.curdir, path)


class ExecutableSource:
    """
    Holds one command and spawns it on request.

    The command is validated when ``raw_source`` is assigned, not when the
    stream is created.
    """

    def __init__(
        self,
        merge: bool = False,
        encoding: str = DEFAULT_ENCODING,
        terminate_timeout: float = DEFAULT_TERMINATE_TIMEOUT,
    ) -> None:
        self.merge = merge
        self.encoding = encoding
        self.terminate_timeout = terminate_timeout
        self._command: Command | None = None

    @property
    def raw_source(self) -> Command | None:
        return self._command

    @raw_source.setter
    def raw_source(self, value: Any) -> None:
        self._command = normalize_command(value)

    def get_stream(self) -> ProcessStream:
        """
        Spawn the command and return its stream.

        Raises:
            NoCommandError: if no command (or an empty one) was set.
            SpawnError: if the OS could not start the process.
        """
        if not self._command:
            log.error("No command found for executable source")
            raise NoCommandError()
        return ProcessStream(
            self._command,
            merge=self.merge,
            encoding=self.encoding,
            terminate_timeout=self.terminate_timeout,
        )


class ExecutableDetector(Detector):
    """Scores executable-looking sources and streams their output."""

    name = "executable"

    def __init__(
        self,
        encoding: str = DEFAULT_ENCODING,
        terminate_timeout: float = DEFAULT_TERMINATE_TIMEOUT,
    ) -> None:
        self.encoding = encoding
        self.terminate_timeout = terminate_timeout

    def can_handle(self, source: Source) -> float:
        meta = source.meta
        if meta.is_file:
            if meta.lowercase_extension in SCRIPT_EXTENSIONS:
                return SCRIPT_SCORE
            if meta.is_executable:
                return EXECUTABLE_FILE_SCORE
        elif meta.is_mapping:
            if EXEC_KEY in source.raw:
                return EXEC_SPEC_SCORE
        return NO_SCORE

    def make_stream(self, source: Source) -> ProcessStream:
        options = source.config_for(self.name)
        executable = ExecutableSource(
            merge=source.merge,
            encoding=options.get("encoding", self.encoding),
            terminate_timeout=options.get("terminate_timeout", self.terminate_timeout),
        )

        raw = source.raw
        if source.meta.is_mapping:
            executable.raw_source = raw.data
        elif source.meta.is_file:
            executable.raw_source = [_spawn_path(raw.path)]
        else:
            executable.raw_source = raw

        log.debug("Creating executable stream", command=executable.raw_source, merge=source.merge)
        return executable.get_stream()


# 🔼⚙️
