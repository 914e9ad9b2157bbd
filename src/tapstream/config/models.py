#
# src/tapstream/config/models.py
#
"""
Attrs-based data models for tapstream configuration structure.
"""

import codecs
import logging
from typing import Any

from attrs import define, field


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_positive_number(inst: Any, attr: Any, value: float) -> None:
    """Validator ensures a number is positive."""
    if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
        raise ValueError(f"Field '{attr.name}' must be a positive number, got {value!r}")


def _validate_encoding(inst: Any, attr: Any, value: str) -> None:
    try:
        codecs.lookup(value)
    except (LookupError, TypeError) as e:
        raise ValueError(f"Unknown encoding '{value}'.") from e


def _to_name_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for tapstream."""
    log_level: str = field(default="WARNING", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


@define(frozen=True, slots=True)
class StreamConfig:
    """How child processes are streamed."""
    merge: bool = field(default=False)
    encoding: str = field(default="utf-8", validator=_validate_encoding)
    terminate_timeout: float = field(default=5.0, validator=_validate_positive_number)


@define(frozen=True, slots=True)
class DetectorsConfig:
    """Which detectors are registered, in registration order."""
    enabled: tuple[str, ...] = field(default=("executable",), converter=_to_name_tuple)


@define(frozen=True, slots=True)
class TapstreamConfig:
    """Root configuration object for the tapstream application."""
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})
    stream: StreamConfig = field(factory=StreamConfig)
    detectors: DetectorsConfig = field(factory=DetectorsConfig)


# 🔼⚙️
