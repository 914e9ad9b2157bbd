#
# src/tapstream/config/loader.py
#
"""
Loads tapstream configuration from a TOML file and the environment.

Precedence: CLI options > Environment Variables > Config File > Defaults.
The CLI layer applies its own overrides on top of what is returned here.
"""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import attrs
import structlog

from tapstream.config.models import (
    DetectorsConfig,
    GlobalConfig,
    StreamConfig,
    TapstreamConfig,
)
from tapstream.exceptions import ConfigurationError

log = structlog.get_logger("config.loader")

DEFAULT_CONFIG_PATH = Path("tapstream.conf")

ENV_LOG_LEVEL = "TAPSTREAM_LOG_LEVEL"
ENV_MERGE = "TAPSTREAM_MERGE"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Environment variable {name}={value!r} is not a boolean.")


def _read_toml(config_path: Path) -> dict[str, Any]:
    try:
        with config_path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in '{config_path}': {e}", details=e) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file '{config_path}': {e}", details=e) from e


def _section(data: Mapping[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"Config section [{name}] must be a table.")
    return dict(section)


def _build(model: type, name: str, values: dict[str, Any]) -> Any:
    known = {a.name for a in attrs.fields(model)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(f"Unknown key(s) in [{name}]: {', '.join(unknown)}")
    try:
        return model(**values)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value in [{name}]: {e}", details=e) from e


def load_config(config_path: Path | None = None) -> TapstreamConfig:
    """
    Load configuration.

    Args:
        config_path: Explicit path to a TOML config file. When None, the
            default ``tapstream.conf`` is used if it exists, otherwise the
            built-in defaults apply.

    Raises:
        ConfigurationError: for an unreadable or invalid file, an explicit
            path that does not exist, or invalid environment overrides.
    """
    data: dict[str, Any] = {}
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.is_file():
            raise ConfigurationError(f"Config file not found: '{config_path}'")
        data = _read_toml(config_path)
    elif DEFAULT_CONFIG_PATH.is_file():
        config_path = DEFAULT_CONFIG_PATH
        data = _read_toml(config_path)

    global_values = _section(data, "global")
    stream_values = _section(data, "stream")
    detector_values = _section(data, "detectors")

    env_level = os.environ.get(ENV_LOG_LEVEL)
    if env_level:
        global_values["log_level"] = env_level
    env_merge = os.environ.get(ENV_MERGE)
    if env_merge:
        stream_values["merge"] = _parse_bool(ENV_MERGE, env_merge)

    config = TapstreamConfig(
        global_config=_build(GlobalConfig, "global", global_values),
        stream=_build(StreamConfig, "stream", stream_values),
        detectors=_build(DetectorsConfig, "detectors", detector_values),
    )
    log.debug(
        "Configuration loaded",
        config_path=str(config_path) if config_path else None,
        detectors=list(config.detectors.enabled),
    )
    return config


# 🔼⚙️
