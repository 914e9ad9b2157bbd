# src/tapstream/cli/utils.py

import logging
from pathlib import Path

import click
import structlog

from tapstream.config import TapstreamConfig, load_config
from tapstream.telemetry.logger import setup_logging as core_setup_logging

log = structlog.get_logger("cli.utils")

LOG_LEVEL_CHOICES = click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False)


def logging_options(f):
    """Decorator to add logging options to any command."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="TAPSTREAM_LOG_LEVEL",
        help="Set the logging level (overrides config file).",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="TAPSTREAM_LOG_FILE",
        help="Path to write logs to a file (JSON format).",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar="TAPSTREAM_JSON_LOGS",
        help="Output console logs as JSON.",
    )(f)
    return f


def config_path_option(f):
    """Decorator adding the shared --config-path option."""
    return click.option(
        "-c",
        "--config-path",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
        default=None,
        envvar="TAPSTREAM_CONF",
        help="Path to the tapstream configuration file (env var TAPSTREAM_CONF).",
        show_envvar=True,
    )(f)


def setup_logging_from_context(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    default_log_level: str = "WARNING",
) -> None:
    """
    Setup logging using context values, allowing local overrides.
    """
    ctx.ensure_object(dict)
    log_level_str = local_log_level or ctx.obj.get("LOG_LEVEL") or default_log_level
    log_file_path = local_log_file or ctx.obj.get("LOG_FILE")
    use_json_logs = local_json_logs if local_json_logs is not None else ctx.obj.get("JSON_LOGS", False)

    numeric_level = logging.getLevelName(log_level_str.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        log_level_str = "INFO"

    core_setup_logging(
        level=numeric_level,
        json_logs=use_json_logs,
        log_file=log_file_path,
    )

    log.debug(
        "CLI logging initialized via utils",
        level=log_level_str,
        file=log_file_path or "console",
        json=use_json_logs,
    )


def load_config_and_setup_logging(
    ctx: click.Context, config_path: Path | None, options: dict
) -> TapstreamConfig:
    """
    Configure logging, then load the configuration.

    Logging must be configured before anything logs, or structlog falls back
    to printing on stdout. When no log level came from the command line, the
    configured level is applied once the file is loaded. ConfigurationError
    propagates to the caller.
    """
    local = {
        "local_log_level": options.get("log_level"),
        "local_log_file": options.get("log_file"),
        "local_json_logs": options.get("json_logs"),
    }
    setup_logging_from_context(ctx, **local)
    config = load_config(config_path)

    if not (local["local_log_level"] or ctx.obj.get("LOG_LEVEL")):
        configured = config.global_config.log_level.upper()
        if configured != "WARNING":
            setup_logging_from_context(ctx, **local, default_log_level=configured)
    return config


def build_raw_source(sources: tuple[str, ...], force_exec: bool) -> object:
    """
    Turn command-line arguments into a raw source.

    A single argument is a path; several arguments, or ``--exec``, form an
    ``{"exec": [...]}`` spec.
    """
    if force_exec or len(sources) > 1:
        return {"exec": list(sources)}
    return sources[0]

# ⚙️🛠️
