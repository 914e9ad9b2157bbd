# src/tapstream/cli/config_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from tapstream.cli.utils import config_path_option, logging_options, setup_logging_from_context
from tapstream.config import load_config
from tapstream.config.loader import DEFAULT_CONFIG_PATH
from tapstream.exceptions import ConfigurationError
from tapstream.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")


# Create a command group for config-related commands
@click.group(name="config")
def config_cli():
    """Commands for inspecting and validating configuration."""
    pass


@config_cli.command(name="show")
@config_path_option
@logging_options
@click.pass_context
def show_config(ctx: click.Context, config_path: Path | None, **kwargs):
    """Load, validate, and display the configuration."""
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )
    log.info("Executing 'config show' command", config_path=str(config_path) if config_path else None)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        source = config_path or (DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.is_file() else None)
        where = f" in '{source}'" if source else ""
        click.echo(f"Error: Configuration problem{where}:\n{e}", err=True)
        ctx.exit(1)

    # Generate a rich-formatted string and echo it for testability.
    click.echo(pretty_repr(config, expand_all=True))

# 🔼⚙️
