# src/tapstream/cli/main.py

"""
Main CLI entry point for tapstream using Click.
Handles global options like logging level.
"""

from importlib.metadata import PackageNotFoundError, version

import click

from tapstream.cli.config_cmds import config_cli
from tapstream.cli.detect_cmds import detect_cli
from tapstream.cli.run_cmds import run_cli
from tapstream.cli.utils import logging_options

try:
    __version__ = version("tapstream")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="tapstream")
@logging_options
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str | None,
    log_file: str | None,
    json_logs: bool | None,
):
    """
    Tapstream: stream test output from scripts and commands.

    Detects which strategy can handle a test source and streams its output.
    Configuration precedence: CLI options > Environment Variables > Config File > Defaults.
    """
    ctx.ensure_object(dict)

    ctx.obj["LOG_LEVEL"] = log_level
    ctx.obj["LOG_FILE"] = log_file
    ctx.obj["JSON_LOGS"] = json_logs if json_logs is not None else False


cli.add_command(config_cli)
cli.add_command(detect_cli)
cli.add_command(run_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
