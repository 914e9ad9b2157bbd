# src/tapstream/cli/run_cmds.py

from pathlib import Path

import click
import structlog

from tapstream.cli.utils import (
    build_raw_source,
    config_path_option,
    load_config_and_setup_logging,
    logging_options,
)
from tapstream.exceptions import ConfigurationError, TapstreamError
from tapstream.sources import build_registry
from tapstream.telemetry import StructLogger, enable_autoflush

log: StructLogger = structlog.get_logger("cli.run")


@click.command(
    name="run",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.option(
    "--merge/--no-merge",
    default=None,
    help="Interleave the child's stderr into the streamed lines (default from config).",
)
@click.option(
    "--exec",
    "force_exec",
    is_flag=True,
    default=False,
    help="Treat the arguments as a command even when there is only one.",
)
@config_path_option
@logging_options
@click.argument("sources", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def run_cli(
    ctx: click.Context,
    sources: tuple[str, ...],
    merge: bool | None,
    force_exec: bool,
    config_path: Path | None,
    **kwargs,
):
    """Stream the output of a test source line by line.

    A single SOURCE is a path to a test script; several SOURCE arguments form
    a command. The exit code is that of the child process.
    """
    try:
        config = load_config_and_setup_logging(ctx, config_path, kwargs)
    except ConfigurationError as e:
        click.echo(f"Error: Configuration problem: {e}", err=True)
        ctx.exit(2)

    enable_autoflush()

    merge = config.stream.merge if merge is None else merge
    log.info("Executing 'run' command", sources=list(sources), merge=merge)

    try:
        registry = build_registry(config.detectors.enabled, config.stream)
        stream = registry.make_stream(build_raw_source(sources, force_exec), merge=merge)
    except TapstreamError as e:
        log.error("Could not start source", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(2)

    with stream:
        for line in stream:
            click.echo(line)

    status = stream.exit_status
    log.info("'run' command finished", exit_code=status.code, signal=status.signal)
    if not status.success:
        ctx.exit(status.shell_code)

# 🔼⚙️
