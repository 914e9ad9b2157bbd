# src/tapstream/cli/detect_cmds.py

from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.table import Table

from tapstream.cli.utils import (
    build_raw_source,
    config_path_option,
    load_config_and_setup_logging,
    logging_options,
)
from tapstream.exceptions import ConfigurationError, NoMatchingSourceError, TapstreamError
from tapstream.sources import Source, build_registry
from tapstream.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.detect")


@click.command(
    name="detect",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
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
def detect_cli(
    ctx: click.Context,
    sources: tuple[str, ...],
    force_exec: bool,
    config_path: Path | None,
    **kwargs,
):
    """Show how every detector scores a source, without running anything."""
    try:
        config = load_config_and_setup_logging(ctx, config_path, kwargs)
    except ConfigurationError as e:
        click.echo(f"Error: Configuration problem: {e}", err=True)
        ctx.exit(2)

    try:
        registry = build_registry(config.detectors.enabled, config.stream)
        source = Source.coerce(build_raw_source(sources, force_exec))
        scores = registry.score_all(source)
    except TapstreamError as e:
        log.error("Detection failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(2)

    table = Table(title=f"Detectors for {source.raw}")
    table.add_column("Order", justify="right")
    table.add_column("Detector")
    table.add_column("Score", justify="right")
    for registration, score in scores:
        table.add_row(str(registration.order), registration.name, f"{score:.2f}")
    Console().print(table)

    try:
        winner = registry.resolve(source)
    except NoMatchingSourceError as e:
        click.echo(f"No match: {e}")
        ctx.exit(1)
    click.echo(f"Selected: {winner.name} ({winner.score:.2f})")

# 🔼⚙️
