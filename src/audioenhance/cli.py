"""Command-line interface for audioenhance."""

import asyncio
import sys
from pathlib import Path

import click

from audioenhance import __version__
from audioenhance.config import load_config
from audioenhance.core.pipeline import EnhancementPipeline
from audioenhance.errors import EnhanceError
from audioenhance.utils.logger import get_logger, setup_logging

TRACK_COLORS = {"enhanced": "green", "skipped": "yellow", "failed": "red"}


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (defaults to built-in defaults)",
)
@click.pass_context
def cli(ctx, config):
    """audioenhance - Louder stereo downmixes for multi-track MKV files."""
    try:
        cfg = load_config(config)
        ctx.ensure_object(dict)
        ctx.obj["config"] = cfg

        setup_logging(cfg.logging)

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(path_type=Path))
@click.pass_context
def enhance(ctx, file):
    """Add an enhanced stereo track next to every audio track of FILE.

    Writes <name>_enhanced.mkv beside the input.
    """
    config = ctx.obj["config"]
    logger = get_logger(__name__)

    pipeline = EnhancementPipeline(config)

    try:
        result = asyncio.run(pipeline.run(file))
    except EnhanceError as e:
        logger.error("Enhancement failed", file=str(file), error=str(e))
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    for track_result in result.tracks:
        color = TRACK_COLORS[track_result.status]
        click.secho(f"  {track_result}", fg=color)

    if result.cleanup_error:
        click.secho(f"⊘ {result.cleanup_error}", fg="yellow", err=True)

    click.echo(f"Enhanced MKV generated: {result.output_path}")


@cli.command()
def version():
    """Show version information."""
    click.echo(f"audioenhance v{__version__}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
