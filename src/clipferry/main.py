"""CLI handling for clipferry.

This module provides the command-line interface for clipferry, handling
argument parsing via click, logging configuration, and starting the
monitor for the selected direction. Every option can also be set with a
CLIPFERRY_* environment variable.

Usage:
    clipferry --macos [--host HOST] [--interval MS] [--verbose]
    clipferry --wayland [--host HOST] [--user USER] [--verbose]
"""

import click
import sys

from clipferry.main_options import DirectionOption
from clipferry.main_logging import configure_logging



@click.command()
@click.option(
    "--macos",
    is_flag=True,
    cls=DirectionOption,
    conflicts_with=["wayland"],
    help="Watch the macOS clipboard and push to a Wayland host",
)
@click.option(
    "--wayland",
    is_flag=True,
    cls=DirectionOption,
    conflicts_with=["macos"],
    help="Watch the Wayland clipboard and push to a macOS host",
)
@click.option("--host", envvar="CLIPFERRY_HOST", help="Remote host to sync to")
@click.option("--user", envvar="CLIPFERRY_USER", help="Login on the remote host")
@click.option(
    "--interval",
    envvar="CLIPFERRY_INTERVAL",
    type=click.IntRange(min=1),
    help="Milliseconds between clipboard polls",
)
@click.option(
    "--temp-image",
    envvar="CLIPFERRY_TEMP_IMAGE",
    type=click.Path(dir_okay=False),
    help="Local path template for temporary image files",
)
@click.option(
    "--staging-dir",
    envvar="CLIPFERRY_STAGING_DIR",
    help="Remote directory receiving copied files",
)
@click.option(
    "--remote-image",
    envvar="CLIPFERRY_REMOTE_IMAGE",
    help="Remote path for images sent to a Wayland host",
)
@click.option(
    "--max-jobs",
    envvar="CLIPFERRY_MAX_JOBS",
    type=click.IntRange(min=1),
    help="Maximum number of syncs running at once",
)
@click.option(
    "--verbose",
    is_flag=True,
    envvar="CLIPFERRY_VERBOSE",
    help="Enable DEBUG-level logging",
)
def main(
    macos: bool,
    wayland: bool,
    host: str | None,
    user: str | None,
    interval: int | None,
    temp_image: str | None,
    staging_dir: str | None,
    remote_image: str | None,
    max_jobs: int | None,
    verbose: bool,
) -> None:
    """Keep the clipboard of a macOS and a Wayland machine in sync over SSH."""
    if not macos and not wayland:
        raise click.UsageError("Either --macos or --wayland must be specified")

    from clipferry.config import SyncConfig

    direction = "macos" if macos else "wayland"
    config = SyncConfig.for_direction(
        direction,
        remote_host=host,
        remote_user=user,
        poll_interval_ms=interval,
        temp_image_path=temp_image,
        remote_staging_dir=staging_dir,
        remote_image_path=remote_image,
        max_in_flight=max_jobs,
    )

    configure_logging(verbose)

    _run_mode(direction, config)


def _run_mode(direction: str, config) -> None:
    """Run the monitor, exiting with status 1 if the clipboard is unusable.

    Args:
        direction: "macos" or "wayland".
        config: The SyncConfig for the direction.
    """
    import asyncio
    from clipferry.app import run_monitor
    from clipferry.clipboard import ClipboardUnavailable

    try:
        asyncio.run(run_monitor(direction, config))
    except ClipboardUnavailable as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
