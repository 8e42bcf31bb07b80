#!/usr/bin/env python3
"""Monitor entry point for clipferry.

This module wires a watcher, a remote executor and a dispatcher together
for one direction and runs the poll loop until SIGINT or SIGTERM.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import TYPE_CHECKING

from clipferry.clipboard import validate_clipboard
from clipferry.constants import SHUTDOWN_DRAIN_TIMEOUT
from clipferry.dispatcher import SyncDispatcher
from clipferry.poller import run_poller
from clipferry.remote import Platform, RemoteExecutor
from clipferry.watchers import build_watcher

if TYPE_CHECKING:
    from clipferry.config import SyncConfig

logger = logging.getLogger(__name__)

# Clipboard flavour on the far end of each direction.
DESTINATIONS: dict[str, Platform] = {
    "macos": Platform.WAYLAND,
    "wayland": Platform.MACOS,
}


def print_startup_message(direction: str, config: SyncConfig) -> None:
    """Print the startup banner to stderr.

    Args:
        direction: The local clipboard being watched.
        config: The active configuration.
    """
    destination = DESTINATIONS[direction].value
    print(f"Clipboard sync started: {direction} -> {destination}", file=sys.stderr)
    print(f"Target: {config.remote_host}", file=sys.stderr)
    print(f"Polling every {config.poll_interval_ms} ms (Files > Images > Text)", file=sys.stderr)


async def run_monitor(direction: str, config: SyncConfig) -> None:
    """Run the clipboard monitor for one direction.

    Validates the local clipboard before entering the loop, then polls
    until a signal arrives. In-flight jobs get a bounded grace period to
    finish before the shutdown notice is printed.

    Args:
        direction: "macos" or "wayland".
        config: The active configuration.

    Raises:
        ClipboardUnavailable: If the local clipboard cannot be used.
    """
    watcher = build_watcher(direction, config)
    validate_clipboard(watcher.clipboard)

    executor = RemoteExecutor(config.remote_host, DESTINATIONS[direction], config.remote_user)
    dispatcher = SyncDispatcher(executor, config)
    print_startup_message(direction, config)

    # Register signal handlers for clean shutdown
    shutdown_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, shutdown_requested.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown_requested.set)

    try:
        await run_poller(watcher, dispatcher, config.poll_interval, shutdown_requested)
    finally:
        loop.remove_signal_handler(signal.SIGINT)
        loop.remove_signal_handler(signal.SIGTERM)

    pending = await dispatcher.drain(SHUTDOWN_DRAIN_TIMEOUT)
    if pending:
        logger.warning("%d sync job(s) still running at shutdown", pending)
    print("Stopped.", file=sys.stderr)
