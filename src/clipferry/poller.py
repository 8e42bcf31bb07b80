#!/usr/bin/env python3
"""Main polling loop.

Each cycle probes the clipboard, compares the fingerprint with the last
observed one and, on a change, hands the resulting job to the dispatcher
without waiting for it:

    Idle -> Probing -> Unchanged -> Idle
                    -> Changed -> classify/extract/dispatch -> Idle

A failed probe is "no new information" and leaves the state untouched.
The very first observation is recorded but never synced. A change is
consumed even when extraction fails; it is not retried until the
clipboard changes again.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from clipferry.monitor_state import MonitorState

if TYPE_CHECKING:
    from clipferry.dispatcher import SyncDispatcher
    from clipferry.watchers import MacWatcher, WaylandWatcher

logger = logging.getLogger(__name__)


async def poll_once(
    state: MonitorState,
    watcher: MacWatcher | WaylandWatcher,
    dispatcher: SyncDispatcher,
) -> MonitorState:
    """Run one poll cycle.

    Clipboard commands block, so probing and extraction run in a worker
    thread; background sync tasks keep running meanwhile.

    Args:
        state: State returned by the previous cycle.
        watcher: Platform watcher.
        dispatcher: Receives at most one job per cycle.

    Returns:
        The state for the next cycle.
    """
    probe = await asyncio.to_thread(watcher.probe)
    if probe is None:
        return state

    if state.is_initial:
        logger.debug("Recorded initial clipboard state")
        return state.record(probe)

    if state.is_unchanged(probe.fingerprint):
        return state

    try:
        job = await asyncio.to_thread(watcher.handle, probe)
    except OSError as e:
        logger.warning("Extracting the clipboard failed: %s", e)
        job = None
    if job is not None:
        dispatcher.dispatch(job)
    return state.record(probe)


async def run_poller(
    watcher: MacWatcher | WaylandWatcher,
    dispatcher: SyncDispatcher,
    interval: float,
    shutdown_requested: asyncio.Event,
    state: MonitorState | None = None,
) -> MonitorState:
    """Poll the clipboard until shutdown is requested.

    Args:
        watcher: Platform watcher.
        dispatcher: Background job dispatcher.
        interval: Seconds between cycles.
        shutdown_requested: Event set by the SIGINT/SIGTERM handlers.
        state: Starting state; a fresh state if omitted.

    Returns:
        The last state, for inspection after shutdown.
    """
    if state is None:
        state = MonitorState.initial()
    while not shutdown_requested.is_set():
        state = await poll_once(state, watcher, dispatcher)
        with suppress(asyncio.TimeoutError):
            await asyncio.wait_for(shutdown_requested.wait(), timeout=interval)
    return state
