#!/usr/bin/env python3
"""
Tests for monitor startup, the poll loop and shutdown.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from clipferry.app import print_startup_message, run_monitor
from clipferry.clipboard import ClipboardUnavailable
from clipferry.config import SyncConfig
from clipferry.monitor_state import MonitorState
from clipferry.poller import run_poller
from clipferry.remote import Platform
from clipferry.watchers import MacWatcher, WaylandWatcher, build_watcher


def test_build_watcher_per_direction(macos_config: SyncConfig, wayland_config: SyncConfig) -> None:
    """Test each direction gets its platform watcher."""
    assert isinstance(build_watcher("macos", macos_config), MacWatcher)
    assert isinstance(build_watcher("wayland", wayland_config), WaylandWatcher)
    with pytest.raises(ValueError):
        build_watcher("windows", macos_config)


def test_print_startup_message(
    macos_config: SyncConfig, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test the banner names direction, target and cadence."""
    print_startup_message("macos", macos_config)
    captured = capsys.readouterr()
    assert "macos -> wayland" in captured.err
    assert "archy.local" in captured.err
    assert "500 ms" in captured.err


@pytest.mark.asyncio
async def test_run_poller_stops_on_shutdown() -> None:
    """Test the loop polls until the shutdown event is set."""
    shutdown = asyncio.Event()
    calls = 0

    async def fake_poll_once(state, watcher, dispatcher):
        nonlocal calls
        calls += 1
        if calls == 3:
            shutdown.set()
        return state

    with patch("clipferry.poller.poll_once", side_effect=fake_poll_once):
        state = await run_poller(MagicMock(), MagicMock(), 0.001, shutdown)

    assert calls == 3
    assert state == MonitorState.initial()


@pytest.mark.asyncio
async def test_run_poller_returns_immediately_when_already_stopped() -> None:
    """Test no cycle runs after shutdown was requested."""
    shutdown = asyncio.Event()
    shutdown.set()
    with patch("clipferry.poller.poll_once", new_callable=AsyncMock) as poll:
        await run_poller(MagicMock(), MagicMock(), 1.0, shutdown)
    poll.assert_not_called()


@pytest.mark.asyncio
async def test_run_monitor_validates_before_loop(macos_config: SyncConfig) -> None:
    """Test an unusable clipboard aborts before polling starts."""
    with patch(
        "clipferry.app.validate_clipboard", side_effect=ClipboardUnavailable("osascript missing")
    ), patch("clipferry.app.run_poller", new_callable=AsyncMock) as poller:
        with pytest.raises(ClipboardUnavailable):
            await run_monitor("macos", macos_config)
    poller.assert_not_called()


@pytest.mark.asyncio
async def test_run_monitor_wires_direction_and_prints_shutdown(
    wayland_config: SyncConfig, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test the Wayland direction targets a macOS executor and exits cleanly."""
    with patch("clipferry.app.validate_clipboard"), patch(
        "clipferry.app.run_poller", new_callable=AsyncMock
    ) as poller:
        await run_monitor("wayland", wayland_config)

    watcher, dispatcher, interval, shutdown = poller.call_args.args
    assert isinstance(watcher, WaylandWatcher)
    assert dispatcher.executor.platform is Platform.MACOS
    assert dispatcher.executor.destination == "cgenco@Max.local"
    assert interval == 1.0
    assert isinstance(shutdown, asyncio.Event)
    assert capsys.readouterr().err.rstrip().endswith("Stopped.")
