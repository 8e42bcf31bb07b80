#!/usr/bin/env python3
"""Pytest fixtures for clipferry tests.

Provides configurations for both directions, mock local clipboards and a
mock remote executor that records what it was asked to do.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from clipferry.clipboard_macos import MacClipboard
from clipferry.clipboard_wayland import WaylandClipboard
from clipferry.config import SyncConfig
from clipferry.remote import Platform, RemoteExecutor


@pytest.fixture
def macos_config(tmp_path: Path) -> SyncConfig:
    """Configuration for the macOS -> Wayland direction."""
    return SyncConfig.for_direction(
        "macos", temp_image_path=tmp_path / "clipboard_sync_image.png"
    )


@pytest.fixture
def wayland_config(tmp_path: Path) -> SyncConfig:
    """Configuration for the Wayland -> macOS direction."""
    return SyncConfig.for_direction(
        "wayland", temp_image_path=tmp_path / "linux_clipboard_sync_image.png"
    )


@pytest.fixture
def mac_clipboard() -> MagicMock:
    """Mock macOS clipboard with nothing usable on it."""
    clipboard = MagicMock(spec=MacClipboard)
    clipboard.read_file_url.return_value = ""
    clipboard.read_furl_path.return_value = ""
    clipboard.write_image.return_value = None
    clipboard.read_text.return_value = b""
    return clipboard


@pytest.fixture
def wayland_clipboard() -> MagicMock:
    """Mock Wayland clipboard with nothing readable on it."""
    clipboard = MagicMock(spec=WaylandClipboard)
    clipboard.list_types.return_value = ()
    clipboard.read.return_value = None
    return clipboard


@pytest.fixture
def mock_executor() -> MagicMock:
    """Mock executor for a Wayland destination where every step succeeds."""
    executor = MagicMock(spec=RemoteExecutor)
    executor.platform = Platform.WAYLAND
    executor.destination = "archy.local"
    executor.transfer_file.return_value = True
    executor.run_instruction.return_value = True
    return executor


def write_png(data: bytes = b"\x89PNG\r\n\x1a\nfake"):
    """Build a MacClipboard.write_image side effect writing PNG bytes."""

    def _write(path: Path) -> str:
        Path(path).write_bytes(data)
        return "png"

    return _write
