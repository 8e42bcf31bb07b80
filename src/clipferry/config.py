#!/usr/bin/env python3
"""Runtime configuration for a sync direction.

A direction names the local clipboard being watched; the destination is
the other platform:
- "macos": watch the macOS pasteboard, push to a Linux/Wayland host
- "wayland": watch the Wayland clipboard, push to a macOS host
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path

from clipferry import constants
from clipferry.remote import Platform

DIRECTIONS: tuple[str, ...] = ("macos", "wayland")


@dataclass(frozen=True)
class SyncConfig:
    """Settings for one running monitor.

    Attributes:
        remote_host: Host whose clipboard receives changes.
        remote_user: Login on the remote host, or None for the ssh default.
            A macOS destination also needs it to build /Users/<user> paths.
        poll_interval_ms: Delay between poll cycles.
        temp_image_path: Template for local temporary image files.
        remote_staging_dir: Remote directory that receives copied files.
        remote_image_path: Remote path for images sent to a Wayland host.
        max_in_flight: Maximum number of sync jobs running at once.
    """

    remote_host: str
    remote_user: str | None
    poll_interval_ms: int
    temp_image_path: Path
    remote_staging_dir: str
    remote_image_path: str = constants.MACOS_REMOTE_IMAGE_PATH
    max_in_flight: int = constants.MAX_IN_FLIGHT

    @property
    def poll_interval(self) -> float:
        """Delay between poll cycles in seconds."""
        return self.poll_interval_ms / 1000

    @classmethod
    def for_direction(cls, direction: str, **overrides: object) -> SyncConfig:
        """Build the configuration for a direction.

        Args:
            direction: "macos" or "wayland".
            **overrides: Field values replacing the defaults; None values
                are ignored so unset CLI options keep the default.

        Raises:
            ValueError: On an unknown direction or field, or a non-positive
                interval or job limit.
        """
        if direction == "macos":
            config = cls(
                remote_host=constants.MACOS_REMOTE_HOST,
                remote_user=None,
                poll_interval_ms=constants.MACOS_POLL_INTERVAL_MS,
                temp_image_path=Path(constants.MACOS_TEMP_IMAGE_PATH),
                remote_staging_dir=constants.MACOS_REMOTE_STAGING_DIR,
            )
        elif direction == "wayland":
            config = cls(
                remote_host=constants.WAYLAND_REMOTE_HOST,
                remote_user=constants.WAYLAND_REMOTE_USER,
                poll_interval_ms=constants.WAYLAND_POLL_INTERVAL_MS,
                temp_image_path=Path(constants.WAYLAND_TEMP_IMAGE_PATH),
                remote_staging_dir=constants.WAYLAND_REMOTE_STAGING_DIR,
            )
        else:
            raise ValueError(f"Unknown direction: {direction}")

        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown configuration fields: {', '.join(sorted(unknown))}")
        values = {k: v for k, v in overrides.items() if v is not None}
        if "temp_image_path" in values:
            values["temp_image_path"] = Path(str(values["temp_image_path"]))
        config = replace(config, **values)

        if config.poll_interval_ms <= 0:
            raise ValueError("Poll interval must be positive")
        if config.max_in_flight <= 0:
            raise ValueError("Maximum number of in-flight jobs must be positive")
        return config
