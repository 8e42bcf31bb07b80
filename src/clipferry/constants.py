#!/usr/bin/env python3
"""Default settings for both sync directions.

These constants are the fallbacks used when neither a command-line option
nor a CLIPFERRY_* environment variable overrides them.
"""

# macOS -> Linux/Wayland direction.
MACOS_REMOTE_HOST: str = "archy.local"
MACOS_POLL_INTERVAL_MS: int = 500
MACOS_TEMP_IMAGE_PATH: str = "/tmp/clipboard_sync_image.png"
MACOS_REMOTE_STAGING_DIR: str = "~/Downloads/"
MACOS_REMOTE_IMAGE_PATH: str = "/tmp/clip.png"

# Linux/Wayland -> macOS direction.
WAYLAND_REMOTE_HOST: str = "Max.local"
WAYLAND_REMOTE_USER: str = "cgenco"
WAYLAND_POLL_INTERVAL_MS: int = 1000
WAYLAND_TEMP_IMAGE_PATH: str = "/tmp/linux_clipboard_sync_image.png"
WAYLAND_REMOTE_STAGING_DIR: str = "Downloads/"

# Maximum number of sync jobs running at once.
MAX_IN_FLIGHT: int = 4

# Timeout in seconds for local clipboard commands (osascript, wl-paste).
COMMAND_TIMEOUT: float = 5.0

# Startup probe retry parameters for exponential backoff.
STARTUP_ATTEMPTS: int = 3
STARTUP_INITIAL_WAIT: float = 0.5
STARTUP_MAX_WAIT: float = 4.0

# Seconds to wait for in-flight jobs after an interrupt before exiting.
SHUTDOWN_DRAIN_TIMEOUT: float = 5.0
