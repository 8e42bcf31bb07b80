"""Wayland clipboard access via wl-paste.

wl-paste exits with status 1 and "Nothing is copied" when the clipboard is
empty. That is an ordinary state (an empty type list), not a probe
failure; any other non-zero exit is.
"""

from __future__ import annotations

import logging
import os

from clipferry.clipboard import ProbeFailure, run_command

logger = logging.getLogger(__name__)


def _is_empty_clipboard(stderr: str) -> bool:
    lowered = stderr.lower()
    return "nothing is copied" in lowered or "no selection" in lowered


class WaylandClipboard:
    """Read access to the Wayland regular clipboard."""

    required_tools: tuple[str, ...] = ("wl-paste",)

    def check(self) -> None:
        """Verify a Wayland session is reachable.

        Raises:
            ProbeFailure: If WAYLAND_DISPLAY is unset or wl-paste fails.
        """
        if not os.environ.get("WAYLAND_DISPLAY"):
            raise ProbeFailure("WAYLAND_DISPLAY environment variable is not set")
        self.list_types()

    def list_types(self) -> tuple[str, ...]:
        """Return the MIME types currently offered by the clipboard owner.

        Raises:
            ProbeFailure: If wl-paste fails for a reason other than an
                empty clipboard.
        """
        result = run_command(["wl-paste", "--list-types"])
        if not result.ok:
            if _is_empty_clipboard(result.error_text):
                return ()
            raise ProbeFailure(f"wl-paste --list-types failed: {result.error_text}")
        lines = result.stdout.decode("utf-8", "replace").splitlines()
        return tuple(line.strip() for line in lines if line.strip())

    def read(self, mime_type: str, no_newline: bool = False) -> bytes | None:
        """Return the clipboard contents in a given MIME type.

        Args:
            mime_type: Representation to request.
            no_newline: Ask wl-paste not to append a trailing newline.

        Returns:
            Raw bytes, or None if the representation is unavailable.
        """
        args = ["wl-paste", "--type", mime_type]
        if no_newline:
            args.append("--no-newline")
        try:
            result = run_command(args)
        except ProbeFailure as e:
            logger.debug("Reading %s failed: %s", mime_type, e)
            return None
        if not result.ok:
            return None
        return result.stdout
