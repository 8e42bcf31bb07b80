"""macOS clipboard access via osascript and pbpaste.

The clipboard info string reported by AppleScript (``clipboard info``) is
cheap to fetch and lists every representation with its size, which makes
it a good change-detection input. Payloads are fetched lazily, once a
change has been classified.
"""

from __future__ import annotations

import logging
from pathlib import Path

from clipferry.clipboard import ProbeFailure, run_command

logger = logging.getLogger(__name__)

INFO_SCRIPT: tuple[str, ...] = ("try", "return (clipboard info) as string", "end try")

FURL_SCRIPT: str = """\
try
  set clipboardData to (the clipboard as «class furl»)
  return POSIX path of clipboardData
on error
  return ""
end try"""

# Writes the clipboard image to a file, preferring PNG and falling back
# to TIFF. Prints the encoding that was written, or ERROR.
IMAGE_SCRIPT_TEMPLATE: str = """\
set theFile to (POSIX file "{path}")
try
  set theOpenedFile to open for access theFile with write permission
  set eof of theOpenedFile to 0
  try
    write (the clipboard as «class PNGf») to theOpenedFile
    set theFormat to "png"
  on error
    write (the clipboard as TIFF picture) to theOpenedFile
    set theFormat to "tiff"
  end try
  close access theOpenedFile
  return theFormat
on error
  try
    close access theFile
  end try
  return "ERROR"
end try"""


def applescript_string(value: str) -> str:
    """Escape a value for use inside an AppleScript string literal."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _osascript(*lines: str) -> list[str]:
    """Build an osascript command running the given script lines."""
    args = ["osascript"]
    for line in lines:
        args.extend(["-e", line])
    return args


class MacClipboard:
    """Read access to the macOS general pasteboard."""

    required_tools: tuple[str, ...] = ("osascript", "pbpaste")

    def check(self) -> None:
        """Verify AppleScript can talk to the pasteboard.

        Raises:
            ProbeFailure: If the probe command fails.
        """
        result = run_command(_osascript(*INFO_SCRIPT))
        if not result.ok:
            raise ProbeFailure(f"osascript failed: {result.error_text}")

    def read_info(self) -> str:
        """Return the clipboard info string.

        Raises:
            ProbeFailure: If osascript cannot report clipboard state.
        """
        result = run_command(_osascript(*INFO_SCRIPT))
        if not result.ok:
            raise ProbeFailure(f"clipboard info failed: {result.error_text}")
        return result.stdout.decode("utf-8", "replace").strip()

    def read_file_url(self) -> str:
        """Return the clipboard's public.file-url representation, or ""."""
        result = run_command(["pbpaste", "-Prefer", "public.file-url"])
        if not result.ok:
            return ""
        return result.stdout.decode("utf-8", "replace").strip()

    def read_furl_path(self) -> str:
        """Return the POSIX path of the clipboard's «class furl», or ""."""
        result = run_command(_osascript(*FURL_SCRIPT.splitlines()))
        if not result.ok:
            return ""
        return result.stdout.decode("utf-8", "replace").strip()

    def write_image(self, path: Path) -> str | None:
        """Write the clipboard image to a file.

        Args:
            path: Local file to (over)write.

        Returns:
            "png" or "tiff" for the encoding written, None on failure.
        """
        script = IMAGE_SCRIPT_TEMPLATE.format(path=applescript_string(str(path)))
        result = run_command(_osascript(*script.splitlines()))
        image_format = result.stdout.decode("utf-8", "replace").strip()
        if not result.ok or image_format not in ("png", "tiff"):
            logger.debug("Image export failed: %s", result.error_text or image_format)
            return None
        return image_format

    def read_text(self) -> bytes:
        """Return the plain text clipboard contents."""
        result = run_command(["pbpaste"])
        if not result.ok:
            return b""
        return result.stdout
