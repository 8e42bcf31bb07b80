"""Local clipboard command plumbing.

Neither macOS nor Wayland offers a clipboard change notification that a
plain process can subscribe to, so clipferry polls the platform clipboard
tools (osascript and pbpaste on macOS, wl-paste on Wayland) as
subprocesses.

The module handles:
- Running a clipboard command with a timeout and capturing its output
- Distinguishing probe failures from "nothing on the clipboard"
- Validating at startup that the local clipboard is usable at all
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol

from tenacity import RetryError, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from clipferry.constants import (
    COMMAND_TIMEOUT,
    STARTUP_ATTEMPTS,
    STARTUP_INITIAL_WAIT,
    STARTUP_MAX_WAIT,
)

logger = logging.getLogger(__name__)


class ProbeFailure(Exception):
    """
    Exception raised when the clipboard state cannot be read.

    Transient and non-fatal: the poller treats it as "unchanged".
    """

    pass


class ClipboardUnavailable(Exception):
    """
    Exception raised when the local clipboard cannot be used at all.

    Only raised at startup, before the poll loop is entered.
    """

    pass


class LocalClipboard(Protocol):
    """Local clipboard that can be validated at startup."""

    required_tools: tuple[str, ...]

    def check(self) -> None: ...


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a clipboard command."""

    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def error_text(self) -> str:
        return self.stderr.decode("utf-8", "replace").strip()


def run_command(
    args: list[str],
    input: bytes | None = None,
    timeout: float = COMMAND_TIMEOUT,
) -> CommandResult:
    """Run a clipboard command and capture its output.

    A non-zero exit status is returned, not raised: clipboard tools use it
    for ordinary conditions such as an empty clipboard.

    Args:
        args: Command and arguments.
        input: Optional bytes written to the command's stdin.
        timeout: Seconds to wait before giving up.

    Returns:
        CommandResult with exit status and raw output.

    Raises:
        ProbeFailure: If the command is missing, cannot be started or
            times out.
    """
    logger.debug("exec: %s", " ".join(args))
    try:
        completed = subprocess.run(
            args,
            input=input,
            capture_output=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise ProbeFailure(f"{args[0]} not found") from e
    except subprocess.TimeoutExpired as e:
        raise ProbeFailure(f"{args[0]} timed out after {timeout} seconds") from e
    except OSError as e:
        raise ProbeFailure(f"{args[0]} could not be run: {e}") from e
    result = CommandResult(completed.returncode, completed.stdout, completed.stderr)
    if not result.ok:
        logger.debug("exec rc=%s stderr=%s", result.returncode, result.error_text)
    return result


def missing_tools(tools: tuple[str, ...]) -> list[str]:
    """Return the tools that are not found on PATH."""
    return [tool for tool in tools if shutil.which(tool) is None]


@retry(
    wait=wait_exponential(min=STARTUP_INITIAL_WAIT, max=STARTUP_MAX_WAIT),
    retry=retry_if_exception_type(ProbeFailure),
    stop=stop_after_attempt(STARTUP_ATTEMPTS),
)
def _check_with_retry(clipboard: LocalClipboard) -> None:
    """Run the clipboard's own check, retrying transient failures."""
    clipboard.check()


def validate_clipboard(clipboard: LocalClipboard) -> None:
    """Validate that the local clipboard can be probed.

    Should be called at startup to fail fast. Missing tools are fatal right
    away; a failing probe is retried with exponential backoff since the
    clipboard service may still be starting (e.g. right after login).

    Args:
        clipboard: MacClipboard or WaylandClipboard instance.

    Raises:
        ClipboardUnavailable: If the clipboard cannot be used.
    """
    missing = missing_tools(clipboard.required_tools)
    if missing:
        raise ClipboardUnavailable(f"Required clipboard tools not found: {', '.join(missing)}")

    try:
        _check_with_retry(clipboard)
    except RetryError as e:
        cause = e.last_attempt.exception()
        raise ClipboardUnavailable(f"Clipboard probe failed: {cause}") from cause
