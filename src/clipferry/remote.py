#!/usr/bin/env python3
"""
Remote clipboard instructions and their execution over scp/ssh.

The dispatcher never builds shell strings. It describes what should happen
on the remote clipboard as a RemoteInstruction (an operation plus
structured arguments), and this module alone renders it into a remote
command, quoting paths for the shell and escaping strings for AppleScript.

Supported destinations:
- Platform.WAYLAND: wl-copy, after discovering the session's runtime dir
  and WAYLAND_DISPLAY (an ssh session does not inherit them)
- Platform.MACOS: pbcopy for text, ``osascript -`` for everything else
"""

from __future__ import annotations

import enum
import logging
import shlex
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from clipferry.clipboard_macos import applescript_string

logger = logging.getLogger(__name__)

# Prefix for wl-copy commands run over ssh: point at the logged-in user's
# Wayland socket.
WAYLAND_ENV_SETUP: str = (
    "export XDG_RUNTIME_DIR=/run/user/$(id -u); "
    "export WAYLAND_DISPLAY=$(cd $XDG_RUNTIME_DIR && ls wayland-[0-9]* 2>/dev/null | head -n 1);"
)


class Platform(enum.Enum):
    """Clipboard flavour of a sync destination."""

    MACOS = "macos"
    WAYLAND = "wayland"


class Operation(enum.Enum):
    """What a remote instruction does to the remote clipboard."""

    SET_TEXT = "set_text"
    SET_IMAGE = "set_image"
    SET_FILE_LIST = "set_file_list"
    SET_FILE_OBJECTS = "set_file_objects"


class RemoteError(Exception):
    """Base class for failures of a remote sync step."""

    pass


class TransferFailure(RemoteError):
    """Raised when copying a file to the remote host fails."""

    pass


class RemoteInstructionFailure(RemoteError):
    """Raised when the remote clipboard instruction fails."""

    pass


@dataclass(frozen=True)
class RemoteInstruction:
    """
    Structured description of a remote clipboard change.

    Attributes:
        operation: What to do.
        paths: Remote file paths the operation refers to.
        data: Bytes to place on the clipboard (SET_TEXT).
        mime_type: Content type for SET_IMAGE.
    """

    operation: Operation
    paths: tuple[str, ...] = ()
    data: bytes = b""
    mime_type: str = ""


def shell_path(path: str) -> str:
    """Quote a remote path for the shell, keeping a leading ~/ expandable."""
    if path.startswith("~/"):
        rest = path[2:]
        return "~/" + shlex.quote(rest) if rest else "~/"
    return shlex.quote(path)


def _posix_file(path: str) -> str:
    return f'POSIX file "{applescript_string(path)}"'


def _render_wayland(instruction: RemoteInstruction) -> tuple[str, bytes | None]:
    op = instruction.operation
    if op is Operation.SET_TEXT:
        return f"{WAYLAND_ENV_SETUP} wl-copy", instruction.data
    if op is Operation.SET_IMAGE:
        (path,) = instruction.paths
        mime = shlex.quote(instruction.mime_type or "image/png")
        return f"{WAYLAND_ENV_SETUP} wl-copy --type {mime} < {shell_path(path)}", None
    if op is Operation.SET_FILE_LIST:
        # readlink -f resolves ~ and relative paths; file:// URIs need absolute paths
        resolved = " ".join(f'"$(readlink -f {shell_path(p)})"' for p in instruction.paths)
        return (
            f"{WAYLAND_ENV_SETUP} printf 'file://%s\\n' {resolved} | wl-copy -t text/uri-list",
            None,
        )
    raise ValueError(f"{op.value} is not supported on a Wayland destination")


def _render_macos(instruction: RemoteInstruction) -> tuple[str, bytes | None]:
    op = instruction.operation
    if op is Operation.SET_TEXT:
        return "pbcopy", instruction.data
    if op is Operation.SET_FILE_OBJECTS:
        files = [_posix_file(p) for p in instruction.paths]
        target = f"({files[0]})" if len(files) == 1 else "{" + ", ".join(files) + "}"
        return "osascript -", f"set the clipboard to {target}\n".encode("utf-8")
    raise ValueError(f"{op.value} is not supported on a macOS destination")


def render_instruction(
    instruction: RemoteInstruction, platform: Platform
) -> tuple[str, bytes | None]:
    """
    Render an instruction into a remote shell command.

    Args:
        instruction: The structured instruction.
        platform: Clipboard flavour of the destination.

    Returns:
        Tuple of (remote command, bytes for the command's stdin or None).

    Raises:
        ValueError: If the operation is not available on the platform.
    """
    if platform is Platform.WAYLAND:
        return _render_wayland(instruction)
    return _render_macos(instruction)


Runner = Callable[..., "subprocess.CompletedProcess[bytes]"]


class RemoteExecutor:
    """
    Copy files to, and run clipboard instructions on, one remote host.

    Both operations are synchronous and report success as a bool; they
    are meant to be called from a worker thread. Failures are logged,
    never retried.
    """

    def __init__(
        self,
        host: str,
        platform: Platform,
        user: str | None = None,
        runner: Runner = subprocess.run,
    ) -> None:
        self.host = host
        self.platform = platform
        self.user = user
        self._runner = runner

    @property
    def destination(self) -> str:
        """Host specifier for scp and ssh."""
        return f"{self.user}@{self.host}" if self.user else self.host

    def _run(self, args: list[str], stdin: bytes | None = None) -> bool:
        try:
            if stdin is None:
                completed = self._runner(
                    args, stdin=subprocess.DEVNULL, capture_output=True, check=False
                )
            else:
                completed = self._runner(args, input=stdin, capture_output=True, check=False)
        except OSError as e:
            logger.error("Failed to run %s: %s", args[0], e)
            return False
        if completed.returncode != 0:
            stderr = (completed.stderr or b"").decode("utf-8", "replace").strip()
            logger.error("%s exited with %d: %s", args[0], completed.returncode, stderr)
            return False
        return True

    def transfer_file(self, local_path: Path, remote_path: str) -> bool:
        """Copy a local file to a path on the remote host."""
        logger.debug("scp %s -> %s:%s", local_path, self.destination, remote_path)
        return self._run(["scp", "-q", str(local_path), f"{self.destination}:{remote_path}"])

    def run_instruction(self, instruction: RemoteInstruction) -> bool:
        """Run a clipboard instruction on the remote host."""
        command, stdin = render_instruction(instruction, self.platform)
        logger.debug("ssh %s: %s", self.destination, command)
        return self._run(["ssh", self.destination, command], stdin)
