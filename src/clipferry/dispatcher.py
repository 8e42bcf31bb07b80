#!/usr/bin/env python3
"""Sync job planning and background dispatch.

A SyncJob is turned into a SyncPlan (files to copy, then one remote
clipboard instruction) by plan_job(), a pure function. The SyncDispatcher
runs each plan in a background asyncio task so the poller never waits on
the network.

Per-destination recipes:
- Wayland: files are copied to the staging directory and registered as a
  text/uri-list; images are copied to a fixed path and set by content
- macOS: files and images are copied to the staging directory and set as
  Finder file objects
- Text is written to the remote clipboard byte for byte on both

Jobs are independent: there is no ordering between them and no
cancellation. Two quick changes can complete out of order, leaving the
remote clipboard on the older one.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from clipferry.models import FilePaths, ImageBytes, TextContent
from clipferry.remote import (
    Operation,
    Platform,
    RemoteError,
    RemoteInstruction,
    RemoteInstructionFailure,
    TransferFailure,
)

if TYPE_CHECKING:
    from clipferry.config import SyncConfig
    from clipferry.models import SyncJob
    from clipferry.remote import RemoteExecutor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncPlan:
    """
    Steps that apply one job to the remote clipboard.

    Attributes:
        transfers: (local path, remote path) pairs copied in order.
        instruction: Remote clipboard instruction run after every transfer
            succeeded.
        cleanup: Local temporary artifacts removed once the plan finished.
    """

    transfers: tuple[tuple[Path, str], ...]
    instruction: RemoteInstruction
    cleanup: tuple[Path, ...] = ()


def remote_join(directory: str, name: str) -> str:
    """Join a remote directory and a file name."""
    if not directory:
        return name
    return directory.rstrip("/") + "/" + name


def macos_absolute_path(user: str | None, path: str) -> str:
    """Make a remote macOS path absolute under the user's home directory.

    Finder file objects need absolute paths; "~" is not expanded there.

    Raises:
        ValueError: If the path is relative and no user is configured.
    """
    if path.startswith("/"):
        return path
    if not user:
        raise ValueError("A remote user is required to resolve paths on a macOS destination")
    if path.startswith("~/"):
        path = path[2:]
    return f"/Users/{user}/{path}"


def image_file_name(image: ImageBytes, now: datetime) -> str:
    """Name under which an image is staged on a macOS destination."""
    return f"clipboard_{now.strftime('%Y-%m-%d_%H-%M-%S')}.{image.image_format}"


def plan_job(
    job: SyncJob,
    platform: Platform,
    config: SyncConfig,
    now: datetime | None = None,
) -> SyncPlan:
    """Build the transfer and instruction steps for a job.

    Args:
        job: The job to apply.
        platform: Clipboard flavour of the destination.
        config: Staging locations and remote user.
        now: Timestamp for staged image names; defaults to the current time.

    Returns:
        The plan for the job.

    Raises:
        ValueError: If the plan cannot be built for the destination.
    """
    payload = job.payload
    staging = config.remote_staging_dir

    if isinstance(payload, TextContent):
        return SyncPlan((), RemoteInstruction(Operation.SET_TEXT, data=payload.data))

    if isinstance(payload, FilePaths):
        staged = tuple(remote_join(staging, path.name) for path in payload.paths)
        transfers = tuple((path, staging) for path in payload.paths)
        if platform is Platform.WAYLAND:
            instruction = RemoteInstruction(Operation.SET_FILE_LIST, paths=staged)
        else:
            absolute = tuple(macos_absolute_path(config.remote_user, p) for p in staged)
            instruction = RemoteInstruction(Operation.SET_FILE_OBJECTS, paths=absolute)
        return SyncPlan(transfers, instruction)

    if isinstance(payload, ImageBytes):
        if platform is Platform.WAYLAND:
            remote = config.remote_image_path
            instruction = RemoteInstruction(
                Operation.SET_IMAGE, paths=(remote,), mime_type=payload.mime_type
            )
        else:
            remote = remote_join(staging, image_file_name(payload, now or datetime.now()))
            instruction = RemoteInstruction(
                Operation.SET_FILE_OBJECTS,
                paths=(macos_absolute_path(config.remote_user, remote),),
            )
        return SyncPlan(((payload.path, remote),), instruction, cleanup=(payload.path,))

    raise ValueError(f"Cannot plan a {job.kind.value} job")


def execute_plan(plan: SyncPlan, executor: RemoteExecutor) -> None:
    """Run a plan synchronously.

    The instruction only runs once every transfer reported success, so a
    partially copied file is never handed to the remote clipboard.

    Raises:
        TransferFailure: If a file could not be copied.
        RemoteInstructionFailure: If the remote instruction failed.
    """
    try:
        for local, remote in plan.transfers:
            if not executor.transfer_file(local, remote):
                raise TransferFailure(f"copying {local} to {remote} failed")
        if not executor.run_instruction(plan.instruction):
            raise RemoteInstructionFailure(
                f"{plan.instruction.operation.value} on {executor.destination} failed"
            )
    finally:
        for path in plan.cleanup:
            path.unlink(missing_ok=True)


def _describe(job: SyncJob) -> str:
    payload = job.payload
    if isinstance(payload, FilePaths):
        return ", ".join(path.name for path in payload.paths)
    if isinstance(payload, ImageBytes):
        return f"{payload.size} byte {payload.image_format} image"
    return f"{len(payload.data)} bytes of text"


class SyncDispatcher:
    """
    Fire-and-forget runner for sync jobs.

    dispatch() schedules a task and returns at once. A semaphore bounds how
    many plans run at the same time; the blocking scp/ssh calls run in
    worker threads.
    """

    def __init__(self, executor: RemoteExecutor, config: SyncConfig) -> None:
        self.executor = executor
        self.config = config
        self._semaphore = asyncio.Semaphore(config.max_in_flight)
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def in_flight(self) -> int:
        """Number of dispatched jobs that have not finished."""
        return len(self._tasks)

    def dispatch(self, job: SyncJob) -> asyncio.Task[None] | None:
        """Schedule a job without waiting for it.

        Must be called from a running event loop.

        Returns:
            The background task, or None if the job could not be planned.
        """
        try:
            plan = plan_job(job, self.executor.platform, self.config)
        except ValueError as e:
            logger.error("Cannot sync %s: %s", job.kind.value, e)
            if isinstance(job.payload, ImageBytes):
                job.payload.path.unlink(missing_ok=True)
            return None

        logger.info("Syncing %s -> %s", _describe(job), job.destination_host)
        task = asyncio.get_running_loop().create_task(self._run(job, plan))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, job: SyncJob, plan: SyncPlan) -> None:
        async with self._semaphore:
            try:
                await asyncio.to_thread(execute_plan, plan, self.executor)
            except RemoteError as e:
                logger.error("Sync of %s to %s failed: %s", job.kind.value, job.destination_host, e)
            else:
                logger.info("Synced %s to %s", _describe(job), job.destination_host)

    async def drain(self, timeout: float) -> int:
        """Wait for in-flight jobs to finish.

        Args:
            timeout: Seconds to wait at most.

        Returns:
            Number of jobs still running when the wait ended.
        """
        if not self._tasks:
            return 0
        _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        return len(pending)
