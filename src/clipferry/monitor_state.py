#!/usr/bin/env python3
"""
Poller state for change detection.

The state tracks two values:
- last_fingerprint: fingerprint of the last observed clipboard state
- last_content: last observed representation bytes (content-level dedup
  on the Wayland side, None on the macOS side)

The state lives for the process lifetime only. A restart treats whatever
is currently on the clipboard as the first observation, which is recorded
but never synced.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clipferry.watchers import Probe


@dataclass(frozen=True)
class MonitorState:
    """
    Last observed clipboard state, owned by the poller.

    Each poll cycle receives the current state and returns the next one;
    nothing else reads or mutates it, so no locking is needed even though
    sync jobs run in the background.

    Attributes:
        last_fingerprint: Fingerprint of the last observed state, or None
            before the first successful probe.
        last_content: Representation bytes of the last observed state, or None.
    """

    last_fingerprint: str | None = None
    last_content: bytes | None = None

    @classmethod
    def initial(cls) -> MonitorState:
        """Return the state of a freshly started poller."""
        return cls()

    @property
    def is_initial(self) -> bool:
        return self.last_fingerprint is None

    def is_unchanged(self, fingerprint: str) -> bool:
        """Check whether a fingerprint matches the last observed state."""
        return fingerprint == self.last_fingerprint

    def record(self, probe: Probe) -> MonitorState:
        """
        Return a new state recording a probe as the last observation.

        Args:
            probe: A successful probe (its fingerprint is never UNKNOWN).
        """
        return replace(self, last_fingerprint=probe.fingerprint, last_content=probe.content)
