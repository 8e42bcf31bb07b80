#!/usr/bin/env python3
"""Per-platform clipboard watchers.

A watcher answers two questions for the poller:
- probe(): what does the clipboard look like right now (cheaply)?
- handle(): the clipboard changed; which job, if any, should be sent?

The macOS watcher fingerprints the clipboard info string, which already
lists every representation with its size. Wayland only reports MIME
types, which rarely change between two copies of text, so the Wayland
watcher also reads the representation it would sync and folds it into
the fingerprint (content-level dedup). Text is compared with surrounding
whitespace stripped, so content echoed back by the peer with an extra
newline is not mistaken for a new change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clipferry.classifier import classify, pick_image_type, pick_text_type
from clipferry.clipboard import ProbeFailure
from clipferry.clipboard_macos import MacClipboard
from clipferry.clipboard_wayland import WaylandClipboard
from clipferry.extractor import MacExtractor, WaylandExtractor, extract_with_fallback
from clipferry.fingerprint import compute_fingerprint, normalize_text
from clipferry.models import Kind, SyncJob

if TYPE_CHECKING:
    from clipferry.config import SyncConfig
    from clipferry.fingerprint import RawInfo

logger = logging.getLogger(__name__)

# Longest clipboard info excerpt included in change log lines.
INFO_PREVIEW_LENGTH: int = 100


@dataclass(frozen=True)
class Probe:
    """
    Result of one successful clipboard probe.

    Attributes:
        info: Raw clipboard description.
        fingerprint: Fingerprint of the state.
        content: Normalised representation bytes used for dedup, or None.
        prefetched: Raw representation bytes already read, or None.
    """

    info: RawInfo
    fingerprint: str
    content: bytes | None = None
    prefetched: bytes | None = None


def _build_job(
    extractor: MacExtractor | WaylandExtractor,
    probe: Probe,
    destination_host: str,
) -> SyncJob | None:
    payload = extract_with_fallback(extractor, probe.info, probe.prefetched)
    if payload is None:
        logger.info("Empty clipboard or unknown format, nothing to sync")
        return None
    return SyncJob.for_payload(payload, destination_host)


class MacWatcher:
    """Watch the macOS pasteboard."""

    def __init__(self, clipboard: MacClipboard, extractor: MacExtractor, destination_host: str):
        self.clipboard = clipboard
        self.extractor = extractor
        self.destination_host = destination_host

    def probe(self) -> Probe | None:
        """Fingerprint the clipboard info string; None if unreadable."""
        try:
            info = self.clipboard.read_info()
        except ProbeFailure as e:
            logger.debug("Probe failed: %s", e)
            return None
        return Probe(info=info, fingerprint=compute_fingerprint(info))

    def handle(self, probe: Probe) -> SyncJob | None:
        """Classify and extract a changed clipboard."""
        logger.info("Clipboard changed: %s", str(probe.info)[:INFO_PREVIEW_LENGTH])
        return _build_job(self.extractor, probe, self.destination_host)


class WaylandWatcher:
    """Watch the Wayland clipboard."""

    def __init__(
        self, clipboard: WaylandClipboard, extractor: WaylandExtractor, destination_host: str
    ):
        self.clipboard = clipboard
        self.extractor = extractor
        self.destination_host = destination_host

    def _read_representation(self, kind: Kind, mime_types: tuple[str, ...]) -> bytes | None:
        if kind is Kind.FILES:
            return self.clipboard.read("text/uri-list", no_newline=True)
        if kind is Kind.IMAGE:
            return self.clipboard.read(pick_image_type(mime_types)[0])
        if kind is Kind.TEXT:
            return self.clipboard.read(pick_text_type(mime_types), no_newline=True)
        return None

    def probe(self) -> Probe | None:
        """Fingerprint the MIME types plus the representation to sync.

        Returns None when either cannot be read, so a failed read is never
        mistaken for a change.
        """
        try:
            mime_types = self.clipboard.list_types()
        except ProbeFailure as e:
            logger.debug("Probe failed: %s", e)
            return None
        kind = classify(mime_types)
        raw = self._read_representation(kind, mime_types)
        if kind is not Kind.EMPTY and raw is None:
            logger.debug("Could not read %s representation, state unknown", kind.value)
            return None
        content = normalize_text(raw) if kind is Kind.TEXT else raw
        return Probe(
            info=mime_types,
            fingerprint=compute_fingerprint(mime_types, content),
            content=content,
            prefetched=raw,
        )

    def handle(self, probe: Probe) -> SyncJob | None:
        """Classify and extract a changed clipboard."""
        logger.info("Clipboard changed: %s", ", ".join(probe.info)[:INFO_PREVIEW_LENGTH])
        return _build_job(self.extractor, probe, self.destination_host)


def build_watcher(direction: str, config: SyncConfig) -> MacWatcher | WaylandWatcher:
    """Create the watcher for a direction.

    Raises:
        ValueError: On an unknown direction.
    """
    if direction == "macos":
        mac_clipboard = MacClipboard()
        return MacWatcher(
            mac_clipboard,
            MacExtractor(mac_clipboard, config.temp_image_path),
            config.remote_host,
        )
    if direction == "wayland":
        wayland_clipboard = WaylandClipboard()
        return WaylandWatcher(
            wayland_clipboard,
            WaylandExtractor(wayland_clipboard, config.temp_image_path),
            config.remote_host,
        )
    raise ValueError(f"Unknown direction: {direction}")
