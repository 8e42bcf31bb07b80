#!/usr/bin/env python3
"""Payload extraction with per-kind fallback chains.

Platform APIs for retrieving "the same" clipboard content are unreliable,
so each kind has a chain of methods tried in order:
- Files: a direct file-reference representation, then a structured
  file-object representation (macOS); the uri-list (Wayland)
- Image: PNG first, then a generic bitmap encoding, persisted to a fresh
  local temporary file
- Text: the plain text representation; empty or all-whitespace fails

When a kind cannot be extracted, or a clipboard command fails while
extracting it, the clipboard is reclassified with that kind skipped, so
a failed file extraction degrades to Image, then Text.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlparse

from clipferry.classifier import classify, pick_image_type, pick_text_type
from clipferry.clipboard import ProbeFailure
from clipferry.models import FilePaths, ImageBytes, Kind, TextContent

if TYPE_CHECKING:
    from clipferry.clipboard_macos import MacClipboard
    from clipferry.clipboard_wayland import WaylandClipboard
    from clipferry.fingerprint import RawInfo
    from clipferry.models import Payload

logger = logging.getLogger(__name__)

# macOS hands out file reference URLs (file:///.file/id=...) that do not
# resolve to a usable path outside the local session.
FILE_REFERENCE_MARKER: str = "/.file/id="


class ExtractFailure(Exception):
    """
    Exception raised when a payload of a given kind cannot be extracted.

    Attributes:
        kind: The kind that failed.
    """

    def __init__(self, kind: Kind, reason: str = "") -> None:
        self.kind = kind
        message = f"Could not extract {kind.value} payload"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


def parse_file_url(url: str) -> Path | None:
    """Convert a file URL to an existing local path.

    Args:
        url: A URL such as "file:///Users/me/report%20v2.pdf".

    Returns:
        The decoded path if it exists locally, None otherwise.
    """
    url = url.strip()
    if not url or FILE_REFERENCE_MARKER in url:
        return None
    parsed = urlparse(url)
    if parsed.scheme != "file" or not parsed.path:
        return None
    path = Path(unquote(parsed.path))
    if not path.exists():
        return None
    return path


def parse_uri_list(text: str) -> tuple[Path, ...]:
    """Parse a text/uri-list into existing local paths.

    Comment lines and non-file URIs are skipped, as are paths that do not
    exist locally. Order is preserved.
    """
    paths = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        path = parse_file_url(line)
        if path is not None:
            paths.append(path)
    return tuple(paths)


def new_image_path(template: Path) -> Path:
    """Create a fresh temporary file for one image extraction.

    The file sits next to the configured temporary image path and shares
    its stem and suffix. A fresh file per job keeps overlapping image
    syncs from overwriting each other's artifact.

    Raises:
        ExtractFailure: If the file cannot be created.
    """
    try:
        template.parent.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(
            prefix=f"{template.stem}-",
            suffix=template.suffix,
            dir=template.parent,
        )
    except OSError as e:
        raise ExtractFailure(Kind.IMAGE, f"cannot create temporary image file: {e}") from e
    os.close(fd)
    return Path(name)


def _image_payload(path: Path, image_format: str) -> ImageBytes:
    """Validate a written image file and wrap it as a payload."""
    size = path.stat().st_size if path.exists() else 0
    if size == 0:
        path.unlink(missing_ok=True)
        raise ExtractFailure(Kind.IMAGE, "temporary image file is empty")
    return ImageBytes(path=path, image_format=image_format, size=size)


def _text_payload(data: bytes | None) -> TextContent:
    """Decode text clipboard bytes, rejecting empty or whitespace-only text."""
    if not data or not data.strip():
        raise ExtractFailure(Kind.TEXT, "clipboard text is empty")
    return TextContent(text=data.decode("utf-8", "replace"))


class MacExtractor:
    """Extract payloads from the macOS pasteboard."""

    def __init__(self, clipboard: MacClipboard, temp_image_path: Path) -> None:
        self.clipboard = clipboard
        self.temp_image_path = temp_image_path

    def extract(self, kind: Kind, info: RawInfo, prefetched: bytes | None = None) -> Payload:
        """Extract the payload for a classified kind.

        Raises:
            ExtractFailure: If the kind cannot be extracted.
        """
        if kind is Kind.FILES:
            return self._extract_files()
        if kind is Kind.IMAGE:
            return self._extract_image()
        if kind is Kind.TEXT:
            return _text_payload(prefetched if prefetched is not None else self.clipboard.read_text())
        raise ExtractFailure(kind)

    def _extract_files(self) -> FilePaths:
        path = parse_file_url(self.clipboard.read_file_url())
        if path is None:
            logger.debug("public.file-url unusable, trying «class furl»")
            posix_path = self.clipboard.read_furl_path()
            if posix_path and Path(posix_path).exists():
                path = Path(posix_path)
        if path is None:
            raise ExtractFailure(Kind.FILES, "no resolvable file path")
        return FilePaths(paths=(path,))

    def _extract_image(self) -> ImageBytes:
        path = new_image_path(self.temp_image_path)
        try:
            image_format = self.clipboard.write_image(path)
            if image_format is None:
                raise ExtractFailure(Kind.IMAGE, "image export failed")
            return _image_payload(path, image_format)
        except OSError as e:
            path.unlink(missing_ok=True)
            raise ExtractFailure(Kind.IMAGE, f"cannot read exported image: {e}") from e
        except (ExtractFailure, ProbeFailure):
            path.unlink(missing_ok=True)
            raise


class WaylandExtractor:
    """Extract payloads from the Wayland clipboard."""

    def __init__(self, clipboard: WaylandClipboard, temp_image_path: Path) -> None:
        self.clipboard = clipboard
        self.temp_image_path = temp_image_path

    def extract(self, kind: Kind, info: RawInfo, prefetched: bytes | None = None) -> Payload:
        """Extract the payload for a classified kind.

        Args:
            kind: Classified kind to extract.
            info: MIME types offered by the clipboard owner.
            prefetched: Representation bytes already read while probing.

        Raises:
            ExtractFailure: If the kind cannot be extracted.
        """
        if kind is Kind.FILES:
            data = prefetched if prefetched is not None else self.clipboard.read("text/uri-list")
            paths = parse_uri_list((data or b"").decode("utf-8", "replace"))
            if not paths:
                raise ExtractFailure(Kind.FILES, "no valid local files in uri-list")
            return FilePaths(paths=paths)
        if kind is Kind.IMAGE:
            return self._extract_image(info, prefetched)
        if kind is Kind.TEXT:
            if prefetched is None:
                prefetched = self.clipboard.read(pick_text_type(info), no_newline=True)
            return _text_payload(prefetched)
        raise ExtractFailure(kind)

    def _extract_image(self, info: RawInfo, prefetched: bytes | None) -> ImageBytes:
        candidates = pick_image_type(info)
        for mime_type in candidates:
            if prefetched is not None and mime_type == candidates[0]:
                data = prefetched
            else:
                data = self.clipboard.read(mime_type)
            if data:
                image_format = mime_type.split("/", 1)[1].split(";", 1)[0]
                path = new_image_path(self.temp_image_path)
                try:
                    path.write_bytes(data)
                except OSError as e:
                    path.unlink(missing_ok=True)
                    raise ExtractFailure(Kind.IMAGE, f"cannot write temporary image file: {e}") from e
                return _image_payload(path, image_format)
            logger.debug("No %s data, trying next image type", mime_type)
        raise ExtractFailure(Kind.IMAGE, "no image representation could be read")


def extract_with_fallback(
    extractor: MacExtractor | WaylandExtractor,
    info: RawInfo,
    prefetched: bytes | None = None,
) -> Payload | None:
    """Classify and extract, degrading to lower-priority kinds on failure.

    Args:
        extractor: Platform extractor.
        info: Raw clipboard description.
        prefetched: Bytes read while probing, valid for the first
            classified kind only.

    Returns:
        At most one payload, or None when every kind failed (Empty).
    """
    failed: set[Kind] = set()
    kind = classify(info)
    while kind is not Kind.EMPTY:
        try:
            return extractor.extract(kind, info, prefetched if not failed else None)
        except ExtractFailure as e:
            logger.info("%s, falling back", e)
        except ProbeFailure as e:
            logger.info("Reading %s payload failed (%s), falling back", kind.value, e)
        failed.add(kind)
        kind = classify(info, skip=failed)
    return None
