#!/usr/bin/env python3
"""Clipboard content classification.

Decides the Kind of a clipboard state from its raw description. Two shapes
of description are understood:
- macOS: the ``clipboard info`` string, e.g. ``«class furl», 40, «class utf8», 12``
- Wayland: the MIME type list reported by ``wl-paste --list-types``

Kinds are tried in priority order (Files > Image > Text) and the first one
whose marker is present wins. A copied file also exposes its path as text;
the file must win so the far end pastes a real file, not a path string.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Sequence

from clipferry.fingerprint import RawInfo
from clipferry.models import Kind

_MACOS_MARKERS: dict[Kind, re.Pattern[str]] = {
    Kind.FILES: re.compile(r"class furl|class alis|file url", re.IGNORECASE),
    Kind.IMAGE: re.compile(r"PNGf|JPEG|TIFF|8bps|BMP", re.IGNORECASE),
    Kind.TEXT: re.compile(r"utf8|ut16|text|string|RTF", re.IGNORECASE),
}

FILE_LIST_TYPES: frozenset[str] = frozenset({"text/uri-list", "x-special/gnome-copied-files"})
TEXT_TARGETS: frozenset[str] = frozenset({"UTF8_STRING", "STRING", "TEXT"})


def _mime_matches(kind: Kind, mime_types: Sequence[str]) -> bool:
    """Check whether any MIME type signals the given kind."""
    if kind is Kind.FILES:
        return any(m in FILE_LIST_TYPES for m in mime_types)
    if kind is Kind.IMAGE:
        return any(m.startswith("image/") for m in mime_types)
    return any(m.startswith("text/") or m in TEXT_TARGETS for m in mime_types)


def _info_matches(kind: Kind, info: str) -> bool:
    """Check whether a macOS clipboard info string signals the given kind."""
    return _MACOS_MARKERS[kind].search(info) is not None


def classify(info: RawInfo, skip: Collection[Kind] = ()) -> Kind:
    """Classify a clipboard state.

    Args:
        info: macOS clipboard info string or Wayland MIME type list.
        skip: Kinds to ignore, used to fall back after an extraction failure.

    Returns:
        The highest-priority kind present and not skipped, or Kind.EMPTY.
    """
    for kind in Kind.priority_order():
        if kind in skip:
            continue
        if isinstance(info, str):
            matched = _info_matches(kind, info)
        else:
            matched = _mime_matches(kind, info)
        if matched:
            return kind
    return Kind.EMPTY


def pick_text_type(mime_types: Sequence[str]) -> str:
    """Choose the MIME type to request plain text in.

    UTF-8 plain text is preferred; falls back to "text/plain", which
    wl-paste will convert from whatever text the owner offers.
    """
    for preferred in ("text/plain;charset=utf-8", "text/plain", "UTF8_STRING"):
        if preferred in mime_types:
            return preferred
    return "text/plain"


def pick_image_type(mime_types: Sequence[str]) -> list[str]:
    """Order the advertised image MIME types, richest encoding first.

    PNG is preferred, then the generic bitmap encoding, then any other
    advertised image type in the order the clipboard owner listed them.
    """
    images = [m for m in mime_types if m.startswith("image/")]
    preferred = [m for m in ("image/png", "image/bmp") if m in images]
    return preferred + [m for m in images if m not in preferred]
