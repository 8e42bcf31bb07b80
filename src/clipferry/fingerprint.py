#!/usr/bin/env python3
"""
Cheap clipboard fingerprints for change detection.

Reading a full clipboard payload (an image, a file) on every poll is
expensive, so the poller compares fingerprints computed from the raw
clipboard description instead. The description already carries type and
size markers, so switching from text to an image changes the fingerprint
even when the sizes coincide.

This module provides:
- compute_fingerprint(): SHA-256 hex digest of a RawInfo (plus optional content)
- normalize_text(): whitespace normalisation for content-level dedup
- UNKNOWN: sentinel returned when the clipboard could not be probed

Collisions are not a security concern here: a collision only means one
missed sync.
"""
from __future__ import annotations

import hashlib
from collections.abc import Sequence
from typing import Union

RawInfo = Union[str, Sequence[str]]

# Returned when the platform could not report clipboard state at all.
# The poller treats it as "no new information", never as a change.
UNKNOWN = None


def compute_fingerprint(info: RawInfo | None, content: bytes | None = None) -> str | None:
    """
    Compute a fingerprint of a clipboard state.

    String descriptions and MIME type lists are tagged differently so the
    two shapes never produce the same digest.

    Args:
        info: Raw clipboard description, or None if the probe failed.
        content: Optional representation bytes folded into the digest.

    Returns:
        Hexadecimal SHA-256 digest, or UNKNOWN if info is None.
    """
    if info is None:
        return UNKNOWN

    digest = hashlib.sha256()
    if isinstance(info, str):
        digest.update(b"info\0")
        digest.update(info.encode("utf-8"))
    else:
        digest.update(b"types\0")
        digest.update("\n".join(info).encode("utf-8"))
    if content is not None:
        digest.update(b"\0content\0")
        digest.update(hashlib.sha256(content).digest())
    return digest.hexdigest()


def normalize_text(data: bytes) -> bytes:
    """
    Strip surrounding whitespace from text clipboard bytes.

    The peer direction often adds or drops a trailing newline when it sets
    the clipboard; comparing normalised text keeps that from looking like
    a new change and bouncing the same content back and forth.
    """
    return data.strip()
