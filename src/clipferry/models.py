#!/usr/bin/env python3
"""
Clipboard content kinds, payloads and sync jobs.

A clipboard entry usually advertises several representations at once (a
copied file also exposes its path as text). Exactly one Kind is chosen per
clipboard state, by priority Files > Image > Text, with Empty when nothing
usable is found.

This module provides:
- Kind: the content category enum
- FilePaths, ImageBytes, TextContent: payloads, one per non-empty Kind
- SyncJob: immutable work item handed to the dispatcher
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Union


class Kind(enum.Enum):
    """Content category of a clipboard state."""

    FILES = "files"
    IMAGE = "image"
    TEXT = "text"
    EMPTY = "empty"

    @classmethod
    def priority_order(cls) -> tuple[Kind, ...]:
        """Return the non-empty kinds, richest first."""
        return (cls.FILES, cls.IMAGE, cls.TEXT)


@dataclass(frozen=True)
class FilePaths:
    """Ordered absolute local paths of copied files."""

    paths: tuple[Path, ...]

    @property
    def kind(self) -> Kind:
        return Kind.FILES


@dataclass(frozen=True)
class ImageBytes:
    """
    Encoded image persisted to a local temporary file.

    The transport moves files rather than in-memory buffers, so the image
    lives on disk from extraction until its sync job finishes.

    Attributes:
        path: Local temporary file holding the encoded image.
        image_format: Encoding tag, e.g. "png" or "tiff".
        size: Size of the temporary file in bytes.
    """

    path: Path
    image_format: str
    size: int

    @property
    def kind(self) -> Kind:
        return Kind.IMAGE

    @property
    def mime_type(self) -> str:
        return f"image/{self.image_format}"


@dataclass(frozen=True)
class TextContent:
    """Plain text clipboard content."""

    text: str

    @property
    def kind(self) -> Kind:
        return Kind.TEXT

    @property
    def data(self) -> bytes:
        """Exact UTF-8 bytes to place on the remote clipboard."""
        return self.text.encode("utf-8")


Payload = Union[FilePaths, ImageBytes, TextContent]


@dataclass(frozen=True)
class SyncJob:
    """
    Instruction to transfer a payload and apply it to a remote clipboard.

    Attributes:
        kind: Content kind, always equal to payload.kind.
        payload: The extracted clipboard content.
        destination_host: Host whose clipboard receives the content.
    """

    kind: Kind
    payload: Payload
    destination_host: str

    def __post_init__(self) -> None:
        if self.kind is not self.payload.kind:
            raise ValueError(
                f"Job kind {self.kind.value} does not match payload kind "
                f"{self.payload.kind.value}"
            )

    @classmethod
    def for_payload(cls, payload: Payload, destination_host: str) -> SyncJob:
        """Build a job whose kind is taken from the payload."""
        return cls(kind=payload.kind, payload=payload, destination_host=destination_host)
