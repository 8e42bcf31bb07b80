#!/usr/bin/env python3
"""
Unit tests for MacExtractor.

Tests the file-url then furl chain, PNG/TIFF image export into fresh
temporary files, and whitespace-only text rejection.
"""
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from clipferry.clipboard import ProbeFailure
from clipferry.extractor import ExtractFailure, MacExtractor
from clipferry.models import FilePaths, ImageBytes, Kind, TextContent

from conftest import write_png


@pytest.fixture
def extractor(mac_clipboard: MagicMock, tmp_path: Path) -> MacExtractor:
    """MacExtractor writing images under tmp_path."""
    return MacExtractor(mac_clipboard, tmp_path / "clipboard_sync_image.png")


class TestFiles:
    """Tests for file extraction."""

    def test_file_url_used_first(
        self, extractor: MacExtractor, mac_clipboard: MagicMock, tmp_path: Path
    ) -> None:
        """Test a usable public.file-url short-circuits the furl script."""
        target = tmp_path / "report.pdf"
        target.write_bytes(b"%PDF")
        mac_clipboard.read_file_url.return_value = f"file://{target}"

        payload = extractor.extract(Kind.FILES, "«class furl», 40")

        assert payload == FilePaths(paths=(target,))
        mac_clipboard.read_furl_path.assert_not_called()

    def test_reference_url_falls_back_to_furl(
        self, extractor: MacExtractor, mac_clipboard: MagicMock, tmp_path: Path
    ) -> None:
        """Test a file reference URL is rejected in favour of the furl path."""
        target = tmp_path / "notes.txt"
        target.write_text("notes")
        mac_clipboard.read_file_url.return_value = "file:///.file/id=6571367.8649531"
        mac_clipboard.read_furl_path.return_value = str(target)

        payload = extractor.extract(Kind.FILES, "«class furl», 40")

        assert payload == FilePaths(paths=(target,))

    def test_no_existing_path_fails(self, extractor: MacExtractor, mac_clipboard: MagicMock) -> None:
        """Test a furl path that does not exist is an extraction failure."""
        mac_clipboard.read_furl_path.return_value = "/definitely/not/here.txt"
        with pytest.raises(ExtractFailure) as exc_info:
            extractor.extract(Kind.FILES, "«class furl», 40")
        assert exc_info.value.kind is Kind.FILES


class TestImage:
    """Tests for image extraction."""

    def test_png_written_to_temp_file(
        self, extractor: MacExtractor, mac_clipboard: MagicMock, tmp_path: Path
    ) -> None:
        """Test the exported image is non-empty and its size recorded."""
        mac_clipboard.write_image.side_effect = write_png(b"\x89PNG12345")

        payload = extractor.extract(Kind.IMAGE, "«class PNGf», 10")

        assert isinstance(payload, ImageBytes)
        assert payload.image_format == "png"
        assert payload.path.parent == tmp_path
        assert payload.size == payload.path.stat().st_size == 10

    def test_tiff_fallback_format_recorded(
        self, extractor: MacExtractor, mac_clipboard: MagicMock
    ) -> None:
        """Test a TIFF export is tagged as tiff."""

        def write_tiff(path: Path) -> str:
            Path(path).write_bytes(b"II*\x00tiff")
            return "tiff"

        mac_clipboard.write_image.side_effect = write_tiff
        payload = extractor.extract(Kind.IMAGE, "TIFF picture, 8")
        assert isinstance(payload, ImageBytes)
        assert payload.mime_type == "image/tiff"

    def test_empty_file_fails_and_is_removed(
        self, extractor: MacExtractor, mac_clipboard: MagicMock, tmp_path: Path
    ) -> None:
        """Test an empty temporary file is a failure and leaves nothing behind."""
        mac_clipboard.write_image.return_value = "png"
        with pytest.raises(ExtractFailure) as exc_info:
            extractor.extract(Kind.IMAGE, "«class PNGf», 10")
        assert exc_info.value.kind is Kind.IMAGE
        assert list(tmp_path.iterdir()) == []

    def test_export_error_fails(self, extractor: MacExtractor, tmp_path: Path) -> None:
        """Test a failed AppleScript export is an extraction failure."""
        with pytest.raises(ExtractFailure):
            extractor.extract(Kind.IMAGE, "«class PNGf», 10")
        assert list(tmp_path.iterdir()) == []

    def test_export_timeout_leaves_no_file(
        self, extractor: MacExtractor, mac_clipboard: MagicMock, tmp_path: Path
    ) -> None:
        """Test a timed-out export propagates and removes the temporary file."""
        mac_clipboard.write_image.side_effect = ProbeFailure("osascript timed out")
        with pytest.raises(ProbeFailure):
            extractor.extract(Kind.IMAGE, "«class PNGf», 10")
        assert list(tmp_path.iterdir()) == []

    def test_each_extraction_uses_new_file(
        self, extractor: MacExtractor, mac_clipboard: MagicMock
    ) -> None:
        """Test overlapping image syncs never share a temporary file."""
        mac_clipboard.write_image.side_effect = write_png()
        first = extractor.extract(Kind.IMAGE, "«class PNGf», 10")
        second = extractor.extract(Kind.IMAGE, "«class PNGf», 10")
        assert first.path != second.path


class TestText:
    """Tests for text extraction."""

    def test_text_kept_exactly(self, extractor: MacExtractor, mac_clipboard: MagicMock) -> None:
        """Test text is returned without trimming."""
        mac_clipboard.read_text.return_value = b"  hello world\n"
        payload = extractor.extract(Kind.TEXT, "«class utf8», 14")
        assert payload == TextContent(text="  hello world\n")

    def test_whitespace_only_fails(self, extractor: MacExtractor, mac_clipboard: MagicMock) -> None:
        """Test whitespace-only text is an extraction failure."""
        mac_clipboard.read_text.return_value = b"  "
        with pytest.raises(ExtractFailure) as exc_info:
            extractor.extract(Kind.TEXT, "«class utf8», 2")
        assert exc_info.value.kind is Kind.TEXT
