"""Tests for attachment preview selection and size labels."""

import pytest

from helpers.file_preview import format_file_size, is_image, is_pdf, preview_kind


class TestPreviewKind:
    """Test cases for preview_kind."""

    @pytest.mark.parametrize(
        "file_type,file_name,expected",
        [
            ("image/png", "mockup.png", "image"),
            ("image/jpeg", None, "image"),
            ("application/pdf", "deck", "pdf"),
            (None, "Pitch.PDF", "pdf"),
            ("application/octet-stream", "budget.pdf", "pdf"),
            ("application/zip", "code.zip", "none"),
            (None, None, "none"),
        ],
    )
    def test_kinds(self, file_type, file_name, expected):
        assert preview_kind(file_type, file_name) == expected

    def test_image_wins_over_pdf_name(self):
        """An image MIME type beats a .pdf extension."""
        assert preview_kind("image/png", "scan.pdf") == "image"

    def test_empty_type_is_not_image(self):
        assert is_image("") is False
        assert is_pdf("", "") is False


class TestFormatFileSize:
    """Test cases for format_file_size."""

    @pytest.mark.parametrize(
        "size,label",
        [(0, "0.00 KB"), (None, "0.00 KB"), (512, "0.50 KB"), (12800, "12.50 KB"), (1048576, "1024.00 KB")],
    )
    def test_labels(self, size, label):
        assert format_file_size(size) == label
