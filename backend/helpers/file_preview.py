"""
Inline preview selection for idea attachments.

The file store only gives us a declared MIME type, a name and a size; nothing
here looks at file contents.
"""

from typing import Literal, Optional

PreviewKind = Literal["image", "pdf", "none"]

PDF_MIME_TYPE = "application/pdf"


def is_image(file_type: Optional[str]) -> bool:
    """True when the declared MIME type is an image type."""
    return bool(file_type) and file_type.startswith("image/")  # type: ignore[union-attr]


def is_pdf(file_type: Optional[str], file_name: Optional[str]) -> bool:
    """True when the MIME type is PDF or the file name ends in .pdf (any case)."""
    if file_type == PDF_MIME_TYPE:
        return True
    return bool(file_name) and file_name.lower().endswith(".pdf")  # type: ignore[union-attr]


def preview_kind(file_type: Optional[str], file_name: Optional[str]) -> PreviewKind:
    """
    Pick the inline preview strategy for an attachment.

    Image wins over PDF when both match (an ``image/*`` file named ``x.pdf``).
    """
    if is_image(file_type):
        return "image"
    if is_pdf(file_type, file_name):
        return "pdf"
    return "none"


def format_file_size(size_bytes: Optional[int]) -> str:
    """Render a byte count as kilobytes with two decimals, e.g. ``12.50 KB``."""
    return f"{(size_bytes or 0) / 1024:.2f} KB"
