"""In-memory document builders shared by the tests."""

from __future__ import annotations

import io
from typing import Iterable

from PIL import Image
from PyPDF2 import PdfReader, PdfWriter


def build_pdf(widths: Iterable[float]) -> bytes:
    """Create a PDF with one blank page per width, so pages can be told apart later."""
    writer = PdfWriter()
    for width in widths:
        writer.add_blank_page(width=width, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def page_widths(data: bytes) -> list[float]:
    return [float(page.mediabox.width) for page in PdfReader(io.BytesIO(data)).pages]


def build_image(width: int = 40, height: int = 20, fmt: str = "PNG") -> bytes:
    img = Image.new("RGB", (width, height), color=(200, 30, 30))
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()
