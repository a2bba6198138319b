"""
PDF operations over in-memory buffers.

Merge and split go through PyPDF2; images are decoded with Pillow and laid
out on pages with PyMuPDF. Each function takes raw bytes, returns the bytes of
the resulting PDF and raises :mod:`pdfdesk.errors` exceptions for bad input.
"""
import io
import logging
from typing import List, Optional, Sequence, Tuple

import fitz  # PyMuPDF
from PIL import Image
from PyPDF2 import PdfReader, PdfWriter

from .config import IMAGE_FIT_BOX, IMAGE_PAGE_SIZE
from .errors import InvalidPdfInput, MissingInput, NoFilesProvided
from .pages import parse_page_ranges

logger = logging.getLogger(__name__)


def _open_pdf(data: bytes, message: str = "") -> PdfReader:
    try:
        reader = PdfReader(io.BytesIO(data))
        # Touch the page tree so broken xref/trailers fail here, not mid-write.
        len(reader.pages)
    except Exception as e:
        logger.info("Rejected unreadable PDF upload: %r", e)
        raise InvalidPdfInput(message) from e
    return reader


def _writer_bytes(writer: PdfWriter) -> bytes:
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


# ----------------------------
# Merge
# ----------------------------
def merge_pdfs(buffers: Sequence[bytes]) -> bytes:
    """Concatenate every page of every buffer, in input order."""
    if not buffers:
        raise NoFilesProvided("Please upload at least one PDF.")

    readers = [_open_pdf(data, "One of the files is not a valid PDF.") for data in buffers]

    writer = PdfWriter()
    for reader in readers:
        for page in reader.pages:
            writer.add_page(page)

    logger.info("Merged %d PDFs into %d pages", len(readers), len(writer.pages))
    return _writer_bytes(writer)


# ----------------------------
# Split
# ----------------------------
def split_pdf(data: Optional[bytes], ranges: Optional[str]) -> bytes:
    """Extract the pages named by ``ranges`` into a new PDF."""
    if not data or not (ranges or "").strip():
        raise MissingInput("Upload a PDF and specify page ranges.")

    reader = _open_pdf(data)
    total = len(reader.pages)
    indexes = parse_page_ranges(ranges, total)

    writer = PdfWriter()
    for idx in indexes:
        writer.add_page(reader.pages[idx])

    logger.info("Split %d of %d pages using %r", len(indexes), total, ranges)
    return _writer_bytes(writer)


# ----------------------------
# Images
# ----------------------------
def fit_image(
    size: Tuple[int, int],
    box: Tuple[float, float] = IMAGE_FIT_BOX,
    page: Tuple[float, float] = IMAGE_PAGE_SIZE,
) -> Tuple[float, float, float, float]:
    """Return ``(x0, y0, x1, y1)`` for an image scaled into ``box`` and centered on ``page``."""
    width, height = size
    scale = min(box[0] / width, box[1] / height)
    w, h = width * scale, height * scale
    x0 = (page[0] - w) / 2
    y0 = (page[1] - h) / 2
    return x0, y0, x0 + w, y0 + h


def _decode_image(data: bytes) -> Tuple[bytes, Tuple[int, int]]:
    """Decode with Pillow and re-encode as PNG so PyMuPDF gets a format it always reads."""
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        if img.mode in ("RGBA", "LA", "P"):
            img = img.convert("RGBA")
        elif img.mode != "RGB":
            img = img.convert("RGB")
        out = io.BytesIO()
        img.save(out, format="PNG")
        return out.getvalue(), img.size


def images_to_pdf(buffers: Sequence[bytes]) -> bytes:
    """Place each image on its own page; images that cannot be decoded or placed are skipped."""
    if not buffers:
        raise NoFilesProvided("Please upload images.")

    doc = fitz.open()
    try:
        skipped: List[int] = []
        for i, data in enumerate(buffers):
            page = None
            try:
                png, size = _decode_image(data)
                page = doc.new_page(width=IMAGE_PAGE_SIZE[0], height=IMAGE_PAGE_SIZE[1])
                page.insert_image(fitz.Rect(*fit_image(size)), stream=png)
            except Exception as e:
                if page is not None:
                    doc.delete_page(page.number)
                logger.warning("Skipping image #%d: %r", i + 1, e)
                skipped.append(i)

        logger.info("Composed %d images into a PDF (%d skipped)", doc.page_count, len(skipped))
        if doc.page_count == 0:
            # PyMuPDF will not save a document without pages.
            return _writer_bytes(PdfWriter())
        return doc.tobytes(garbage=3, deflate=True)
    finally:
        doc.close()
