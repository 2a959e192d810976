"""PDF OCR Service — PyMuPDF page rendering + Tesseract recognition.

Scanned guidance documents carry no usable text layer, so every page is
rendered to an image and recognised with Tesseract in the configured
language (Traditional Chinese by default). Pages are processed one at a
time, in order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

import fitz  # PyMuPDF
import pytesseract
import structlog
from PIL import Image
from pydantic import BaseModel

logger = structlog.get_logger()

StatusCallback = Callable[[str], None]
# (page_number, total_pages, percent_complete)
ProgressCallback = Callable[[int, int, float], None]


class PageText(BaseModel):
    """Recognised text for a single PDF page."""

    page_number: int
    text: str


def render_page(page: fitz.Page, scale: float) -> Image.Image:
    """Rasterise one page; higher scale gives Tesseract more pixels per glyph."""
    pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
    return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)


def recognize_image(image: Image.Image, language: str) -> str:
    return pytesseract.image_to_string(image, lang=language)


def iter_pdf_pages(
    pdf_bytes: bytes,
    *,
    language: str,
    scale: float = 2.0,
    on_status: StatusCallback | None = None,
    on_progress: ProgressCallback | None = None,
) -> Iterator[PageText]:
    """Yield recognised text page by page.

    Errors from rendering or recognition propagate to the caller; pages
    already yielded stay with the caller.

    Tesseract reports no intermediate progress, so ``on_progress`` fires
    twice per page: 0% before recognition and 100% after it.
    """
    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    try:
        total = len(doc)
        for page_idx in range(total):
            page_num = page_idx + 1

            if on_status:
                on_status(f"Rendering page {page_num}/{total}...")
            image = render_page(doc[page_idx], scale)

            if on_status:
                on_status(f"Analyzing page {page_num}/{total} with OCR...")
            if on_progress:
                on_progress(page_num, total, 0.0)
            text = recognize_image(image, language)
            if on_progress:
                on_progress(page_num, total, 100.0)

            logger.debug("Page recognised", page=page_num, total=total, chars=len(text))
            yield PageText(page_number=page_num, text=text)
    finally:
        doc.close()
