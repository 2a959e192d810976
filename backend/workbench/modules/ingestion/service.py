"""Document Ingestion Adapter — uploads to a single raw-text string.

  - Plain text (.txt / .md / text/*): decoded as UTF-8, ``ocr_pages = 0``
  - PDF: OCR'd page by page, page texts each followed by a blank line

A failing OCR page ends the attempt with IngestionError; pages recognised
before it are kept as the new raw text.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import Literal

import structlog
from pydantic import BaseModel

from workbench.core.config import settings
from workbench.modules.ingestion.ocr_service import (
    PageText,
    StatusCallback,
    iter_pdf_pages,
)
from workbench.modules.workspace.state import Workspace

logger = structlog.get_logger()

DocumentKind = Literal["text", "pdf"]

_TEXT_SUFFIXES = {".txt", ".md", ".markdown"}
PAGE_SEPARATOR = "\n\n"


class UnsupportedDocumentError(ValueError):
    """Upload is neither plain text nor PDF."""


class IngestionError(RuntimeError):
    """OCR failed part-way; carries what was recognised so far."""

    def __init__(self, message: str, partial_text: str = "", pages_completed: int = 0) -> None:
        super().__init__(message)
        self.partial_text = partial_text
        self.pages_completed = pages_completed


class IngestedDocument(BaseModel):
    kind: DocumentKind
    text: str
    ocr_pages: int = 0


def detect_kind(filename: str | None, content_type: str | None) -> DocumentKind:
    suffix = PurePath(filename or "").suffix.lower()
    ctype = (content_type or "").split(";")[0].strip().lower()
    if ctype == "application/pdf" or suffix == ".pdf":
        return "pdf"
    if suffix in _TEXT_SUFFIXES or ctype.startswith("text/"):
        return "text"
    raise UnsupportedDocumentError(
        f"Unsupported file: {filename or 'upload'}. Supported: TXT, MD, PDF."
    )


def join_pages(pages: list[PageText]) -> str:
    return "".join(page.text + PAGE_SEPARATOR for page in pages)


def read_text_document(content: bytes) -> IngestedDocument:
    text = content.decode("utf-8-sig", errors="replace")
    return IngestedDocument(kind="text", text=text, ocr_pages=0)


def ocr_pdf_document(
    content: bytes,
    *,
    on_status: StatusCallback | None = None,
) -> IngestedDocument:
    """OCR every page of a PDF. Blocking; run it off the event loop."""
    pages: list[PageText] = []

    def report_progress(page_num: int, total: int, percent: float) -> None:
        if on_status:
            on_status(f"OCR on page {page_num}: {round(percent)}%")

    if on_status:
        on_status("Loading PDF...")
    try:
        for page in iter_pdf_pages(
            content,
            language=settings.ocr_language,
            scale=settings.ocr_render_scale,
            on_status=on_status,
            on_progress=report_progress,
        ):
            pages.append(page)
    except Exception as exc:
        logger.error(
            "PDF OCR failed",
            pages_completed=len(pages),
            error=str(exc),
            exc_info=True,
        )
        raise IngestionError(
            f"OCR failed after {len(pages)} page(s): {exc}",
            partial_text=join_pages(pages),
            pages_completed=len(pages),
        ) from exc

    text = join_pages(pages)
    logger.info("PDF OCR complete", pages=len(pages), chars=len(text), language=settings.ocr_language)
    return IngestedDocument(kind="pdf", text=text, ocr_pages=len(pages))


def extract_document(
    content: bytes,
    kind: DocumentKind,
    *,
    on_status: StatusCallback | None = None,
) -> IngestedDocument:
    if kind == "pdf":
        return ocr_pdf_document(content, on_status=on_status)
    return read_text_document(content)


def apply_document(workspace: Workspace, document: IngestedDocument) -> None:
    """Replace the workspace text and move the reviewer to agent configuration."""
    workspace.apply_ingestion(document.text, ocr_pages=document.ocr_pages, advance=True)


def apply_failure(workspace: Workspace, error: IngestionError) -> None:
    """Keep recognised pages (if any) and record a recoverable error."""
    if error.pages_completed > 0:
        workspace.apply_ingestion(
            error.partial_text,
            ocr_pages=error.pages_completed,
            advance=False,
        )
    workspace.fail_ingestion(str(error))
