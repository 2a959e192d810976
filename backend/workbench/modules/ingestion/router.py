"""Upload endpoint for guidance documents (TXT, MD, scanned PDF)."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from workbench.core.config import settings
from workbench.core.dependencies import get_workspace
from workbench.modules.ingestion.service import (
    DocumentKind,
    IngestionError,
    UnsupportedDocumentError,
    apply_document,
    apply_failure,
    detect_kind,
    extract_document,
)
from workbench.modules.workspace.schemas import ActiveStep
from workbench.modules.workspace.state import Workspace

logger = structlog.get_logger()

router = APIRouter(prefix="/workspace", tags=["ingestion"])


class UploadResponse(BaseModel):
    filename: str
    kind: DocumentKind
    chars: int
    ocr_pages: int
    active_step: ActiveStep


@router.post("/upload", response_model=UploadResponse)
async def upload_guidance(
    file: UploadFile = File(..., description="Guidance document: TXT, MD or PDF (OCR)"),
    workspace: Workspace = Depends(get_workspace),
) -> UploadResponse:
    """Replace the workspace text with an uploaded document.

    PDFs are OCR'd page by page in a worker thread; progress is visible
    through ``ocr_status`` on GET /workspace while the upload runs.
    """
    try:
        kind = detect_kind(file.filename, file.content_type)
    except UnsupportedDocumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    content = await file.read()
    size_mb = len(content) / (1024 * 1024)
    if size_mb > settings.upload_max_file_size_mb:
        raise HTTPException(
            status_code=413,
            detail=f"File too large: {size_mb:.1f} MB (max {settings.upload_max_file_size_mb} MB).",
        )

    logger.info("Upload request", filename=file.filename, kind=kind, size_mb=round(size_mb, 2))

    try:
        document = await run_in_threadpool(
            extract_document, content, kind, on_status=workspace.set_ocr_status
        )
    except IngestionError as exc:
        apply_failure(workspace, exc)
        raise HTTPException(
            status_code=422,
            detail={
                "message": str(exc),
                "pages_completed": exc.pages_completed,
                "chars": workspace.metrics.chars,
            },
        )

    apply_document(workspace, document)
    return UploadResponse(
        filename=file.filename or "",
        kind=document.kind,
        chars=workspace.metrics.chars,
        ocr_pages=workspace.metrics.ocr_pages,
        active_step=workspace.active_step,
    )
