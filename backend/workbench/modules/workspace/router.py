"""Workspace API: session state, dashboard and export.

  - /workspace         : snapshot of the whole session
  - /workspace/text    : paste/edit of the guidance text
  - /workspace/step    : step navigation
  - /dashboard         : completion score and latency timeline
  - /export            : JSON download of the chain results
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from workbench.core.config import settings
from workbench.core.dependencies import get_workspace
from workbench.modules.workspace.export import export_json
from workbench.modules.workspace.metrics import build_dashboard
from workbench.modules.workspace.schemas import (
    ActiveStepUpdate,
    DashboardView,
    RawTextUpdate,
    RawTextUpdateResponse,
    WorkspaceView,
)
from workbench.modules.workspace.state import Workspace

router = APIRouter(tags=["workspace"])


@router.get("/workspace", response_model=WorkspaceView)
async def get_workspace_view(workspace: Workspace = Depends(get_workspace)) -> WorkspaceView:
    return workspace.snapshot()


@router.put("/workspace/text", response_model=RawTextUpdateResponse)
async def update_raw_text(
    body: RawTextUpdate,
    workspace: Workspace = Depends(get_workspace),
) -> RawTextUpdateResponse:
    """Paste/edit path: replaces the raw text wholesale."""
    advanced = workspace.set_raw_text(body.raw_text)
    return RawTextUpdateResponse(
        chars=workspace.metrics.chars,
        active_step=workspace.active_step,
        advanced=advanced,
    )


@router.put("/workspace/step", response_model=WorkspaceView)
async def set_active_step(
    body: ActiveStepUpdate,
    workspace: Workspace = Depends(get_workspace),
) -> WorkspaceView:
    workspace.set_active_step(body.active_step)
    return workspace.snapshot()


@router.get("/dashboard", response_model=DashboardView)
async def get_dashboard(workspace: Workspace = Depends(get_workspace)) -> DashboardView:
    return build_dashboard(workspace.metrics, workspace.run_log)


@router.get("/export")
async def download_export(workspace: Workspace = Depends(get_workspace)) -> Response:
    return Response(
        content=export_json(workspace),
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{settings.export_filename}"',
        },
    )
