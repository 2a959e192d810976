from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException

from workbench.core.dependencies import get_workspace
from workbench.modules.agents.registry import AgentConfigError, AgentIndexError
from workbench.modules.agents.schemas import AgentDefinition, AgentFieldUpdate, AgentsView
from workbench.modules.workspace.state import Workspace

logger = structlog.get_logger()

router = APIRouter(prefix="/agents", tags=["agents"])


@router.get("", response_model=AgentsView)
async def list_agents(workspace: Workspace = Depends(get_workspace)) -> AgentsView:
    return AgentsView(agents=workspace.agents, agents_run_config=workspace.agents_run_config)


@router.patch("/{index}", response_model=AgentDefinition)
async def update_agent_field(
    index: int,
    body: AgentFieldUpdate,
    workspace: Workspace = Depends(get_workspace),
) -> AgentDefinition:
    """Edit one field of a run-configuration agent (base agents stay untouched)."""
    try:
        return workspace.registry.set_field(index, body.field, body.value)
    except AgentIndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except AgentConfigError as exc:
        logger.warning("Agent edit rejected", index=index, field=body.field, error=str(exc))
        raise HTTPException(status_code=400, detail=str(exc))


@router.post("/reset", response_model=AgentsView)
async def reset_agents(workspace: Workspace = Depends(get_workspace)) -> AgentsView:
    workspace.registry.reset_run_config()
    return AgentsView(agents=workspace.agents, agents_run_config=workspace.agents_run_config)
