"""Chain API — /chain/ endpoints.

  - /run             — run the agent chain (JSON result, or NDJSON step stream)
  - /log             — current run log
  - /log/{index}     — handoff edit of one completed entry
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from workbench.core.dependencies import get_model_client, get_workspace
from workbench.modules.agents.client import ModelClient
from workbench.modules.chain.executor import ChainExecutor
from workbench.modules.chain.schemas import ChainEvent, ChainRunRequest, ChainRunResult
from workbench.modules.workspace.schemas import HandoffEdit, RunLogEntry
from workbench.modules.workspace.state import ChainBusyError, RunLogIndexError, Workspace

logger = structlog.get_logger()

router = APIRouter(prefix="/chain", tags=["chain"])


async def _ndjson(events: AsyncIterator[ChainEvent]) -> AsyncIterator[str]:
    try:
        async for event in events:
            yield event.model_dump_json() + "\n"
    except ChainBusyError as exc:
        # Another run started between the request and the first chunk.
        logger.warning("Chain stream rejected", error=str(exc))
        yield ChainEvent(type="failed", run_id=0, error=str(exc)).model_dump_json() + "\n"


@router.post("/run", response_model=ChainRunResult)
async def run_chain(
    body: ChainRunRequest | None = None,
    stream: bool = Query(False, description="Stream one NDJSON event per completed step"),
    workspace: Workspace = Depends(get_workspace),
    client: ModelClient = Depends(get_model_client),
):
    """Run the configured agents sequentially over the initial input.

    Agent failures do not produce an HTTP error: the result carries
    ``status="failed"``, the error message and the partial run log.
    """
    initial_input = body.initial_input if body else None
    executor = ChainExecutor(workspace, client)

    logger.info(
        "Chain run request",
        agents=len(workspace.agents_run_config),
        stream=stream,
        custom_input=initial_input is not None,
    )

    try:
        if stream:
            events = executor.stream(initial_input)
            return StreamingResponse(_ndjson(events), media_type="application/x-ndjson")
        return await executor.run(initial_input)
    except ChainBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.get("/log", response_model=list[RunLogEntry])
async def get_run_log(workspace: Workspace = Depends(get_workspace)) -> list[RunLogEntry]:
    return workspace.run_log


@router.patch("/log/{index}", response_model=RunLogEntry)
async def edit_handoff(
    index: int,
    body: HandoffEdit,
    workspace: Workspace = Depends(get_workspace),
) -> RunLogEntry:
    try:
        return workspace.edit_output(index, body.output)
    except RunLogIndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
