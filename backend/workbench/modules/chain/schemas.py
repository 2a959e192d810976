"""Events streamed per chain step, and the aggregated run result."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from workbench.modules.workspace.schemas import ChainStatus, RunLogEntry, WorkspaceMetrics

ChainEventType = Literal["started", "step", "failed", "completed"]


class ChainRunRequest(BaseModel):
    initial_input: str | None = Field(
        None, description="Input for the first agent; defaults to the workspace raw text"
    )


class ChainEvent(BaseModel):
    """One observable step of a chain run."""

    type: ChainEventType
    run_id: int
    index: int | None = None
    total: int = 0
    entry: RunLogEntry | None = None
    error: str | None = None
    metrics: WorkspaceMetrics | None = None


class ChainRunResult(BaseModel):
    """Outcome of a drained chain run."""

    run_id: int
    status: ChainStatus
    run_log: list[RunLogEntry]
    metrics: WorkspaceMetrics
    error: str | None = None
    usage: dict[str, Any] = Field(default_factory=dict)
