"""Session state, run log entries and metrics."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field

from workbench.modules.agents.schemas import AgentDefinition

ActiveStep = Literal["ingestion", "agents", "run", "dashboard"]
ChainStatus = Literal["idle", "running", "completed", "failed"]


class RunLogEntry(BaseModel):
    """One completed agent invocation.

    ``output`` may be edited after the run (handoff edit); ``latency`` is
    fixed at creation and kept at full precision.
    """

    agent_name: str
    model: str
    output: str = ""
    latency: float = Field(..., description="Elapsed seconds for the invocation")
    input_tokens: int = 0
    output_tokens: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def latency_display(self) -> str:
        return f"{self.latency:.2f}"


class WorkspaceMetrics(BaseModel):
    """Derived counters shown on the dashboard and exported."""

    ocr_pages: int = 0
    chars: int = 0
    agents_run: int = 0
    latency: float = 0.0


class WorkspaceView(BaseModel):
    """Read-only snapshot of the whole workspace."""

    raw_text: str
    agents: list[AgentDefinition]
    agents_run_config: list[AgentDefinition]
    run_log: list[RunLogEntry]
    metrics: WorkspaceMetrics
    status: ChainStatus
    is_running: bool
    error: str | None = None
    run_generation: int = 0
    active_step: ActiveStep = "ingestion"
    ocr_status: str = ""
    ingestion_error: str | None = None


class RawTextUpdate(BaseModel):
    raw_text: str


class ActiveStepUpdate(BaseModel):
    active_step: ActiveStep


class RawTextUpdateResponse(BaseModel):
    chars: int
    active_step: ActiveStep
    advanced: bool


class HandoffEdit(BaseModel):
    output: str


class TimelineItem(BaseModel):
    agent_name: str
    model: str
    latency_display: str


class DashboardView(BaseModel):
    """Summary of the latest run."""

    metrics: WorkspaceMetrics
    average_latency: float
    score: int = Field(..., ge=0, le=3)
    label: str
    severity: str
    timeline: list[TimelineItem]
