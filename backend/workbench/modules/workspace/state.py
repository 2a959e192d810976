"""Workspace state — the single session store and its transitions.

All mutations go through the methods below. None of them awaits, so on the
event loop every observable step (run log, metrics, running flag) changes
atomically.

Chain transitions take the run token handed out by ``begin_run``. A call
carrying a stale token is ignored, which keeps a late response from an
abandoned run away from the current one.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from workbench.core.config import settings
from workbench.modules.agents.registry import AgentRegistry
from workbench.modules.agents.schemas import AgentDefinition
from workbench.modules.workspace.schemas import (
    ActiveStep,
    ChainStatus,
    RunLogEntry,
    WorkspaceMetrics,
    WorkspaceView,
)

logger = structlog.get_logger()

_SAMPLE_GUIDANCE = Path(__file__).parent / "sample_guidance.md"


class ChainBusyError(RuntimeError):
    """A chain run is already in progress."""


class RunLogIndexError(IndexError):
    """Run log index outside the current log."""


def load_sample_guidance() -> str:
    return _SAMPLE_GUIDANCE.read_text(encoding="utf-8")


class Workspace:
    """Aggregate root for one reviewer session."""

    def __init__(
        self,
        raw_text: str | None = None,
        registry: AgentRegistry | None = None,
    ) -> None:
        self.raw_text: str = raw_text if raw_text is not None else load_sample_guidance()
        self.registry = registry or AgentRegistry()
        self.run_log: list[RunLogEntry] = []
        self.metrics = WorkspaceMetrics(chars=len(self.raw_text))
        self.status: ChainStatus = "idle"
        self.error: str | None = None
        self.run_generation = 0
        self.active_step: ActiveStep = "ingestion"
        self.ocr_status = ""
        self.ingestion_error: str | None = None

    @property
    def is_running(self) -> bool:
        return self.status == "running"

    @property
    def agents(self) -> list[AgentDefinition]:
        return self.registry.agents

    @property
    def agents_run_config(self) -> list[AgentDefinition]:
        return self.registry.agents_run_config

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def set_raw_text(self, new_text: str) -> bool:
        """Replace the raw text from the paste/edit path.

        Returns True when a large paste auto-advanced the active step.
        """
        growth = len(new_text) - len(self.raw_text)
        self.raw_text = new_text
        self.metrics = self.metrics.model_copy(update={"chars": len(new_text)})

        advanced = (
            self.active_step == "ingestion"
            and growth > settings.auto_advance_threshold_chars
        )
        if advanced:
            self.active_step = "agents"
        return advanced

    def apply_ingestion(self, text: str, ocr_pages: int = 0, *, advance: bool = True) -> None:
        """Replace the raw text with a freshly ingested document."""
        self.raw_text = text
        self.metrics = self.metrics.model_copy(
            update={"chars": len(text), "ocr_pages": ocr_pages}
        )
        self.ocr_status = ""
        self.ingestion_error = None
        if advance:
            self.active_step = "agents"
        logger.info("Document ingested", chars=len(text), ocr_pages=ocr_pages)

    def set_ocr_status(self, status: str) -> None:
        self.ocr_status = status

    def fail_ingestion(self, message: str) -> None:
        self.ocr_status = ""
        self.ingestion_error = message

    def set_active_step(self, step: ActiveStep) -> None:
        self.active_step = step

    # ------------------------------------------------------------------
    # Chain transitions
    # ------------------------------------------------------------------

    def begin_run(self) -> int:
        """Enter the running state and return the new run token."""
        if self.is_running:
            raise ChainBusyError("A chain run is already in progress")

        self.run_generation += 1
        self.run_log = []
        self.error = None
        self.status = "running"
        logger.info("Chain run started", run=self.run_generation)
        return self.run_generation

    def is_current(self, token: int) -> bool:
        return token == self.run_generation and self.is_running

    def append_entry(self, token: int, entry: RunLogEntry) -> bool:
        if not self.is_current(token):
            logger.warning("Stale run entry ignored", run=token, current=self.run_generation)
            return False
        self.run_log = [*self.run_log, entry]
        return True

    def complete_run(self, token: int) -> bool:
        if not self.is_current(token):
            return False
        self._finish("completed")
        logger.info(
            "Chain run completed",
            run=token,
            agents_run=self.metrics.agents_run,
            latency=round(self.metrics.latency, 2),
        )
        return True

    def fail_run(self, token: int, message: str) -> bool:
        if not self.is_current(token):
            return False
        self.error = message
        self._finish("failed")
        logger.warning(
            "Chain run failed",
            run=token,
            agents_run=self.metrics.agents_run,
            error=message,
        )
        return True

    def _finish(self, status: ChainStatus) -> None:
        self.status = status
        self.metrics = self.metrics.model_copy(
            update={
                "agents_run": len(self.run_log),
                "latency": sum(e.latency for e in self.run_log),
            }
        )

    # ------------------------------------------------------------------
    # Handoff editor
    # ------------------------------------------------------------------

    def edit_output(self, index: int, new_text: str) -> RunLogEntry:
        """Replace the output text of one completed entry in place.

        Latency, model and every other entry are left untouched; nothing is
        re-run.
        """
        if not 0 <= index < len(self.run_log):
            raise RunLogIndexError(f"Run log index {index} out of range")
        entry = self.run_log[index]
        entry.output = new_text
        logger.info("Handoff output edited", agent=entry.agent_name, index=index, chars=len(new_text))
        return entry

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def snapshot(self) -> WorkspaceView:
        return WorkspaceView(
            raw_text=self.raw_text,
            agents=self.agents,
            agents_run_config=self.agents_run_config,
            run_log=self.run_log,
            metrics=self.metrics,
            status=self.status,
            is_running=self.is_running,
            error=self.error,
            run_generation=self.run_generation,
            active_step=self.active_step,
            ocr_status=self.ocr_status,
            ingestion_error=self.ingestion_error,
        )
