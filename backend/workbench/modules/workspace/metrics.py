"""Completion score and dashboard view derived from workspace metrics."""

from __future__ import annotations

from workbench.modules.workspace.schemas import (
    DashboardView,
    RunLogEntry,
    TimelineItem,
    WorkspaceMetrics,
)

# score -> (label, severity)
STATUS_TABLE: dict[int, tuple[str, str]] = {
    0: ("Getting Started", "warning"),
    1: ("Warming Up", "caution"),
    2: ("On Track", "success"),
    3: ("Wow! Pro Level", "primary"),
}


def completion_score(metrics: WorkspaceMetrics) -> int:
    """Additive 0-3 score; each threshold is checked independently."""
    score = 0
    if metrics.ocr_pages > 0 or metrics.chars > 1000:
        score += 1
    if metrics.agents_run >= 2:
        score += 1
    if metrics.chars > 5000 and metrics.agents_run >= 4:
        score += 1
    return score


def average_latency(metrics: WorkspaceMetrics) -> float:
    if metrics.agents_run <= 0:
        return 0.0
    return metrics.latency / metrics.agents_run


def build_dashboard(metrics: WorkspaceMetrics, run_log: list[RunLogEntry]) -> DashboardView:
    score = completion_score(metrics)
    label, severity = STATUS_TABLE[score]
    return DashboardView(
        metrics=metrics,
        average_latency=average_latency(metrics),
        score=score,
        label=label,
        severity=severity,
        timeline=[
            TimelineItem(
                agent_name=entry.agent_name,
                model=entry.model,
                latency_display=entry.latency_display,
            )
            for entry in run_log
        ],
    )
