"""Unit tests for the completion score, dashboard view and export document."""

from __future__ import annotations

import json

import pytest

from workbench.modules.workspace.export import build_export, export_json
from workbench.modules.workspace.metrics import (
    STATUS_TABLE,
    average_latency,
    build_dashboard,
    completion_score,
)
from workbench.modules.workspace.schemas import RunLogEntry, WorkspaceMetrics
from workbench.modules.workspace.state import Workspace


@pytest.mark.parametrize(
    ("metrics", "expected"),
    [
        (WorkspaceMetrics(chars=6000, agents_run=4), 3),
        (WorkspaceMetrics(chars=500, agents_run=0, ocr_pages=0), 0),
        (WorkspaceMetrics(chars=1200, agents_run=2), 2),
        (WorkspaceMetrics(chars=10, ocr_pages=1), 1),
        (WorkspaceMetrics(chars=1000, agents_run=1), 0),
        (WorkspaceMetrics(chars=5001, agents_run=4, ocr_pages=0), 3),
        (WorkspaceMetrics(chars=5000, agents_run=4), 2),
        (WorkspaceMetrics(chars=100, agents_run=3), 1),
    ],
)
def test_completion_score(metrics: WorkspaceMetrics, expected: int) -> None:
    assert completion_score(metrics) == expected


def test_status_labels() -> None:
    assert STATUS_TABLE[0][0] == "Getting Started"
    assert STATUS_TABLE[1][0] == "Warming Up"
    assert STATUS_TABLE[2][0] == "On Track"
    assert STATUS_TABLE[3][0] == "Wow! Pro Level"


def test_average_latency() -> None:
    assert average_latency(WorkspaceMetrics()) == 0.0
    assert average_latency(WorkspaceMetrics(agents_run=4, latency=10.0)) == 2.5


def test_dashboard_timeline() -> None:
    run_log = [
        RunLogEntry(agent_name="RequirementExtractor", model="gemini-2.5-flash", latency=1.456),
        RunLogEntry(agent_name="GapAnalyzer", model="gemini-2.5-pro", latency=3.0),
    ]
    metrics = WorkspaceMetrics(chars=6000, agents_run=2, latency=4.456)

    dashboard = build_dashboard(metrics, run_log)

    assert dashboard.score == 2
    assert dashboard.label == "On Track"
    assert dashboard.severity == "success"
    assert dashboard.average_latency == pytest.approx(2.228)
    assert [t.latency_display for t in dashboard.timeline] == ["1.46", "3.00"]


def test_export_excerpt_is_first_1000_chars() -> None:
    workspace = Workspace(raw_text="條" * 1500)
    assert build_export(workspace)["guidance_excerpt"] == "條" * 1000

    short = Workspace(raw_text="short guidance")
    assert build_export(short)["guidance_excerpt"] == "short guidance"


def test_export_chain_reflects_handoff_edits() -> None:
    workspace = Workspace(raw_text="guidance")
    token = workspace.begin_run()
    workspace.append_entry(
        token,
        RunLogEntry(agent_name="RequirementExtractor", model="gemini-2.5-flash", output="raw", latency=1.0),
    )
    workspace.complete_run(token)
    workspace.edit_output(0, "edited")

    exported = json.loads(export_json(workspace))

    assert exported["chain"] == [
        {"agent": "RequirementExtractor", "model": "gemini-2.5-flash", "output": "edited"}
    ]
    assert exported["metrics"] == {"ocr_pages": 0, "chars": 8, "agents_run": 1, "latency": 1.0}


def test_export_json_keeps_non_ascii() -> None:
    workspace = Workspace(raw_text="醫療器材審查")

    assert "醫療器材審查" in export_json(workspace)
