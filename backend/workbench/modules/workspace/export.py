"""Export of the latest chain run as ``agent_chain_results.json``."""

from __future__ import annotations

import json
from typing import Any

from workbench.core.config import settings
from workbench.modules.workspace.state import Workspace


def build_export(workspace: Workspace) -> dict[str, Any]:
    """Excerpt of the guidance, the chain outputs (edits included) and metrics."""
    return {
        "guidance_excerpt": workspace.raw_text[: settings.export_excerpt_chars],
        "chain": [
            {"agent": entry.agent_name, "model": entry.model, "output": entry.output}
            for entry in workspace.run_log
        ],
        "metrics": workspace.metrics.model_dump(),
    }


def export_json(workspace: Workspace) -> str:
    return json.dumps(build_export(workspace), ensure_ascii=False, indent=2)
