"""FastAPI dependencies — the session workspace and the model client.

Both are process-wide singletons; tests swap them through
``app.dependency_overrides``.
"""

from __future__ import annotations

from workbench.modules.agents.client import ModelClient
from workbench.modules.workspace.state import Workspace

_workspace: Workspace | None = None
_model_client: ModelClient | None = None


def get_workspace() -> Workspace:
    global _workspace
    if _workspace is None:
        _workspace = Workspace()
    return _workspace


def get_model_client() -> ModelClient:
    global _model_client
    if _model_client is None:
        _model_client = ModelClient()
    return _model_client
