"""Shared test fixtures for the workbench test suite."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from workbench.core.dependencies import get_model_client, get_workspace
from workbench.main import app
from workbench.modules.agents.client import GenerationResult
from workbench.modules.workspace.state import Workspace


class FakeModelClient:
    """Stands in for ModelClient; records every invocation.

    ``responses`` — texts returned in call order (default: "<model> output N")
    ``fail_at``   — zero-based call index that raises ``error``
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.responses: list[str | None] | None = None
        self.fail_at: int | None = None
        self.error: Exception = RuntimeError("503 Service Unavailable")

    async def invoke(self, **kwargs: Any) -> GenerationResult:
        self.calls.append(kwargs)
        index = len(self.calls) - 1
        if self.fail_at is not None and index == self.fail_at:
            raise self.error
        if self.responses is not None:
            text = self.responses[index]
        else:
            text = f"{kwargs['model']} output {index + 1}"
        return GenerationResult(
            text=text,
            provider="google",
            model=kwargs["model"],
            input_tokens=100,
            output_tokens=50,
            duration_ms=5,
        )


@pytest.fixture
def workspace() -> Workspace:
    """Fresh session with the default chain and sample guidance."""
    return Workspace()


@pytest.fixture
def fake_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
async def client(workspace: Workspace, fake_client: FakeModelClient) -> AsyncClient:
    """Async HTTP client that talks directly to the FastAPI ASGI app."""
    app.dependency_overrides[get_workspace] = lambda: workspace
    app.dependency_overrides[get_model_client] = lambda: fake_client

    transport = ASGITransport(app=app)  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac  # type: ignore[misc]

    app.dependency_overrides.clear()
