"""Unit tests for the model client and cost tracker (SDK clients mocked)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from workbench.modules.agents.client import ModelClient, provider_for_model
from workbench.modules.agents.cost_tracker import CostTracker


@pytest.mark.parametrize(
    ("model", "provider"),
    [
        ("gemini-2.5-flash", "google"),
        ("gemini-2.5-pro", "google"),
        ("claude-sonnet-4-20250514", "anthropic"),
    ],
)
def test_provider_for_model(model: str, provider: str) -> None:
    assert provider_for_model(model) == provider


async def test_gemini_single_turn_call() -> None:
    response = SimpleNamespace(
        text='{"items": []}',
        usage_metadata=SimpleNamespace(prompt_token_count=120, candidates_token_count=30),
    )
    gemini = MagicMock()
    gemini.aio.models.generate_content = AsyncMock(return_value=response)

    client = ModelClient()
    client._gemini_client = gemini

    result = await client.invoke(
        model="gemini-2.5-pro",
        system_prompt="ROLE: Gap Analyzer.",
        temperature=0.2,
        max_output_tokens=2000,
        input_text="requirements json",
    )

    assert result.text == '{"items": []}'
    assert result.provider == "google"
    assert result.input_tokens == 120
    assert result.output_tokens == 30

    kwargs = gemini.aio.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-pro"
    assert len(kwargs["contents"]) == 1
    assert kwargs["contents"][0].role == "user"
    assert kwargs["contents"][0].parts[0].text == "requirements json"
    assert kwargs["config"].system_instruction == "ROLE: Gap Analyzer."
    assert kwargs["config"].temperature == 0.2
    assert kwargs["config"].max_output_tokens == 2000


async def test_gemini_missing_text_and_usage() -> None:
    gemini = MagicMock()
    gemini.aio.models.generate_content = AsyncMock(
        return_value=SimpleNamespace(text=None, usage_metadata=None)
    )
    client = ModelClient()
    client._gemini_client = gemini

    result = await client.invoke(
        model="gemini-2.5-flash",
        system_prompt="",
        temperature=0.0,
        max_output_tokens=256,
        input_text="",
    )

    assert result.text is None
    assert result.input_tokens == 0
    assert result.output_tokens == 0


async def test_gemini_errors_propagate() -> None:
    gemini = MagicMock()
    gemini.aio.models.generate_content = AsyncMock(side_effect=RuntimeError("quota exceeded"))
    client = ModelClient()
    client._gemini_client = gemini

    with pytest.raises(RuntimeError, match="quota exceeded"):
        await client.invoke(
            model="gemini-2.5-flash",
            system_prompt="",
            temperature=0.0,
            max_output_tokens=256,
            input_text="x",
        )


async def test_anthropic_call() -> None:
    response = SimpleNamespace(
        content=[SimpleNamespace(type="text", text="checklist"), SimpleNamespace(type="tool_use")],
        usage=SimpleNamespace(input_tokens=80, output_tokens=20),
    )
    anthropic_client = MagicMock()
    anthropic_client.messages.create = AsyncMock(return_value=response)

    client = ModelClient()
    client._anthropic_client = anthropic_client

    result = await client.invoke(
        model="claude-sonnet-4-20250514",
        system_prompt="ROLE: Checklist Formatter.",
        temperature=0.1,
        max_output_tokens=2200,
        input_text="trace json",
    )

    assert result.text == "checklist"
    assert result.provider == "anthropic"
    kwargs = anthropic_client.messages.create.call_args.kwargs
    assert kwargs["messages"] == [{"role": "user", "content": "trace json"}]
    assert kwargs["system"] == "ROLE: Checklist Formatter."
    assert kwargs["max_tokens"] == 2200
    assert kwargs["temperature"] == 0.1


def test_cost_tracker_summary() -> None:
    tracker = CostTracker()
    tracker.record("google", "gemini-2.5-flash", agent_name="A", input_tokens=1_000_000, output_tokens=0)
    tracker.record("google", "gemini-2.5-pro", agent_name="B", input_tokens=0, output_tokens=1_000_000)
    tracker.record("google", "gemini-2.5-flash-001", agent_name="C", input_tokens=0, output_tokens=0)

    summary = tracker.summary()

    assert summary["calls"] == 3
    assert summary["total_tokens"] == 2_000_000
    assert summary["total_cost_usd"] == pytest.approx(0.15 + 10.00)
    assert summary["providers"]["google/gemini-2.5-flash"]["calls"] == 1
    assert summary["providers"]["google/gemini-2.5-flash-001"]["calls"] == 1
