"""Unit tests for the agent registry (run-configuration edits)."""

from __future__ import annotations

import pytest

from workbench.modules.agents.registry import AgentConfigError, AgentIndexError, AgentRegistry


@pytest.fixture
def registry() -> AgentRegistry:
    return AgentRegistry()


def test_default_chain_order(registry: AgentRegistry) -> None:
    names = [a.name for a in registry.agents_run_config]
    assert names == ["RequirementExtractor", "GapAnalyzer", "EvidenceMapper", "ChecklistFormatter"]
    assert registry.agents_run_config[1].model == "gemini-2.5-pro"
    assert registry.agents_run_config[2].parameters.max_output_tokens == 1800
    assert registry.agents_run_config[3].parameters.temperature == 0.1


def test_default_prompts_share_reviewer_preamble(registry: AgentRegistry) -> None:
    for agent in registry.agents_run_config:
        assert agent.system_prompt.startswith("You are an expert regulatory reviewer")
    assert "ROLE: Gap Analyzer." in registry.agents_run_config[1].system_prompt


def test_run_config_is_a_separate_copy(registry: AgentRegistry) -> None:
    assert registry.agents == registry.agents_run_config
    assert registry.agents[0] is not registry.agents_run_config[0]
    assert registry.agents[0].parameters is not registry.agents_run_config[0].parameters


def test_set_field_top_level_leaves_base_untouched(registry: AgentRegistry) -> None:
    original = registry.agents[0].system_prompt

    updated = registry.set_field(0, "system_prompt", "Only list requirement IDs.")

    assert updated.system_prompt == "Only list requirement IDs."
    assert registry.agents_run_config[0].system_prompt == "Only list requirement IDs."
    assert registry.agents[0].system_prompt == original


def test_set_field_parameters(registry: AgentRegistry) -> None:
    registry.set_field(1, "parameters.temperature", 0.7)
    registry.set_field(1, "parameters.max_output_tokens", 4096)

    params = registry.agents_run_config[1].parameters
    assert params.temperature == 0.7
    assert params.max_output_tokens == 4096
    assert registry.agents[1].parameters.temperature == 0.2


def test_set_field_accepts_camel_case_aliases(registry: AgentRegistry) -> None:
    registry.set_field(2, "params.maxOutputTokens", "1024")
    registry.set_field(2, "systemPrompt", "Map evidence.")

    assert registry.agents_run_config[2].parameters.max_output_tokens == 1024
    assert registry.agents_run_config[2].system_prompt == "Map evidence."


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("parameters.temperature", 1.5),
        ("parameters.temperature", -0.1),
        ("parameters.temperature", "hot"),
        ("parameters.max_output_tokens", 100),
        ("parameters.max_output_tokens", 9000),
        ("parameters.max_output_tokens", -5),
        ("parameters.max_output_tokens", 512.5),
        ("parameters.max_output_tokens", float("inf")),
        ("parameters.max_output_tokens", True),
        ("parameters.top_k", 3),
        ("model", "gpt-unknown"),
        ("model", "  "),
        ("name", ""),
        ("name", "GapAnalyzer"),
        ("colour", "blue"),
    ],
)
def test_set_field_rejects_invalid_values(registry: AgentRegistry, field: str, value: object) -> None:
    before = registry.snapshot()

    with pytest.raises(AgentConfigError):
        registry.set_field(0, field, value)

    assert registry.agents_run_config == before


def test_set_field_index_out_of_range(registry: AgentRegistry) -> None:
    with pytest.raises(AgentIndexError):
        registry.set_field(4, "description", "x")
    with pytest.raises(AgentIndexError):
        registry.set_field(-1, "description", "x")


def test_rename_agent(registry: AgentRegistry) -> None:
    registry.set_field(3, "name", "  FinalChecklist ")
    assert registry.agents_run_config[3].name == "FinalChecklist"


def test_reset_run_config(registry: AgentRegistry) -> None:
    registry.set_field(0, "model", "gemini-2.5-pro")

    registry.reset_run_config()

    assert registry.agents_run_config[0].model == "gemini-2.5-flash"


def test_snapshot_is_detached(registry: AgentRegistry) -> None:
    snapshot = registry.snapshot()
    registry.set_field(0, "system_prompt", "changed")

    assert snapshot[0].system_prompt != "changed"
