"""Agent definitions — Pydantic models for the configurable chain stages."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class AgentParameters(BaseModel):
    """Generation controls forwarded to the model on every invocation."""

    temperature: float = Field(0.2, description="Sampling temperature, 0.0-1.0")
    max_output_tokens: int = Field(2000, description="Output token budget, 256-8192")


class AgentDefinition(BaseModel):
    """One pipeline stage: model + prompt + parameters."""

    name: str = Field(..., description="Unique, session-stable identifier")
    description: str = ""
    model: str
    parameters: AgentParameters = Field(default_factory=AgentParameters)
    system_prompt: str = ""


class AgentsView(BaseModel):
    """Base (authoring) agents alongside the editable run configuration."""

    agents: list[AgentDefinition]
    agents_run_config: list[AgentDefinition]


class AgentFieldUpdate(BaseModel):
    """Body of PATCH /agents/{index}.

    ``field`` is a top-level field name or ``parameters.<key>``.
    """

    field: str = Field(..., examples=["system_prompt", "parameters.temperature"])
    value: Any
