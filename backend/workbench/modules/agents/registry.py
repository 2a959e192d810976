"""Agent Registry — ordered agent definitions with an editable run copy.

Two lists are held:
  - ``agents``:            base (authoring) definitions, never edited here
  - ``agents_run_config``: deep-copied execution snapshot, edited field by field

Field paths accepted by ``set_field``:
  name | description | model | system_prompt
  parameters.temperature | parameters.max_output_tokens
  (``params.`` and ``maxOutputTokens`` are accepted as aliases)
"""

from __future__ import annotations

from typing import Any

import structlog

from workbench.core.config import settings
from workbench.modules.agents.defaults import default_agents
from workbench.modules.agents.schemas import AgentDefinition

logger = structlog.get_logger()

_TOP_LEVEL_FIELDS = {"name", "description", "model", "system_prompt"}

_FIELD_ALIASES: dict[str, str] = {
    "systemPrompt": "system_prompt",
    "params": "parameters",
    "maxOutputTokens": "max_output_tokens",
}


class AgentConfigError(ValueError):
    """Rejected edit to an agent definition."""


class AgentIndexError(IndexError):
    """Agent index outside the run configuration."""


def _normalize_path(field_path: str) -> tuple[str, str | None]:
    parts = [_FIELD_ALIASES.get(p, p) for p in field_path.strip().split(".")]
    if len(parts) == 1 and parts[0] in _TOP_LEVEL_FIELDS:
        return parts[0], None
    if len(parts) == 2 and parts[0] == "parameters":
        return parts[0], parts[1]
    raise AgentConfigError(f"Unknown agent field: {field_path!r}")


class AgentRegistry:
    """Holds the chain definition and validates run-configuration edits."""

    def __init__(self, agents: list[AgentDefinition] | None = None) -> None:
        base = agents if agents is not None else default_agents()
        self.agents: list[AgentDefinition] = [a.model_copy(deep=True) for a in base]
        self.agents_run_config: list[AgentDefinition] = self._copy_base()

    def _copy_base(self) -> list[AgentDefinition]:
        return [a.model_copy(deep=True) for a in self.agents]

    def __len__(self) -> int:
        return len(self.agents_run_config)

    # ------------------------------------------------------------------
    # Run configuration
    # ------------------------------------------------------------------

    def snapshot(self) -> list[AgentDefinition]:
        """Deep copy of the run configuration, frozen for one chain run."""
        return [a.model_copy(deep=True) for a in self.agents_run_config]

    def reset_run_config(self) -> None:
        self.agents_run_config = self._copy_base()
        logger.info("Run configuration reset", agents=len(self.agents_run_config))

    def set_field(self, index: int, field_path: str, value: Any) -> AgentDefinition:
        """Update one field of the run-configuration agent at ``index``.

        Raises:
            AgentIndexError: index outside the run configuration.
            AgentConfigError: unknown field or value outside accepted range.
        """
        if not 0 <= index < len(self.agents_run_config):
            raise AgentIndexError(
                f"Agent index {index} out of range (0-{len(self.agents_run_config) - 1})"
            )

        field, param_key = _normalize_path(field_path)
        agent = self.agents_run_config[index]

        if param_key is None:
            new_value = self._validate_top_level(index, field, value)
            updated = agent.model_copy(update={field: new_value})
        else:
            new_value = self._validate_parameter(param_key, value)
            parameters = agent.parameters.model_copy(update={param_key: new_value})
            updated = agent.model_copy(update={"parameters": parameters})

        self.agents_run_config[index] = updated
        logger.info(
            "Agent field updated",
            agent=updated.name,
            index=index,
            field=field if param_key is None else f"{field}.{param_key}",
        )
        return updated

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_top_level(self, index: int, field: str, value: Any) -> str:
        if not isinstance(value, str):
            raise AgentConfigError(f"{field} must be a string")

        if field == "name":
            name = value.strip()
            if not name:
                raise AgentConfigError("Agent name must not be blank")
            taken = {a.name for i, a in enumerate(self.agents_run_config) if i != index}
            if name in taken:
                raise AgentConfigError(f"Agent name already in use: {name}")
            return name

        if field == "model":
            model = value.strip()
            if not model:
                raise AgentConfigError("Model must not be blank")
            if settings.allowed_models and model not in settings.allowed_models:
                raise AgentConfigError(
                    f"Unsupported model: {model}. Allowed: {', '.join(settings.allowed_models)}"
                )
            return model

        return value

    @staticmethod
    def _validate_parameter(key: str, value: Any) -> float | int:
        if isinstance(value, bool):
            raise AgentConfigError(f"{key} must be numeric")

        if key == "temperature":
            try:
                temperature = float(value)
            except (TypeError, ValueError):
                raise AgentConfigError("temperature must be numeric") from None
            if not settings.temperature_min <= temperature <= settings.temperature_max:
                raise AgentConfigError(
                    f"temperature {temperature} outside "
                    f"[{settings.temperature_min}, {settings.temperature_max}]"
                )
            return temperature

        if key == "max_output_tokens":
            try:
                tokens = int(value)
            except (TypeError, ValueError, OverflowError):
                raise AgentConfigError("max_output_tokens must be an integer") from None
            if isinstance(value, float) and not value.is_integer():
                raise AgentConfigError("max_output_tokens must be an integer")
            if not settings.max_output_tokens_min <= tokens <= settings.max_output_tokens_max:
                raise AgentConfigError(
                    f"max_output_tokens {tokens} outside "
                    f"[{settings.max_output_tokens_min}, {settings.max_output_tokens_max}]"
                )
            return tokens

        raise AgentConfigError(f"Unknown parameter: {key}")
