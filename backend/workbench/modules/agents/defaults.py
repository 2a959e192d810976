"""Default regulatory review chain.

Each agent's system prompt is the shared reviewer preamble followed by a
role-specific block, both loaded from the prompts/ directory.
"""

from __future__ import annotations

from pathlib import Path

from workbench.modules.agents.schemas import AgentDefinition, AgentParameters

# Directory where prompt templates live
_PROMPTS_DIR = Path(__file__).parent / "prompts"

_PREAMBLE_FILE = "regulatory_reviewer.txt"

# (name, description, model, temperature, max_output_tokens, prompt file)
_DEFAULT_CHAIN: list[tuple[str, str, str, float, int, str]] = [
    (
        "RequirementExtractor",
        "Extracts structured requirements from the guidance.",
        "gemini-2.5-flash",
        0.2,
        2000,
        "requirement_extractor.txt",
    ),
    (
        "GapAnalyzer",
        "Compares provided dossier/evidence against extracted requirements to find gaps.",
        "gemini-2.5-pro",
        0.2,
        2000,
        "gap_analyzer.txt",
    ),
    (
        "EvidenceMapper",
        "Maps documents/pages to requirements with traceability links.",
        "gemini-2.5-flash",
        0.2,
        1800,
        "evidence_mapper.txt",
    ),
    (
        "ChecklistFormatter",
        "Produces a reviewer-ready checklist and summary.",
        "gemini-2.5-flash",
        0.1,
        2200,
        "checklist_formatter.txt",
    ),
]


def load_prompt(filename: str) -> str:
    """Load a prompt template from the prompts/ directory."""
    path = _PROMPTS_DIR / filename
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")
    return path.read_text(encoding="utf-8").strip()


def default_agents() -> list[AgentDefinition]:
    """Build a fresh list of the four default agents."""
    preamble = load_prompt(_PREAMBLE_FILE)
    return [
        AgentDefinition(
            name=name,
            description=description,
            model=model,
            parameters=AgentParameters(
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            ),
            system_prompt=f"{preamble}\n{load_prompt(prompt_file)}",
        )
        for name, description, model, temperature, max_output_tokens, prompt_file in _DEFAULT_CHAIN
    ]
