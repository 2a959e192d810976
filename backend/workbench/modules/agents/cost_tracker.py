"""Cost Tracker — token counting & cost estimation per chain invocation.

Tracks input/output tokens reported by the model provider and computes
estimated costs in USD. One tracker per chain run.

Usage:
    tracker = CostTracker()
    tracker.record("google", "gemini-2.5-flash", agent_name="GapAnalyzer",
                   input_tokens=5000, output_tokens=800)
    print(tracker.summary())
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger()

# ---------------------------------------------------------------------------
# Pricing per 1M tokens (USD)
# ---------------------------------------------------------------------------

# Format: (input_per_1M, output_per_1M)
_PRICING: dict[str, tuple[float, float]] = {
    "gemini-2.5-flash": (0.15, 0.60),
    "gemini-2.0-flash": (0.10, 0.40),
    "gemini-2.5-pro": (1.25, 10.00),
    "claude-sonnet-4-20250514": (3.00, 15.00),
    "claude-opus-4-20250514": (15.00, 75.00),
}

# Fallback pricing for unknown models (conservative estimate)
_FALLBACK_PRICING = (3.00, 15.00)


def _get_pricing(model: str) -> tuple[float, float]:
    """Look up pricing for a model, with fuzzy matching."""
    if model in _PRICING:
        return _PRICING[model]
    # e.g. "gemini-2.5-flash-001" -> "gemini-2.5-flash"
    for key in _PRICING:
        if key in model or model in key:
            return _PRICING[key]
    logger.warning("Unknown model pricing, using fallback", model=model)
    return _FALLBACK_PRICING


@dataclass
class TokenRecord:
    """Token usage for a single agent invocation."""

    provider: str
    model: str
    agent_name: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    cost_usd: float = 0.0
    duration_ms: int = 0
    timestamp: float = field(default_factory=time.time)

    def compute_cost(self) -> None:
        input_price, output_price = _get_pricing(self.model)
        self.total_tokens = self.input_tokens + self.output_tokens
        self.cost_usd = (
            (self.input_tokens / 1_000_000) * input_price
            + (self.output_tokens / 1_000_000) * output_price
        )


class CostTracker:
    """Tracks token usage and costs across one chain run."""

    def __init__(self) -> None:
        self.records: list[TokenRecord] = []

    def record(
        self,
        provider: str,
        model: str,
        *,
        agent_name: str = "",
        input_tokens: int = 0,
        output_tokens: int = 0,
        duration_ms: int = 0,
    ) -> TokenRecord:
        """Record a single invocation's token usage."""
        rec = TokenRecord(
            provider=provider,
            model=model,
            agent_name=agent_name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=duration_ms,
        )
        rec.compute_cost()
        self.records.append(rec)

        logger.debug(
            "Cost tracked",
            provider=provider,
            model=model,
            agent=agent_name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost_usd=f"${rec.cost_usd:.4f}",
        )
        return rec

    def summary(self) -> dict[str, Any]:
        """Return a summary dict of all costs, grouped per provider/model."""
        providers: dict[str, dict[str, Any]] = {}
        for rec in self.records:
            key = f"{rec.provider}/{rec.model}"
            s = providers.setdefault(
                key,
                {"calls": 0, "input_tokens": 0, "output_tokens": 0, "cost_usd": 0.0},
            )
            s["calls"] += 1
            s["input_tokens"] += rec.input_tokens
            s["output_tokens"] += rec.output_tokens
            s["cost_usd"] += rec.cost_usd

        for s in providers.values():
            s["cost_usd"] = round(s["cost_usd"], 6)

        return {
            "calls": len(self.records),
            "total_tokens": sum(r.total_tokens for r in self.records),
            "total_cost_usd": round(sum(r.cost_usd for r in self.records), 6),
            "providers": providers,
        }
