"""Generative-model client — one call per agent invocation.

Providers supported:
  - google (Gemini Flash / Pro) via google-genai
  - anthropic (Claude) via the anthropic SDK

The provider is derived from the model id, so agents in the same chain can
use different providers. Both SDKs are driven through their async clients
so a chain run only suspends the event loop while waiting on the model.
"""

from __future__ import annotations

import time
from typing import Any

import structlog
from pydantic import BaseModel

from workbench.core.config import settings

logger = structlog.get_logger()


class GenerationResult(BaseModel):
    """Generated text plus the optional usage/timing metadata."""

    text: str | None = None
    provider: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    duration_ms: int = 0


def provider_for_model(model: str) -> str:
    """Map a model id to its provider name."""
    return "anthropic" if model.lower().startswith("claude") else "google"


class ModelClient:
    """Lazily builds SDK clients and dispatches single-turn generations."""

    def __init__(self) -> None:
        self._gemini_client: Any = None
        self._anthropic_client: Any = None

    # ------------------------------------------------------------------
    # LLM client builders (lazy)
    # ------------------------------------------------------------------

    def _get_gemini_client(self) -> Any:
        if self._gemini_client is None:
            from google import genai
            from google.genai import types as genai_types

            self._gemini_client = genai.Client(
                api_key=settings.google_ai_api_key,
                http_options=genai_types.HttpOptions(timeout=settings.llm_http_timeout_ms),
            )
        return self._gemini_client

    def _get_anthropic_client(self) -> Any:
        if self._anthropic_client is None:
            import anthropic

            self._anthropic_client = anthropic.AsyncAnthropic(
                api_key=settings.anthropic_api_key,
            )
        return self._anthropic_client

    # ------------------------------------------------------------------
    # Unified call
    # ------------------------------------------------------------------

    async def invoke(
        self,
        *,
        model: str,
        system_prompt: str,
        temperature: float,
        max_output_tokens: int,
        input_text: str,
    ) -> GenerationResult:
        """Send ``input_text`` as the only user turn and return the reply.

        No earlier turns are replayed; each agent sees only its handoff text.
        SDK errors propagate to the caller unchanged.
        """
        provider = provider_for_model(model)
        if provider == "anthropic":
            return await self._call_anthropic(
                model, system_prompt, temperature, max_output_tokens, input_text
            )
        return await self._call_gemini(
            model, system_prompt, temperature, max_output_tokens, input_text
        )

    async def _call_gemini(
        self,
        model: str,
        system_prompt: str,
        temperature: float,
        max_output_tokens: int,
        input_text: str,
    ) -> GenerationResult:
        from google.genai import types

        client = self._get_gemini_client()
        start = time.monotonic()

        response = await client.aio.models.generate_content(
            model=model,
            contents=[types.Content(role="user", parts=[types.Part(text=input_text)])],
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            ),
        )

        duration_ms = int((time.monotonic() - start) * 1000)
        usage = response.usage_metadata
        input_tokens = getattr(usage, "prompt_token_count", 0) or 0
        output_tokens = getattr(usage, "candidates_token_count", 0) or 0

        logger.info(
            "Gemini call",
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=duration_ms,
        )

        return GenerationResult(
            text=response.text,
            provider="google",
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=duration_ms,
        )

    async def _call_anthropic(
        self,
        model: str,
        system_prompt: str,
        temperature: float,
        max_output_tokens: int,
        input_text: str,
    ) -> GenerationResult:
        client = self._get_anthropic_client()
        start = time.monotonic()

        response = await client.messages.create(
            model=model,
            max_tokens=max_output_tokens,
            temperature=temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": input_text}],
        )

        duration_ms = int((time.monotonic() - start) * 1000)
        usage = response.usage
        input_tokens = getattr(usage, "input_tokens", 0) or 0
        output_tokens = getattr(usage, "output_tokens", 0) or 0

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )

        logger.info(
            "Anthropic call",
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=duration_ms,
        )

        return GenerationResult(
            text=text,
            provider="anthropic",
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=duration_ms,
        )
