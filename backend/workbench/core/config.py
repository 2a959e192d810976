from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_name: str = "Regulatory Review Workbench"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # LLM (provider is picked from the model id: claude-* -> anthropic, else google)
    google_ai_api_key: str = ""
    anthropic_api_key: str = ""
    llm_http_timeout_ms: int = 120_000
    default_model: str = "gemini-2.5-flash"
    allowed_models: list[str] = [
        "gemini-2.5-flash",
        "gemini-2.5-pro",
        "claude-sonnet-4-20250514",
    ]

    # Agent parameter bounds (enforced by the registry)
    temperature_min: float = 0.0
    temperature_max: float = 1.0
    max_output_tokens_min: int = 256
    max_output_tokens_max: int = 8192

    # Ingestion
    ocr_language: str = "chi_tra"  # Traditional Chinese
    ocr_render_scale: float = 2.0
    upload_max_file_size_mb: int = 25
    auto_advance_threshold_chars: int = 200

    # Export
    export_excerpt_chars: int = 1000
    export_filename: str = "agent_chain_results.json"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
