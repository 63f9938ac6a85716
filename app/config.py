"""
app/config.py — Central configuration loaded from environment variables.
All modules import settings from here; never read os.environ directly elsewhere.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from app.domain.models import AIFailurePolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── LLM ──────────────────────────────────────────────────────────────────
    openrouter_api_key: str = Field(..., description="OpenRouter API key")
    openrouter_model: str = Field(
        default="openai/gpt-4o-mini",
        description="OpenRouter model identifier",
    )
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Any OpenAI-compatible chat completions base URL",
    )
    ai_temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    ai_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound on a single lead's AI call; a timeout counts as a failed call",
    )
    ai_max_retries: int = Field(
        default=2,
        ge=0,
        description="Retries performed by the HTTP client, not by the scorer",
    )

    # ── Scoring ───────────────────────────────────────────────────────────────
    on_ai_failure: AIFailurePolicy = Field(
        default=AIFailurePolicy.DEGRADE,
        description="abort = one failed AI call fails the batch; degrade = fallback result for that lead",
    )
    require_offer: bool = Field(
        default=False,
        description="If True, scoring without a submitted offer is rejected",
    )
    include_rule_reasoning: bool = Field(
        default=False,
        description="Append rule-engine explanations after the AI reasoning",
    )

    # ── Server ────────────────────────────────────────────────────────────────
    port: int = Field(default=3000, gt=0, lt=65536)
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text", description='"text" or "json"')


# Singleton — import this everywhere
settings = Settings()
