"""
app/ai_engine/utils.py — Shared AI helper utilities.

Provides:
  - build_openrouter_llm()  : factory for the LangChain-compatible OpenRouter LLM
  - extract_json_object()   : first balanced {...} block in messy LLM text
  - parse_intent_payload()  : extract + schema-check the intent JSON
  - format_bullets()        : render a list of strings for a prompt
  - truncate_for_context()  : safely trim long strings to fit LLM context window
"""

import json
import logging
from typing import Any

from langchain_openai import ChatOpenAI
from pydantic import BaseModel, ConfigDict, field_validator

from app.config import settings
from app.domain.models import Intent
from app.exceptions import AIScoringError

logger = logging.getLogger(__name__)

NO_JSON_MESSAGE = "no parseable JSON in model output"
DEFAULT_REASONING = "No reasoning provided by the model."


def build_openrouter_llm() -> ChatOpenAI:
    """
    Build a LangChain ChatOpenAI client pointed at OpenRouter.

    Model, temperature, timeout and retries all come from settings. Intent
    scoring wants a low temperature so the JSON shape stays stable.

    Returns:
        A LangChain-compatible LLM instance.
    """
    return ChatOpenAI(
        model=settings.openrouter_model,
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        temperature=settings.ai_temperature,
        max_retries=settings.ai_max_retries,
        timeout=settings.ai_timeout_seconds,
        default_headers={"X-Title": "Lead Intent Scorer"},
    )


def extract_json_object(text: str | None) -> str | None:
    """
    Return the first balanced {...} substring of text, or None.

    Braces inside JSON string literals are ignored, so reasoning such as
    "uses {templates}" does not end the block early.
    """
    if not text:
        return None

    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:idx + 1]
    return None


class IntentPayload(BaseModel):
    """Schema for the model's JSON reply. Only intent and reasoning are trusted."""

    model_config = ConfigDict(extra="ignore")

    intent: Intent = Intent.LOW
    reasoning: str = DEFAULT_REASONING

    @field_validator("intent", mode="before")
    @classmethod
    def _coerce_intent(cls, value: Any) -> Intent:
        if isinstance(value, str):
            for intent in Intent:
                if value.strip().lower() == intent.value.lower():
                    return intent
        logger.warning("Unexpected intent %r from model, treating as Low.", value)
        return Intent.LOW

    @field_validator("reasoning", mode="before")
    @classmethod
    def _default_reasoning(cls, value: Any) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_REASONING
        return value if isinstance(value, str) else str(value)


def parse_intent_payload(text: str | None) -> IntentPayload:
    """
    Extract and validate the intent JSON from raw model output.

    Raises:
        AIScoringError: no {...} block, invalid JSON, or not a JSON object.
    """
    candidate = extract_json_object(text)
    if candidate is None:
        logger.warning("No JSON object in LLM output: %s", (text or "")[:200])
        raise AIScoringError(NO_JSON_MESSAGE)

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning("Invalid JSON in LLM output: %s", candidate[:200])
        raise AIScoringError(NO_JSON_MESSAGE) from exc

    if not isinstance(data, dict):
        raise AIScoringError(NO_JSON_MESSAGE)

    # Missing keys fall back to field defaults
    data.setdefault("intent", None)
    data.setdefault("reasoning", None)
    return IntentPayload.model_validate(data)


def format_bullets(items: list[str]) -> str:
    """Render items as '- item' lines, or 'Not specified' when empty."""
    cleaned = [item.strip() for item in items if item and item.strip()]
    return "\n".join(f"- {item}" for item in cleaned) if cleaned else "Not specified"


def truncate_for_context(text: str, max_chars: int = 2000) -> str:
    """
    Trim a string to max_chars to avoid exceeding LLM context window.
    Appends '...' if truncated.
    """
    if not text or len(text) <= max_chars:
        return text or ""
    return text[:max_chars] + "..."
