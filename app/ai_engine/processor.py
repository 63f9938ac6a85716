"""
app/ai_engine/processor.py — LangChain chain implementation for AI intent scoring.

One public coroutine:
  score_ai(lead, offer) → AIScore

A single non-streaming call per lead, bounded by settings.ai_timeout_seconds.
Any failure (transport, timeout, unparseable output) raises AIScoringError;
the batch orchestrator decides what that means for the rest of the batch.
"""

import asyncio
import logging
from dataclasses import dataclass

from app.ai_engine.prompt_templates import LEAD_INTENT_PROMPT
from app.ai_engine.utils import (
    build_openrouter_llm,
    format_bullets,
    parse_intent_payload,
    truncate_for_context,
)
from app.config import settings
from app.domain.models import Intent, Lead, Offer
from app.exceptions import AIScoringError

logger = logging.getLogger(__name__)

# The model's own 0-100 score is unreliable; only the coarse label is used.
INTENT_POINTS: dict[Intent, int] = {
    Intent.HIGH: 50,
    Intent.MEDIUM: 30,
    Intent.LOW: 10,
}


# ── Output dataclass ──────────────────────────────────────────────────────────

@dataclass
class AIScore:
    intent: Intent
    points: int                     # one of 10 / 30 / 50
    reasoning: str
    raw_response: str               # original LLM text (for debugging)


def build_prompt_inputs(lead: Lead, offer: Offer) -> dict[str, str]:
    """Template variables for LEAD_INTENT_PROMPT."""
    return {
        "offer_name": offer.name or "Not specified",
        "value_props": format_bullets(offer.value_props),
        "ideal_use_cases": format_bullets(offer.ideal_use_cases),
        "name": lead.name,
        "role": lead.role,
        "company": lead.company,
        "industry": lead.industry,
        "location": lead.location,
        "linkedin_bio": truncate_for_context(lead.linkedin_bio, max_chars=1500),
    }


async def score_ai(lead: Lead, offer: Offer) -> AIScore:
    """
    Ask the LLM for the lead's buying intent.

    Args:
        lead:  The lead being scored.
        offer: Current offer (may be Offer.empty()).

    Returns:
        AIScore with points derived from the intent label only.

    Raises:
        AIScoringError: The call failed or timed out, or no JSON could be read.
    """
    llm = build_openrouter_llm()
    chain = LEAD_INTENT_PROMPT | llm

    logger.info("AI scoring lead: %s @ %s", lead.name, lead.company)

    try:
        response = await asyncio.wait_for(
            chain.ainvoke(build_prompt_inputs(lead, offer)),
            timeout=settings.ai_timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        logger.error("AI call timed out after %.1fs for %s", settings.ai_timeout_seconds, lead.name)
        raise AIScoringError(
            f"AI call timed out after {settings.ai_timeout_seconds:g}s"
        ) from exc
    except Exception as exc:
        logger.error("AI call failed for %s: %s", lead.name, exc)
        raise AIScoringError(f"AI call failed: {exc}") from exc

    raw_text = response.content if hasattr(response, "content") else str(response)
    if not isinstance(raw_text, str):
        raw_text = str(raw_text)

    payload = parse_intent_payload(raw_text)
    result = AIScore(
        intent=payload.intent,
        points=INTENT_POINTS[payload.intent],
        reasoning=payload.reasoning,
        raw_response=raw_text,
    )

    logger.info(
        "AI result: intent=%s points=%d for %s @ %s",
        result.intent.value, result.points, lead.name, lead.company,
    )
    return result
