"""
app/services/scoring.py — Combines rule points and AI points into one result.

The AI label is authoritative for intent; the rule engine only adds to the
numeric score. Identity fields always come from the input lead, never from
whatever the model echoed back.
"""

import logging

from app.ai_engine.processor import AIScore, score_ai
from app.config import settings
from app.domain.models import Intent, Lead, Offer, ScoredLead
from app.services.rules import RuleScore, score_rules

logger = logging.getLogger(__name__)

FALLBACK_REASONING = "Error in AI processing."


def combine(lead: Lead, rule_score: RuleScore, ai_score: AIScore) -> ScoredLead:
    """Merge both scorers into the final result for one lead."""
    reasoning = ai_score.reasoning
    if settings.include_rule_reasoning and rule_score.explanations:
        reasoning = f"{reasoning} | Rules: {'; '.join(rule_score.explanations)}"

    return ScoredLead(
        name=lead.name,
        role=lead.role,
        company=lead.company,
        intent=ai_score.intent,
        score=rule_score.points + ai_score.points,
        reasoning=reasoning,
    )


def fallback_result(lead: Lead) -> ScoredLead:
    """Result used for a lead whose AI call failed under the degrade policy."""
    return ScoredLead(
        name=lead.name,
        role=lead.role,
        company=lead.company,
        intent=Intent.LOW,
        score=0,
        reasoning=FALLBACK_REASONING,
    )


async def score_lead(lead: Lead, offer: Offer) -> ScoredLead:
    """
    Score one lead end to end. AIScoringError propagates to the caller.
    """
    ai_score = await score_ai(lead, offer)
    rule_score = score_rules(lead)
    result = combine(lead, rule_score, ai_score)
    logger.debug(
        "Combined %s: rules=%d ai=%d total=%d",
        lead.name, rule_score.points, ai_score.points, result.score,
    )
    return result
