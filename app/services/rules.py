"""
app/services/rules.py — Deterministic keyword-bucket scoring (max 50 points).

Three independent categories, each contributing at most once:
  role         decision maker +20 / influencer +10
  industry     exact ICP +20 / adjacent +10
  completeness all six lead fields present +10
"""

import logging
from dataclasses import dataclass, field

from app.domain.models import Lead

logger = logging.getLogger(__name__)


# ── Keyword buckets (checked in order, first match wins) ─────────────────────

ROLE_BUCKETS: list[tuple[tuple[str, ...], int, str]] = [
    (("chief", "head", "director", "vp"), 20, "decision maker"),
    (("manager", "lead", "senior"), 10, "influencer"),
]

INDUSTRY_BUCKETS: list[tuple[tuple[str, ...], int, str]] = [
    (("saas", "software", "tech"), 20, "exact ICP match"),
    (("marketing", "consulting", "services"), 10, "adjacent to ICP"),
]

COMPLETENESS_POINTS = 10
MAX_RULE_POINTS = 50


@dataclass
class RuleScore:
    points: int
    explanations: list[str] = field(default_factory=list)


def _match_bucket(
    text: str,
    buckets: list[tuple[tuple[str, ...], int, str]],
) -> tuple[int, str] | None:
    """Return (points, label) of the first bucket whose keywords appear in text."""
    lowered = text.lower()
    for keywords, points, label in buckets:
        if any(kw in lowered for kw in keywords):
            return points, label
    return None


def score_rules(lead: Lead) -> RuleScore:
    """
    Score a lead on role seniority, industry fit, and data completeness.

    Args:
        lead: A validated Lead.

    Returns:
        RuleScore with points in [0, 50] and one explanation per bucket that fired.
    """
    points = 0
    explanations: list[str] = []

    role_hit = _match_bucket(lead.role, ROLE_BUCKETS)
    if role_hit:
        pts, label = role_hit
        points += pts
        explanations.append(f"Role '{lead.role}' is {label} (+{pts})")

    industry_hit = _match_bucket(lead.industry, INDUSTRY_BUCKETS)
    if industry_hit:
        pts, label = industry_hit
        points += pts
        explanations.append(f"Industry '{lead.industry}' is {label} (+{pts})")

    if lead.is_complete:
        points += COMPLETENESS_POINTS
        explanations.append(f"All profile fields present (+{COMPLETENESS_POINTS})")

    logger.debug("Rule score for %s: %d (%s)", lead.name or "<unnamed>", points, explanations)
    return RuleScore(points=points, explanations=explanations)
