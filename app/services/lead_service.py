"""
app/services/lead_service.py — Business logic orchestrating a scoring run.

This is the "glue" layer that coordinates:
  - Taking a consistent snapshot of the session's offer and lead batch
  - Fanning out one scoring task per lead and gathering them in input order
  - Applying the AI failure policy (abort the batch / degrade the lead)
  - Replacing the session's results in one step
"""

import asyncio
import logging
from collections import Counter
from typing import Optional, Sequence

from app.config import settings
from app.domain.models import AIFailurePolicy, Intent, Lead, Offer, ScoredLead
from app.exceptions import AIScoringError, NoLeadsError, NoOfferError
from app.services.scoring import fallback_result, score_lead
from app.store.repository import SessionStore

logger = logging.getLogger(__name__)


async def _score_or_fallback(index: int, lead: Lead, offer: Offer) -> tuple[ScoredLead, bool]:
    """Degrade policy: swap an AI failure for the fallback result. Returns (result, degraded)."""
    try:
        return await score_lead(lead, offer), False
    except AIScoringError as exc:
        logger.warning("Lead #%d (%s) degraded after AI failure: %s", index, lead.name, exc)
        return fallback_result(lead), True


async def _run_degrade(leads: Sequence[Lead], offer: Offer) -> list[ScoredLead]:
    outcomes = await asyncio.gather(
        *(_score_or_fallback(i, lead, offer) for i, lead in enumerate(leads))
    )
    degraded = sum(1 for _, was_degraded in outcomes if was_degraded)
    if degraded:
        logger.warning("%d / %d leads fell back after AI failures.", degraded, len(leads))
    return [result for result, _ in outcomes]


async def _run_abort(leads: Sequence[Lead], offer: Offer) -> list[ScoredLead]:
    tasks = [asyncio.create_task(score_lead(lead, offer)) for lead in leads]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        for task in tasks:
            if task in done and task.exception() is not None:
                for other in pending:
                    other.cancel()
                if pending:
                    await asyncio.gather(*pending, return_exceptions=True)
                logger.error("Aborting batch of %d leads: %s", len(leads), task.exception())
                raise task.exception()
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    # tasks list is in input order, whatever order they finished in
    return [task.result() for task in tasks]


async def run_batch(
    leads: Sequence[Lead],
    offer: Optional[Offer],
    policy: Optional[AIFailurePolicy] = None,
) -> list[ScoredLead]:
    """
    Score every lead concurrently and return results in input order.

    Args:
        leads:  The lead batch; must not be empty.
        offer:  Current offer, or None if none was submitted.
        policy: AI failure policy; defaults to settings.on_ai_failure.

    Returns:
        One ScoredLead per input lead, same order.

    Raises:
        NoLeadsError:   Empty batch.
        NoOfferError:   offer is None and settings.require_offer is set.
        AIScoringError: A lead's AI call failed under the abort policy.
    """
    if not leads:
        raise NoLeadsError()

    if offer is None:
        if settings.require_offer:
            raise NoOfferError()
        logger.warning("No offer submitted; scoring %d leads against an empty offer.", len(leads))
        offer = Offer.empty()

    policy = AIFailurePolicy(policy or settings.on_ai_failure)
    logger.info("Scoring batch of %d leads (policy=%s).", len(leads), policy.value)

    if policy is AIFailurePolicy.ABORT:
        results = await _run_abort(leads, offer)
    else:
        results = await _run_degrade(leads, offer)

    logger.info("Batch scored: %s", summarize(results))
    return results


async def score_session(
    store: SessionStore,
    session_id: str,
    policy: Optional[AIFailurePolicy] = None,
) -> list[ScoredLead]:
    """
    Run a scoring batch against one session's stored offer and leads.

    The offer and lead batch are read once, together. Results are written
    only if the whole run succeeds.
    """
    snapshot = store.snapshot(session_id)
    if not snapshot.leads:
        raise NoLeadsError()

    results = await run_batch(snapshot.leads, snapshot.offer, policy=policy)
    store.replace_results(session_id, results)
    return results


def summarize(results: Sequence[ScoredLead]) -> dict:
    """Counts per intent plus the average score, e.g. for log lines and the CLI."""
    counts = Counter(r.intent for r in results)
    summary = {intent.value: counts.get(intent, 0) for intent in Intent}
    summary["total"] = len(results)
    summary["average_score"] = (
        round(sum(r.score for r in results) / len(results), 1) if results else 0.0
    )
    return summary
