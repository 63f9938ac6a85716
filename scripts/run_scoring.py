"""
scripts/run_scoring.py — CLI to score a leads CSV against an offer, offline.

Usage:
    python scripts/run_scoring.py --offer offer.json --leads leads.csv
    python scripts/run_scoring.py --offer offer.json --leads leads.csv --out results.csv
    python scripts/run_scoring.py --offer offer.json --leads leads.csv --on-ai-failure abort
"""

import sys
import os
import argparse
import asyncio
import json
import logging

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pydantic import ValidationError

from app.config import settings
from app.domain.models import AIFailurePolicy
from app.exceptions import LeadScoringError
from app.ingestion.normalizer import parse_leads_csv
from app.logging_config import configure_logging
from app.services.lead_service import run_batch, summarize
from app.store.export import export_csv
from api.schemas import OfferIn

logger = logging.getLogger("run_scoring")


def load_offer(path: str) -> OfferIn:
    with open(path, encoding="utf-8") as fh:
        return OfferIn.model_validate(json.load(fh))


def run(offer_path: str, leads_path: str, out_path: str | None, policy: AIFailurePolicy) -> int:
    print("\n" + "="*55)
    print("  Lead Intent Scorer — Batch Scoring")
    print("="*55)

    # ── Step 1: Offer ─────────────────────────────────────────
    print(f"\n[1/3] Loading offer from {offer_path}...")
    try:
        offer = load_offer(offer_path).to_offer()
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        print(f"      Invalid offer: {exc}")
        return 2
    print(f"      Offer: {offer.name}")

    # ── Step 2: Leads ─────────────────────────────────────────
    print(f"\n[2/3] Parsing leads from {leads_path}...")
    try:
        leads = parse_leads_csv(leads_path)
    except LeadScoringError as exc:
        print(f"      {exc}")
        return 2
    print(f"      Parsed {len(leads)} leads.")

    # ── Step 3: Score ─────────────────────────────────────────
    print(f"\n[3/3] Scoring (policy={policy.value})...")
    try:
        results = asyncio.run(run_batch(leads, offer, policy=policy))
    except LeadScoringError as exc:
        print(f"      Scoring failed: {exc}")
        return 1

    if out_path:
        with open(out_path, "wb") as fh:
            fh.write(export_csv(results))
        print(f"      Wrote {len(results)} rows to {out_path}.")
    else:
        print(json.dumps([r.to_row() for r in results], indent=2))

    stats = summarize(results)
    print("\n" + "="*55)
    print(
        f"  Done: {stats['total']} leads | High {stats['High']} | "
        f"Medium {stats['Medium']} | Low {stats['Low']} | avg {stats['average_score']}"
    )
    print("="*55 + "\n")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Score a leads CSV against an offer.")
    parser.add_argument("--offer", required=True, help="Path to offer JSON")
    parser.add_argument("--leads", required=True, help="Path to leads CSV")
    parser.add_argument("--out", default=None, help="Write results CSV here (default: print JSON)")
    parser.add_argument(
        "--on-ai-failure",
        choices=[p.value for p in AIFailurePolicy],
        default=settings.on_ai_failure.value,
        help="abort the batch or degrade the failed lead (default from .env)",
    )
    args = parser.parse_args()
    configure_logging()
    sys.exit(run(args.offer, args.leads, args.out, AIFailurePolicy(args.on_ai_failure)))


if __name__ == "__main__":
    main()
