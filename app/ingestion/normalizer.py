"""
app/ingestion/normalizer.py — Turns an uploaded CSV into clean Lead records.

Reads the file with pandas, standardizes headers, fills missing columns with
empty strings, and returns typed Lead models ready for scoring. Either the
whole file becomes a lead list or ParseError is raised; there is no partial
result.
"""

import logging
from pathlib import Path
from typing import IO, Any, Union

import pandas as pd
from pydantic import ValidationError

from app.domain.models import LEAD_FIELDS, Lead
from app.exceptions import ParseError

logger = logging.getLogger(__name__)

CsvSource = Union[str, Path, IO[bytes], IO[str]]


# ── Helpers ──────────────────────────────────────────────────────────────────

def _normalize_header(column: Any) -> str:
    """'  LinkedIn_Bio ' → 'linkedin_bio'."""
    return str(column).strip().lower().replace(" ", "_")


def normalize_lead(raw: dict[str, Any]) -> Lead:
    """Build a Lead from one row dict; absent fields become empty strings."""
    return Lead(**{f: raw.get(f) or "" for f in LEAD_FIELDS})


# ── Main function ────────────────────────────────────────────────────────────

def parse_leads_csv(source: CsvSource) -> list[Lead]:
    """
    Parse a CSV with columns name, role, company, industry, location, linkedin_bio.

    Header matching is case-insensitive; unknown columns are ignored and
    missing ones default to "". A completely empty file yields [].

    Raises:
        ParseError: The file is not readable as CSV.
    """
    try:
        df = pd.read_csv(
            source, dtype=str, keep_default_na=False, skipinitialspace=True, index_col=False,
        )
    except pd.errors.EmptyDataError:
        logger.info("Uploaded CSV is empty; no leads parsed.")
        return []
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as exc:
        logger.error("Could not parse leads CSV: %s", exc)
        raise ParseError(f"Could not parse CSV: {exc}") from exc

    df.columns = [_normalize_header(c) for c in df.columns]
    missing = [f for f in LEAD_FIELDS if f not in df.columns]
    if missing:
        logger.warning("CSV missing columns %s; filling with empty strings.", missing)
    for col in missing:
        df[col] = ""

    leads = []
    try:
        for raw in df[list(LEAD_FIELDS)].to_dict(orient="records"):
            leads.append(normalize_lead(raw))
    except ValidationError as exc:
        raise ParseError(f"Invalid lead row: {exc}") from exc

    logger.info("Parsed %d leads from CSV.", len(leads))
    return leads
