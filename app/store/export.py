"""
app/store/export.py — Render scored results as a CSV attachment.
"""

import io
import logging
from typing import Iterable

import pandas as pd

from app.domain.models import RESULT_COLUMNS, ScoredLead

logger = logging.getLogger(__name__)


def export_csv(results: Iterable[ScoredLead]) -> bytes:
    """
    Render results with exactly RESULT_COLUMNS, header row always included.

    Returns:
        UTF-8 encoded CSV bytes, one row per result in stored order.
    """
    rows = [r.to_row() for r in results]
    df = pd.DataFrame(rows, columns=list(RESULT_COLUMNS))
    stream = io.StringIO()
    df.to_csv(stream, index=False)
    logger.debug("Exported %d results to CSV.", len(rows))
    return stream.getvalue().encode("utf-8")
