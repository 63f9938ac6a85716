"""
api/endpoints/score_routes.py — Scoring runs and result retrieval.

POST /score           — Score the uploaded leads against the current offer
GET  /results         — Latest results as JSON (empty list if none)
GET  /results/export  — Latest results as a CSV attachment
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from app.domain.models import ScoredLead
from app.services.lead_service import score_session, summarize
from app.store.export import export_csv
from app.store.repository import SessionStore
from app.store.session import get_session_id, get_store
from api.schemas import ErrorResponse, ScoreResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/score",
    response_model=ScoreResponse,
    summary="Score uploaded leads",
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def run_scoring(
    store: SessionStore = Depends(get_store),
    session_id: str = Depends(get_session_id),
):
    """Run rule + AI scoring over the stored lead batch and store the results."""
    results = await score_session(store, session_id)
    stats = summarize(results)
    return ScoreResponse(
        message=(
            f"Scoring completed. {stats['total']} leads scored "
            f"({stats['High']} High, {stats['Medium']} Medium, {stats['Low']} Low)."
        ),
        results=results,
    )


@router.get("/results", response_model=list[ScoredLead], summary="Get latest results")
def get_results(
    store: SessionStore = Depends(get_store),
    session_id: str = Depends(get_session_id),
):
    """Return the most recent scoring run's results, in upload order."""
    return list(store.get_results(session_id))


@router.get(
    "/results/export",
    summary="Export latest results as CSV",
    responses={200: {"content": {"text/csv": {}}}, 500: {"model": ErrorResponse}},
)
def export_results(
    store: SessionStore = Depends(get_store),
    session_id: str = Depends(get_session_id),
):
    """Download results.csv with columns name, role, company, intent, score, reasoning."""
    try:
        body = export_csv(store.get_results(session_id))
    except Exception as exc:
        logger.error("CSV export failed: %s", exc)
        return JSONResponse(status_code=500, content={"error": f"Failed to export results: {exc}"})

    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=results.csv"},
    )
