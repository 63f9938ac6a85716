"""
api/endpoints/offer_routes.py — Submit the offer leads are scored against.

POST /offer — Validate and store the offer, replacing any previous one
"""

import logging

from fastapi import APIRouter, Depends

from app.store.repository import SessionStore
from app.store.session import get_session_id, get_store
from api.schemas import ErrorResponse, OfferIn, OfferResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/offer",
    response_model=OfferResponse,
    status_code=201,
    summary="Submit offer",
    responses={400: {"model": ErrorResponse}},
)
def submit_offer(
    payload: OfferIn,
    store: SessionStore = Depends(get_store),
    session_id: str = Depends(get_session_id),
):
    """Store the offer for this session. `[]` is accepted for both list fields."""
    offer = payload.to_offer()
    store.save_offer(session_id, offer)
    logger.info(
        "Offer received: %s (%d value props, %d use cases)",
        offer.name, len(offer.value_props), len(offer.ideal_use_cases),
    )
    return OfferResponse(message="Offer received successfully", offer=offer)
