"""
api/schemas.py — Pydantic request/response models for all API endpoints.

These are the API contract, kept apart from the domain models so input is
validated once at the boundary before the scoring core sees it.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from app.domain.models import Lead, Offer, ScoredLead


# ── Shared ────────────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    error: str


# ── Offer ─────────────────────────────────────────────────────────────────────

class OfferIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: StrictStr = Field(..., min_length=1, description="Offer / product name")
    value_props: list[StrictStr] = Field(..., description="May be an empty list")
    ideal_use_cases: list[StrictStr] = Field(..., description="May be an empty list")

    def to_offer(self) -> Offer:
        return Offer(
            name=self.name,
            value_props=list(self.value_props),
            ideal_use_cases=list(self.ideal_use_cases),
        )


class OfferResponse(BaseModel):
    message: str
    offer: Offer


# ── Leads ─────────────────────────────────────────────────────────────────────

class UploadResponse(BaseModel):
    message: str
    count: int
    leads: list[Lead]


# ── Scoring ───────────────────────────────────────────────────────────────────

class ScoreResponse(BaseModel):
    message: str
    results: list[ScoredLead]
