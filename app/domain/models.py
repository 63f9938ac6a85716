"""
app/domain/models.py — Core records for the scoring pipeline.

  - Offer      → the product / value proposition used as scoring context
  - Lead       → one prospect row from an uploaded CSV
  - ScoredLead → the final per-lead result (rule points + AI points)
"""

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Enums ────────────────────────────────────────────────────────────────────

class Intent(str, enum.Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class AIFailurePolicy(str, enum.Enum):
    ABORT = "abort"
    DEGRADE = "degrade"


LEAD_FIELDS = ("name", "role", "company", "industry", "location", "linkedin_bio")
RESULT_COLUMNS = ("name", "role", "company", "intent", "score", "reasoning")


# ── Models ───────────────────────────────────────────────────────────────────

class Offer(BaseModel):
    """The offer currently being sold. Replaced wholesale, never edited."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    value_props: list[str] = Field(default_factory=list)
    ideal_use_cases: list[str] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "Offer":
        """Stand-in used when scoring runs before any offer was submitted."""
        return cls()


class Lead(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    role: str = ""
    company: str = ""
    industry: str = ""
    location: str = ""
    linkedin_bio: str = ""

    @field_validator(*LEAD_FIELDS, mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        # Absent CSV cells arrive as None; everything else must already be a str
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def is_complete(self) -> bool:
        return all(getattr(self, f) for f in LEAD_FIELDS)


class ScoredLead(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    role: str
    company: str
    intent: Intent
    score: int
    reasoning: str

    def to_row(self) -> dict[str, Any]:
        """Flat dict in RESULT_COLUMNS order, enum rendered as its label."""
        data = self.model_dump(mode="json")
        return {col: data[col] for col in RESULT_COLUMNS}
