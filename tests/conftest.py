"""
tests/conftest.py — Shared pytest configuration and fixtures.

Sets dummy environment variables BEFORE any app module is imported,
so that pydantic-settings doesn't fail on missing required fields.
"""

import os
import pytest

# ── Set dummy env vars before any app module is imported ─────────────────────
# This runs at collection time, before tests execute.
os.environ.setdefault("OPENROUTER_API_KEY", "test-key")
os.environ.setdefault("OPENROUTER_MODEL", "test-model")
os.environ.setdefault("AI_TIMEOUT_SECONDS", "5")

from app.domain.models import Lead, Offer  # noqa: E402


@pytest.fixture
def offer() -> Offer:
    return Offer(name="X", value_props=["a"], ideal_use_cases=["b"])


@pytest.fixture
def vp_saas_lead() -> Lead:
    return Lead(
        name="Ava Patel",
        role="VP of Sales",
        company="FlowMetrics",
        industry="SaaS",
        location="Austin",
        linkedin_bio="Scaling revenue teams at B2B SaaS companies.",
    )


@pytest.fixture
def make_lead():
    """Factory: a complete lead with any fields overridden."""
    def _make(**overrides) -> Lead:
        fields = dict(
            name="Sam Lee",
            role="Engineer",
            company="Acme",
            industry="Retail",
            location="Berlin",
            linkedin_bio="Builds things.",
        )
        fields.update(overrides)
        return Lead(**fields)
    return _make
