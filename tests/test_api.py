"""
tests/test_api.py — HTTP-level tests for the FastAPI routes.

Each test gets a fresh in-memory store via dependency override, and the AI
scorer is replaced with an AsyncMock so no LLM calls are made.
"""

import io
import os
import pytest
from unittest.mock import AsyncMock, patch

import pandas as pd
from fastapi.testclient import TestClient

from app.ai_engine.processor import AIScore
from app.domain.models import AIFailurePolicy, Intent
from app.exceptions import AIScoringError
from app.store.repository import InMemorySessionStore
from app.store.session import get_store
from api.main import app


CSV_HEADER = "name,role,company,industry,location,linkedin_bio\n"
VP_ROW = "Ava Patel,VP of Sales,FlowMetrics,SaaS,Austin,Scaling revenue teams\n"
MANAGER_ROW = "Ben Ortiz,Marketing Manager,Brightside,Marketing,Denver,\n"

HIGH = AIScore(intent=Intent.HIGH, points=50, reasoning="Decision maker at a SaaS company.", raw_response="{}")


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def post_offer(client, **overrides):
    body = {"name": "X", "value_props": ["a"], "ideal_use_cases": ["b"]}
    body.update(overrides)
    return client.post("/offer", json=body)


def upload(client, text, content_type: str = "text/csv", headers=None):
    body = text if isinstance(text, bytes) else text.encode("utf-8")
    files = {"file": ("leads.csv", io.BytesIO(body), content_type)}
    return client.post("/leads/upload", files=files, headers=headers or {})


# ── POST /offer ───────────────────────────────────────────────────────────────

class TestOffer:
    def test_valid_offer_is_stored(self, client, store):
        resp = post_offer(client)
        assert resp.status_code == 201
        assert resp.json()["offer"] == {"name": "X", "value_props": ["a"], "ideal_use_cases": ["b"]}
        assert store.get_offer("default").name == "X"

    def test_empty_arrays_accepted(self, client):
        resp = post_offer(client, value_props=[], ideal_use_cases=[])
        assert resp.status_code == 201

    @pytest.mark.parametrize("name", [None, 123, ""])
    def test_bad_name_rejected(self, client, name):
        resp = post_offer(client, name=name)
        assert resp.status_code == 400
        assert resp.json() == {"error": "name is required and must be a non-empty string"}

    def test_missing_name_rejected(self, client):
        resp = client.post("/offer", json={"value_props": [], "ideal_use_cases": []})
        assert resp.status_code == 400
        assert "name" in resp.json()["error"]

    @pytest.mark.parametrize("field", ["value_props", "ideal_use_cases"])
    def test_non_array_rejected(self, client, field):
        resp = post_offer(client, **{field: "not a list"})
        assert resp.status_code == 400
        assert resp.json()["error"] == f"{field} must be an array of strings"

    @pytest.mark.parametrize("field", ["value_props", "ideal_use_cases"])
    def test_non_string_items_rejected(self, client, field):
        resp = post_offer(client, **{field: [1, 2]})
        assert resp.status_code == 400
        assert resp.json()["error"] == f"{field} must be an array of strings"

    def test_missing_body_rejected(self, client):
        resp = client.post("/offer")
        assert resp.status_code == 400
        assert "error" in resp.json()


# ── POST /leads/upload ────────────────────────────────────────────────────────

class TestUpload:
    def test_upload_replaces_batch(self, client, store):
        upload(client, CSV_HEADER + VP_ROW + MANAGER_ROW)
        resp = upload(client, CSV_HEADER + MANAGER_ROW)
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 1
        assert body["leads"][0]["name"] == "Ben Ortiz"
        assert body["leads"][0]["linkedin_bio"] == ""
        assert [l.name for l in store.get_leads("default")] == ["Ben Ortiz"]

    def test_no_file_rejected(self, client):
        resp = client.post("/leads/upload")
        assert resp.status_code == 400
        assert "No file uploaded" in resp.json()["error"]

    def test_wrong_type_rejected(self, client, store):
        resp = upload(client, "{}", content_type="application/json")
        assert resp.status_code == 400
        assert "Only CSV" in resp.json()["error"]
        assert store.get_leads("default") == ()

    def test_parse_failure_is_500_and_temp_file_removed(self, client):
        created = []
        from app.ingestion import uploads

        real_mkstemp = uploads.tempfile.mkstemp

        def spy_mkstemp(*args, **kwargs):
            fd, path = real_mkstemp(*args, **kwargs)
            created.append(path)
            return fd, path

        with patch.object(uploads.tempfile, "mkstemp", side_effect=spy_mkstemp):
            resp = upload(client, b"name,role\n\xff\xfe\xfa,B\n")

        assert resp.status_code == 500
        assert "Could not parse CSV" in resp.json()["error"]
        assert created and all(not os.path.exists(p) for p in created)


# ── POST /score ───────────────────────────────────────────────────────────────

class TestScore:
    def test_no_leads_is_400(self, client):
        resp = client.post("/score")
        assert resp.status_code == 400
        assert resp.json() == {"error": "No leads uploaded to score. Upload CSV first"}

    def test_vp_saas_high_intent_end_to_end(self, client):
        post_offer(client)
        upload(client, CSV_HEADER + VP_ROW)
        with patch("app.services.scoring.score_ai", AsyncMock(return_value=HIGH)):
            resp = client.post("/score")

        assert resp.status_code == 200
        body = resp.json()
        assert "Scoring completed" in body["message"]
        assert body["results"] == [{
            "name": "Ava Patel",
            "role": "VP of Sales",
            "company": "FlowMetrics",
            "intent": "High",
            "score": 100,
            "reasoning": "Decision maker at a SaaS company.",
        }]

    def test_scoring_without_offer_still_succeeds(self, client):
        upload(client, CSV_HEADER + VP_ROW)
        with patch("app.services.scoring.score_ai", AsyncMock(return_value=HIGH)):
            resp = client.post("/score")
        assert resp.status_code == 200

    def test_degrade_policy_keeps_batch(self, client):
        upload(client, CSV_HEADER + VP_ROW + MANAGER_ROW)

        async def flaky(lead, _offer):
            if lead.name == "Ben Ortiz":
                raise AIScoringError("no parseable JSON in model output")
            return HIGH

        with patch("app.services.lead_service.settings") as mock_settings, \
                patch("app.services.scoring.score_ai", side_effect=flaky):
            mock_settings.on_ai_failure = AIFailurePolicy.DEGRADE
            mock_settings.require_offer = False
            resp = client.post("/score")

        assert resp.status_code == 200
        results = resp.json()["results"]
        assert [r["name"] for r in results] == ["Ava Patel", "Ben Ortiz"]
        assert results[1] == {
            "name": "Ben Ortiz", "role": "Marketing Manager", "company": "Brightside",
            "intent": "Low", "score": 0, "reasoning": "Error in AI processing.",
        }

    def test_abort_policy_returns_502_and_stores_nothing(self, client, store):
        upload(client, CSV_HEADER + VP_ROW)
        with patch("app.services.lead_service.settings") as mock_settings, \
                patch("app.services.scoring.score_ai", AsyncMock(side_effect=AIScoringError("AI call failed: down"))):
            mock_settings.on_ai_failure = AIFailurePolicy.ABORT
            mock_settings.require_offer = False
            resp = client.post("/score")

        assert resp.status_code == 502
        assert resp.json() == {"error": "AI call failed: down"}
        assert store.get_results("default") == ()

    def test_sessions_do_not_share_leads(self, client):
        upload(client, CSV_HEADER + VP_ROW, headers={"X-Session-Id": "team-a"})
        resp = client.post("/score", headers={"X-Session-Id": "team-b"})
        assert resp.status_code == 400


# ── GET /results, /results/export ─────────────────────────────────────────────

class TestResults:
    def test_empty_results(self, client):
        resp = client.get("/results")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_reads_under_many_session_ids_store_nothing(self, client, store):
        for i in range(200):
            resp = client.get("/results", headers={"X-Session-Id": f"visitor-{i}"})
            assert resp.status_code == 200
        assert store._sessions == {}

    def test_results_idempotent(self, client):
        post_offer(client)
        upload(client, CSV_HEADER + VP_ROW + MANAGER_ROW)
        with patch("app.services.scoring.score_ai", AsyncMock(return_value=HIGH)):
            client.post("/score")
        first = client.get("/results")
        second = client.get("/results")
        assert first.content == second.content
        assert [r["name"] for r in first.json()] == ["Ava Patel", "Ben Ortiz"]

    def test_export_empty_is_header_only(self, client):
        resp = client.get("/results/export")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.text.strip() == "name,role,company,intent,score,reasoning"

    def test_export_matches_results(self, client):
        upload(client, CSV_HEADER + VP_ROW + MANAGER_ROW)
        with patch("app.services.scoring.score_ai", AsyncMock(return_value=HIGH)):
            client.post("/score")

        resp = client.get("/results/export")
        assert resp.status_code == 200
        assert resp.headers["content-disposition"] == "attachment; filename=results.csv"

        df = pd.read_csv(io.BytesIO(resp.content), dtype=str, keep_default_na=False)
        json_rows = [{k: str(v) for k, v in r.items()} for r in client.get("/results").json()]
        assert df.to_dict(orient="records") == json_rows

    def test_export_failure_returns_json_error(self, client):
        with patch("api.endpoints.score_routes.export_csv", side_effect=RuntimeError("disk full")):
            resp = client.get("/results/export")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to export results: disk full"}


# ── System ────────────────────────────────────────────────────────────────────

def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "service": "lead-intent-scorer"}


def test_unexpected_error_returns_json_500(store):
    app.dependency_overrides[get_store] = lambda: store
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            upload(c, CSV_HEADER + VP_ROW)
            with patch("api.endpoints.score_routes.score_session", AsyncMock(side_effect=RuntimeError("boom"))):
                resp = c.post("/score")
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
