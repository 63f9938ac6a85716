"""
api/main.py — FastAPI application entry point.

Run with:
    uvicorn api.main:app --reload
    python -m api.main          # listens on settings.port
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.exceptions import (
    AIScoringError,
    InputValidationError,
    LeadScoringError,
    ParseError,
    StateError,
)
from app.logging_config import configure_logging
from api.endpoints.lead_routes import router as lead_router
from api.endpoints.offer_routes import router as offer_router
from api.endpoints.score_routes import router as score_router

logger = logging.getLogger(__name__)


# ── Lifespan ─────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown logic."""
    configure_logging()
    logger.info(
        "Lead Intent Scorer starting (model=%s, on_ai_failure=%s).",
        settings.openrouter_model, settings.on_ai_failure.value,
    )
    yield
    logger.info("Application shutting down.")


# ── App ───────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="Lead Intent Scorer",
    description=(
        "Scores uploaded sales leads against an offer by combining a keyword "
        "rule engine with an LLM intent classification."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error handlers ───────────────────────────────────────────────────────────

ERROR_STATUS: list[tuple[type[LeadScoringError], int]] = [
    (InputValidationError, 400),
    (StateError, 400),
    (ParseError, 500),
    (AIScoringError, 502),
]

# Friendlier messages for the offer body fields
FIELD_MESSAGES = {
    "name": "name is required and must be a non-empty string",
    "value_props": "value_props must be an array of strings",
    "ideal_use_cases": "ideal_use_cases must be an array of strings",
}


@app.exception_handler(LeadScoringError)
async def lead_scoring_error_handler(request: Request, exc: LeadScoringError):
    status = next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = loc[0] if loc else ""
        message = FIELD_MESSAGES.get(field) or (
            f"{'.'.join(loc)}: {err.get('msg')}" if loc else "Request body must be a JSON object"
        )
        if message not in messages:
            messages.append(message)
    logger.info("%s %s invalid input: %s", request.method, request.url.path, messages)
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("%s %s crashed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ── Routers ───────────────────────────────────────────────────────────────────

app.include_router(offer_router, tags=["Offer"])
app.include_router(lead_router, prefix="/leads", tags=["Leads"])
app.include_router(score_router, tags=["Scoring"])


# ── Health check ─────────────────────────────────────────────────────────────

@app.get("/health", tags=["System"])
def health_check():
    """Returns service liveness status."""
    return {"status": "ok", "service": "lead-intent-scorer"}


@app.get("/", tags=["System"])
def root():
    return {
        "message": "Lead Intent Scorer is running.",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host="0.0.0.0", port=settings.port)
