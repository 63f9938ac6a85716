"""
api/endpoints/lead_routes.py — Lead batch upload.

POST /leads/upload — Parse a CSV upload and replace the session's lead batch
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from app.exceptions import InputValidationError
from app.ingestion.normalizer import parse_leads_csv
from app.ingestion.uploads import temporary_upload
from app.store.repository import SessionStore
from app.store.session import get_session_id, get_store
from api.schemas import ErrorResponse, UploadResponse

logger = logging.getLogger(__name__)
router = APIRouter()

# Windows browsers report .csv files as application/vnd.ms-excel
ALLOWED_CSV_TYPES = {"text/csv", "application/csv", "application/vnd.ms-excel"}


def _content_type(upload: UploadFile) -> str:
    return (upload.content_type or "").split(";")[0].strip().lower()


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload leads CSV",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_leads(
    file: Optional[UploadFile] = File(default=None),
    store: SessionStore = Depends(get_store),
    session_id: str = Depends(get_session_id),
):
    """
    Accept a multipart `file` field with columns
    name, role, company, industry, location, linkedin_bio.
    The parsed batch replaces any previously uploaded leads.
    """
    if file is None:
        raise InputValidationError("No file uploaded. Send a CSV in the 'file' field")
    if _content_type(file) not in ALLOWED_CSV_TYPES:
        raise InputValidationError(
            f"Only CSV files are allowed (got '{file.content_type or 'unknown'}')"
        )

    contents = await file.read()
    with temporary_upload(contents) as path:
        leads = parse_leads_csv(path)

    store.replace_leads(session_id, leads)
    logger.info("Uploaded %d leads from %s", len(leads), file.filename)
    return UploadResponse(
        message="Leads uploaded successfully",
        count=len(leads),
        leads=leads,
    )
