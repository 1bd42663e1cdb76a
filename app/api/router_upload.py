"""
Statement upload endpoints: preview (parse only) and import (parse + save).
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from app.config import MAX_UPLOAD_BYTES
from app.data.store import DataStore
from app.analytics.common import sanitize_for_json
from app.api.dependencies import get_store, get_user_id, to_http
from app.api.response_models import ImportResponse
from app.errors import FinanceTrackerError
from app.services.importer import import_statement, parse_statement

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/import", tags=["import"])


async def _read_upload(file: UploadFile) -> tuple[bytes, str]:
    if not file.filename:
        raise HTTPException(400, "Missing filename")
    content = await file.read()
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(413, f"File too large (max {MAX_UPLOAD_BYTES // (1024 * 1024)} MB)")
    return content, file.filename


@router.post("/preview", response_model=ImportResponse)
async def preview_statement(
    file: UploadFile = File(...),
    user_id: str = Depends(get_user_id),
):
    """Parse a statement and return what would be imported. Nothing is saved."""
    content, filename = await _read_upload(file)
    try:
        report = parse_statement(content, filename)
    except FinanceTrackerError as e:
        raise to_http(e) from e
    return sanitize_for_json({
        "status": "preview",
        "imported": 0,
        **report.to_dict(),
        "transactions": [t.to_dict() for t in report.transactions],
    })


@router.post("", response_model=ImportResponse)
async def import_file(
    file: UploadFile = File(...),
    account_id: Optional[str] = Form(None),
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    """Parse a statement and save its transactions into one of the user's accounts."""
    content, filename = await _read_upload(file)
    try:
        result = import_statement(store, user_id, content, filename, account_id)
    except FinanceTrackerError as e:
        logger.warning("Import of %s for user %s failed: %s", filename, user_id, e)
        raise to_http(e) from e
    return sanitize_for_json({
        **result.to_dict(),
        "transactions": [t.to_dict() for t in result.stored],
    })
