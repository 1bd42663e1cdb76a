"""
Meta endpoints: health.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.data.store import DataStore
from app.api.dependencies import get_store
from app.api.response_models import HealthResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store)):
    return HealthResponse(
        status="ok",
        users=len(store.user_ids()),
        transactions=store.transaction_count(),
    )
