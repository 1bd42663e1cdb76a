"""
Finance Tracker — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import BASE_FOLDER, EXPORTS_FOLDER, STORE_FILE
from app.data.store import DataStore
from app.logging_setup import configure_logging
from app.api.dependencies import set_store
from app.api.router_meta import router as meta_router
from app.api.router_accounts import router as accounts_router
from app.api.router_upload import router as upload_router
from app.api.router_dashboard import router as dashboard_router
from app.api.router_export import router as export_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the store at startup."""
    configure_logging()
    for d in [BASE_FOLDER, EXPORTS_FOLDER]:
        d.mkdir(parents=True, exist_ok=True)

    store = DataStore(STORE_FILE)
    store.load()
    set_store(store)

    logger.info("Finance Tracker ready — %d users, %d transactions (%s)",
                len(store.user_ids()), store.transaction_count(), STORE_FILE)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Finance Tracker API",
        description="Personal finance — statement import, dashboard aggregates, Excel export",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(accounts_router)
    app.include_router(upload_router)
    app.include_router(dashboard_router)
    app.include_router(export_router)

    return app


app = create_app()
