"""
Excel download endpoints: transactions, accounts, dashboard.

Each request builds its workbook under a unique name in the user's export
folder; the file is deleted once the response has been sent.
"""
from __future__ import annotations

import re
import tempfile
from pathlib import Path
from typing import Callable

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.responses import FileResponse

from app.config import DEFAULT_TRAILING_MONTHS, EXPORTS_FOLDER
from app.data.store import DataStore
from app.data.schemas import DateWindow
from app.api.dependencies import get_store, get_user_id, parse_window, to_http
from app.errors import FinanceTrackerError
from app.reports import accounts_export, dashboard_report, transactions_export

router = APIRouter(prefix="/api/export", tags=["export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _user_folder(user_id: str) -> Path:
    safe = re.sub(r"[^\w\-]", "_", user_id)[:64]
    return EXPORTS_FOLDER / safe


def _download(
    user_id: str,
    filename: str,
    build: Callable[[Path], object],
    background_tasks: BackgroundTasks,
) -> FileResponse:
    folder = _user_folder(user_id)
    folder.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        dir=folder, prefix=Path(filename).stem + "_", suffix=".xlsx", delete=False,
    ) as tmp:
        out_path = Path(tmp.name)
    try:
        build(out_path)
    except BaseException:
        out_path.unlink(missing_ok=True)
        raise
    background_tasks.add_task(out_path.unlink, missing_ok=True)
    return FileResponse(path=str(out_path), filename=filename, media_type=XLSX_MEDIA_TYPE)


@router.get("/transactions.xlsx")
def export_transactions(
    background_tasks: BackgroundTasks,
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
    window: DateWindow | None = Depends(parse_window),
):
    """All transactions (or a window) plus a Summary sheet."""
    try:
        return _download(
            user_id,
            transactions_export.default_filename(),
            lambda path: transactions_export.generate_excel(store, user_id, path, window),
            background_tasks,
        )
    except FinanceTrackerError as e:
        raise to_http(e) from e


@router.get("/accounts.xlsx")
def export_accounts(
    background_tasks: BackgroundTasks,
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
):
    try:
        return _download(
            user_id,
            accounts_export.default_filename(),
            lambda path: accounts_export.generate_excel(store, user_id, path),
            background_tasks,
        )
    except FinanceTrackerError as e:
        raise to_http(e) from e


@router.get("/dashboard.xlsx")
def export_dashboard(
    background_tasks: BackgroundTasks,
    months: int = Query(DEFAULT_TRAILING_MONTHS, ge=1, le=120),
    store: DataStore = Depends(get_store),
    user_id: str = Depends(get_user_id),
    window: DateWindow | None = Depends(parse_window),
):
    """Dashboard KPIs, expense breakdown and monthly trends as a workbook."""
    return _download(
        user_id,
        "dashboard_report.xlsx",
        lambda path: dashboard_report.generate_excel(store, user_id, path, window, months),
        background_tasks,
    )
