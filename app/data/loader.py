"""
Spreadsheet decoding: uploaded statement bytes -> list of raw rows.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
import pandas as pd

from app.config import SUPPORTED_EXTENSIONS
from app.errors import UnsupportedFormatError

logger = logging.getLogger(__name__)


def _extension(filename: str) -> str:
    return Path(filename or "").suffix.lower()


def is_supported(filename: str) -> bool:
    return _extension(filename) in SUPPORTED_EXTENSIONS


def _read_frame(content: bytes, filename: str) -> pd.DataFrame:
    ext = _extension(filename)
    buf = io.BytesIO(content)
    if ext == ".xlsx":
        return pd.read_excel(buf, sheet_name=0, engine="openpyxl")
    if ext == ".xls":
        # Legacy .xls needs xlrd.
        return pd.read_excel(buf, sheet_name=0, engine="xlrd")
    if ext == ".csv":
        # Keep every cell as text so dates like 01/05/2024 reach the normalizer untouched.
        return pd.read_csv(buf, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    raise UnsupportedFormatError(
        "Unsupported file format. Please upload Excel (.xlsx, .xls) or CSV files."
    )


def _clean_cell(value):
    if isinstance(value, str):
        return value
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def read_statement(content: bytes, filename: str) -> list[dict]:
    """Decode the first sheet of a statement into a list of row dicts.

    Column headers are kept verbatim; empty cells become ``None``.
    Raises UnsupportedFormatError when the file cannot be read as a table.
    """
    if not is_supported(filename):
        raise UnsupportedFormatError(
            f"Unsupported file format: {filename or '<unknown>'}. "
            "Please upload Excel (.xlsx, .xls) or CSV files."
        )
    if not content:
        raise UnsupportedFormatError(f"{filename} is empty")

    try:
        df = _read_frame(content, filename)
    except UnsupportedFormatError:
        raise
    except pd.errors.EmptyDataError as exc:
        raise UnsupportedFormatError(f"{filename} contains no data") from exc
    except Exception as exc:
        raise UnsupportedFormatError(f"Could not read {filename}: {exc}") from exc

    df.columns = [str(c).strip() for c in df.columns]
    rows = []
    for record in df.to_dict("records"):
        row = {k: _clean_cell(v) for k, v in record.items()}
        if all(v is None or (isinstance(v, str) and not v.strip()) for v in row.values()):
            continue
        rows.append(row)

    logger.info("Read %d rows from %s (%d columns)", len(rows), filename, len(df.columns))
    return rows
