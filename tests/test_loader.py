import datetime as dt
import io

import pytest
from openpyxl import Workbook

from app.data.loader import is_supported, read_statement
from app.errors import UnsupportedFormatError


def _xlsx_bytes(rows: list[list]) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def test_is_supported() -> None:
    assert is_supported("statement.CSV")
    assert is_supported("may.xlsx")
    assert is_supported("old.xls")
    assert not is_supported("statement.pdf")
    assert not is_supported("")


def test_csv_headers_stripped_and_blank_rows_skipped() -> None:
    content = b"Date , Description,Amount\n01/05/2024,Coffee,-4.50\n,,\n02/05/2024,Tea,-2\n"
    rows = read_statement(content, "statement.csv")

    assert rows == [
        {"Date": "01/05/2024", "Description": "Coffee", "Amount": "-4.50"},
        {"Date": "02/05/2024", "Description": "Tea", "Amount": "-2"},
    ]


def test_csv_with_byte_order_mark() -> None:
    content = "\ufeffDate,Description,Amount\n2024-05-01,Coffee,-4.50\n".encode("utf-8")
    (row,) = read_statement(content, "bom.csv")
    assert "Date" in row


def test_xlsx_first_sheet_with_native_cells() -> None:
    content = _xlsx_bytes([
        ["Date", "Description", "Debit", "Credit"],
        [dt.datetime(2024, 5, 1), "Rent", 1200, None],
        [dt.datetime(2024, 5, 2), "Refund", None, 50.25],
    ])
    rent, refund = read_statement(content, "statement.xlsx")

    assert rent["Description"] == "Rent"
    assert rent["Debit"] == 1200
    assert rent["Credit"] is None
    assert refund["Credit"] == 50.25
    assert refund["Debit"] is None


def test_unsupported_extension() -> None:
    with pytest.raises(UnsupportedFormatError):
        read_statement(b"%PDF-1.4", "statement.pdf")


def test_empty_upload() -> None:
    with pytest.raises(UnsupportedFormatError):
        read_statement(b"", "statement.csv")


def test_corrupt_workbook() -> None:
    with pytest.raises(UnsupportedFormatError):
        read_statement(b"definitely not a zip file", "statement.xlsx")
