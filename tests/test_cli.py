import logging
from pathlib import Path

import pytest
from openpyxl import load_workbook

from app.cli import main
from app.logging_setup import _parse_level, configure_logging

STATEMENT = "Date,Description,Amount\n01/05/2024,Coffee,-4.50\n2024-05-02,Salary,3000\n"


def _run(store_path: Path, *args: str) -> int:
    return main(["--store", str(store_path), *args])


def test_seed_import_summary_export(tmp_path: Path, capsys) -> None:
    store_path = tmp_path / "store.json"
    statement = tmp_path / "may.csv"
    statement.write_text(STATEMENT, encoding="utf-8")

    assert _run(store_path, "seed", "--user", "alice") == 0
    assert "Seeded 1 account(s), 10 categories" in capsys.readouterr().out

    assert _run(store_path, "import", str(statement), "--user", "alice") == 0
    assert "Imported 2 transactions into 'Main Account'" in capsys.readouterr().out

    assert _run(store_path, "summary", "--user", "alice", "--year", "2024", "--month", "5") == 0
    out = capsys.readouterr().out
    assert "May 2024" in out
    assert "2,995.50" in out
    assert "Uncategorized" in out

    xlsx = tmp_path / "out" / "tx.xlsx"
    assert _run(store_path, "export", "--user", "alice", "--output", str(xlsx)) == 0
    assert load_workbook(xlsx).sheetnames == ["Transactions", "Summary"]


def test_dry_run_saves_nothing(tmp_path: Path, capsys) -> None:
    store_path = tmp_path / "store.json"
    statement = tmp_path / "may.csv"
    statement.write_text(STATEMENT, encoding="utf-8")

    assert _run(store_path, "import", str(statement), "--user", "alice", "--dry-run") == 0
    out = capsys.readouterr().out
    assert "2 transactions" in out
    assert "Coffee" in out
    assert not store_path.exists()


def test_import_without_account_fails(tmp_path: Path, capsys) -> None:
    statement = tmp_path / "may.csv"
    statement.write_text(STATEMENT, encoding="utf-8")

    assert _run(tmp_path / "store.json", "import", str(statement), "--user", "alice") == 1
    assert "create an account first" in capsys.readouterr().err


def test_export_without_data_fails(tmp_path: Path, capsys) -> None:
    assert _run(tmp_path / "store.json", "export", "--user", "nobody",
                "--output", str(tmp_path / "x.xlsx")) == 1
    assert "Error:" in capsys.readouterr().err


def test_trends_prints_requested_months(tmp_path: Path, capsys) -> None:
    assert _run(tmp_path / "store.json", "trends", "--user", "alice", "--months", "4") == 0
    lines = [l for l in capsys.readouterr().out.splitlines() if l.strip()]
    assert len(lines) == 5  # header + 4 months


def test_parse_level() -> None:
    assert _parse_level("debug") == logging.DEBUG
    assert _parse_level("WARNING") == logging.WARNING
    assert _parse_level(15) == 15
    assert _parse_level("nonsense") == logging.INFO


def test_configure_logging_is_idempotent() -> None:
    configure_logging("INFO")
    configure_logging("DEBUG")
    handlers = [h for h in logging.getLogger("app").handlers if isinstance(h, logging.StreamHandler)]
    assert len(handlers) == 1


def test_out_of_range_year_is_a_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        _run(tmp_path / "store.json", "summary", "--user", "alice", "--year", "10000", "--month", "1")
    assert exc.value.code == 2
