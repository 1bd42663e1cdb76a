import io
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from app.api import router_export
from app.api.dependencies import set_store
from app.data.store import DataStore
from app.main import create_app

USER = {"user_id": "alice"}
STATEMENT = b"Date,Description,Amount\n01/05/2024,Coffee,-4.50\n2024-05-02,Salary,3000\n"


@pytest.fixture
def store(tmp_path: Path, monkeypatch) -> DataStore:
    monkeypatch.setattr(router_export, "EXPORTS_FOLDER", tmp_path / "exports")
    store = DataStore(tmp_path / "store.json").load()
    set_store(store)
    return store


@pytest.fixture
def client(store: DataStore) -> TestClient:
    # Not entered as a context manager, so the startup hook does not replace the store.
    return TestClient(create_app())


def _upload(client: TestClient, path: str, content: bytes = STATEMENT, filename: str = "may.csv", **data):
    return client.post(path, params=USER, files={"file": (filename, content, "text/csv")}, data=data)


def test_health(client: TestClient) -> None:
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "users": 0, "transactions": 0}


def test_user_id_required(client: TestClient) -> None:
    assert client.get("/api/accounts").status_code == 401
    assert client.get("/api/accounts", headers={"X-User-Id": "alice"}).status_code == 200


def test_account_and_category_crud(client: TestClient) -> None:
    r = client.post("/api/accounts", params=USER, json={"name": "Wallet", "type": "cash", "balance": 50})
    assert r.status_code == 201
    acct = r.json()
    assert acct["balance"] == 50.0
    assert acct["currency"] == "INR"

    r = client.patch(f"/api/accounts/{acct['id']}", params=USER, json={"name": "Pocket"})
    assert r.json()["name"] == "Pocket"
    assert client.patch("/api/accounts/nope", params=USER, json={"name": "x"}).status_code == 404

    r = client.post("/api/categories", params=USER, json={"name": "Pets", "type": "expense"})
    assert r.status_code == 201
    names = [c["name"] for c in client.get("/api/categories", params={**USER, "type": "expense"}).json()]
    assert names == ["Pets"]


def test_transaction_lifecycle(client: TestClient) -> None:
    client.post("/api/seed", params=USER)
    acct = client.get("/api/accounts", params=USER).json()[0]

    r = client.post("/api/transactions", params=USER, json={
        "date": "2024-05-03", "description": "Groceries", "amount": "42.10",
        "type": "expense", "account_id": acct["id"],
    })
    assert r.status_code == 201
    tx = r.json()
    assert tx["amount"] == 42.1

    assert client.get("/api/accounts", params=USER).json()[0]["balance"] == -42.1
    assert client.delete(f"/api/transactions/{tx['id']}", params=USER).status_code == 200
    assert client.delete(f"/api/transactions/{tx['id']}", params=USER).status_code == 404


def test_invalid_transaction_rejected(client: TestClient) -> None:
    body = {"date": "2024-05-03", "description": "x", "amount": "1", "type": "expense", "account_id": "nope"}
    assert client.post("/api/transactions", params=USER, json=body).status_code == 422
    body["amount"] = "-1"
    assert client.post("/api/transactions", params=USER, json=body).status_code == 422


def test_sub_cent_transaction_rejected(client: TestClient) -> None:
    client.post("/api/seed", params=USER)
    acct = client.get("/api/accounts", params=USER).json()[0]
    body = {"date": "2024-05-03", "description": "x", "amount": "0.001", "type": "expense", "account_id": acct["id"]}
    assert client.post("/api/transactions", params=USER, json=body).status_code == 422
    assert client.get("/api/transactions", params=USER).json() == []


def test_import_preview_writes_nothing(client: TestClient, store: DataStore) -> None:
    r = _upload(client, "/api/import/preview")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "preview"
    assert body["parsed"] == 2
    assert [t["description"] for t in body["transactions"]] == ["Coffee", "Salary"]
    assert store.transaction_count() == 0


def test_import_requires_an_account(client: TestClient) -> None:
    r = _upload(client, "/api/import")
    assert r.status_code == 409
    assert "create an account first" in r.json()["detail"]


def test_import_rejects_unsupported_format(client: TestClient) -> None:
    r = _upload(client, "/api/import", content=b"hello", filename="notes.txt")
    assert r.status_code == 400


def test_import_then_dashboard(client: TestClient) -> None:
    client.post("/api/seed", params=USER)
    r = _upload(client, "/api/import")
    assert r.status_code == 200
    assert r.json()["imported"] == 2

    may = {**USER, "year": 2024, "month": 5}
    summary = client.get("/api/dashboard/summary", params=may).json()
    assert summary["monthly_income"] == 3000.0
    assert summary["monthly_expenses"] == 4.5
    assert summary["net_income"] == 2995.5
    assert summary["total_balance"] == 2995.5
    assert summary["period"] == "May 2024"

    breakdown = client.get("/api/dashboard/category-breakdown", params=may).json()
    assert breakdown == [{"name": "Uncategorized", "value": 4.5, "color": "#8884d8"}]

    trends = client.get("/api/dashboard/monthly-trends",
                        params={**USER, "months": 6, "reference": "2024-05-15"}).json()
    assert len(trends) == 6
    assert trends[-1] == {"month": "May 24", "income": 3000.0, "expenses": 4.5, "net": 2995.5}

    listed = client.get("/api/transactions", params={**may, "limit": 1}).json()
    assert [t["description"] for t in listed] == ["Salary"]


def test_bad_window_params(client: TestClient) -> None:
    assert client.get("/api/dashboard/summary", params={**USER, "year": 2024}).status_code == 400
    bad_range = {**USER, "start_date": "2024-05-10", "end_date": "2024-05-01"}
    assert client.get("/api/dashboard/summary", params=bad_range).status_code == 400
    year_zero = {**USER, "year": 0, "month": 1}
    assert client.get("/api/dashboard/category-breakdown", params=year_zero).status_code == 422
    assert client.get("/api/dashboard/summary", params={**USER, "year": 10000, "month": 1}).status_code == 422


def test_exports(client: TestClient) -> None:
    assert client.get("/api/export/transactions.xlsx", params=USER).status_code == 404
    assert client.get("/api/export/accounts.xlsx", params=USER).status_code == 404

    client.post("/api/seed", params=USER)
    _upload(client, "/api/import")

    r = client.get("/api/export/transactions.xlsx", params=USER)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/vnd.openxmlformats")
    wb = load_workbook(io.BytesIO(r.content))
    assert wb.sheetnames == ["Transactions", "Summary"]

    r = client.get("/api/export/dashboard.xlsx", params={**USER, "year": 2024, "month": 5})
    assert r.status_code == 200
    assert load_workbook(io.BytesIO(r.content)).sheetnames == ["Overview", "Monthly Trends"]


def test_export_files_are_removed_after_download(client: TestClient, tmp_path: Path) -> None:
    client.post("/api/seed", params=USER)
    _upload(client, "/api/import")

    first = client.get("/api/export/transactions.xlsx", params=USER)
    second = client.get("/api/export/transactions.xlsx", params=USER)
    assert first.status_code == second.status_code == 200
    assert first.headers["content-disposition"] == second.headers["content-disposition"]
    assert "transactions_export_" in first.headers["content-disposition"]

    assert client.get("/api/export/dashboard.xlsx", params=USER).status_code == 200
    assert list((tmp_path / "exports").rglob("*.xlsx")) == []
