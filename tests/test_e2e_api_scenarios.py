from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from tradedesk.errors import StoreError
from tradedesk.main import create_app
from tradedesk.store import TradeDeskStore
from tradedesk.store_backends import InMemoryDocumentStore, JsonFileDocumentStore
from tradedesk.workflow import ApprovalWorkflow


class WriteFailingDocumentStore(InMemoryDocumentStore):
    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False

    def save(self, document: dict) -> None:
        if self.fail_writes:
            raise StoreError(code="STORE_WRITE_FAILED", message="disk full")
        super().save(document)


def test_user_account_bot_approval_flow(client):
    created = client.post("/api/users", json={"uid": "u1", "email": "a@b.com"})
    assert created.status_code == 201
    user = created.json()["data"]
    assert user["id"] == 1
    assert user["status"] == "pending"

    account_resp = client.post(
        "/api/users/u1/accounts",
        json={"broker": "X", "accountType": "margin", "accountNumber": "123"},
    )
    assert account_resp.status_code == 201
    account = account_resp.json()["data"]
    assert isinstance(account["id"], int)

    bot_resp = client.post(
        "/api/admin/bots",
        json={"name": "Scalper", "price": 10, "cost": 5, "subscriptionFee": 1},
    )
    assert bot_resp.status_code == 201
    admin_bot = bot_resp.json()["data"]

    assignment_resp = client.post(
        "/api/users/u1/bots",
        json={
            "brokerAccountId": account["id"],
            "botId": admin_bot["id"],
            "signedAgreementUrl": "https://files.example/agreement.pdf",
        },
    )
    assert assignment_resp.status_code == 201
    assignment = assignment_resp.json()["data"]
    assert assignment["botName"] == "Scalper"
    assert assignment["status"] == "pending"

    approved = client.put(f"/api/admin/bot-requests/{assignment['id']}/approve")
    assert approved.status_code == 200
    assert approved.json()["data"]["status"] == "approved"
    assert approved.json()["message"] == "Bot request approved"

    listed = client.get("/api/admin/bot-requests").json()["data"]
    assert listed["total"] == 1
    assert listed["items"][0]["userEmail"] == "a@b.com"
    assert listed["items"][0]["status"] == "approved"


def test_repeat_registration_returns_200_with_same_id(client):
    first = client.post("/api/users", json={"uid": "u1", "email": "a@b.com", "name": "Alice"})
    again = client.post("/api/users", json={"uid": "u1", "email": "a@b.com"})

    assert first.status_code == 201
    assert again.status_code == 200
    assert again.json()["data"]["id"] == first.json()["data"]["id"]
    assert client.get("/api/admin/users").json()["data"]["total"] == 1


def test_missing_registration_fields_are_rejected(client):
    resp = client.post("/api/users", json={"uid": "u1"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "REQ_VALIDATION_FAILED"
    assert body["error"]["message"] == "uid and email are required"


def test_kyc_review_flow(client):
    client.post("/api/users", json={"uid": "u1", "email": "a@b.com", "name": "Alice"})

    not_submitted = client.put("/api/admin/kyc-requests/1/reject")
    assert not_submitted.status_code == 404
    assert not_submitted.json()["error"]["code"] == "KYC_NOT_FOUND"

    submitted = client.post(
        "/api/users/u1/kyc",
        json={"fullName": "Alice Example", "idNumber": "NIC-1", "nicFront": "ZnJvbnQ="},
    )
    assert submitted.status_code == 200
    assert submitted.json()["message"] == "KYC submitted"
    assert submitted.json()["data"]["kyc"]["nicBack"] is None

    requests = client.get("/api/admin/kyc-requests").json()["data"]["items"]
    assert requests == [{"id": 1, "uid": "u1", "name": "Alice", "email": "a@b.com", "kycStatus": "pending"}]

    detail = client.get("/api/admin/kyc-requests/1").json()["data"]
    assert detail["kyc"]["fullName"] == "Alice Example"

    approved = client.put("/api/admin/kyc-requests/1/approve")
    assert approved.json()["data"]["kycStatus"] == "approved"

    profile = client.get("/api/users/u1/profile").json()["data"]
    assert profile["kycCompleted"] is True
    assert profile["kycStatus"] == "approved"


def test_admin_user_approval_and_delete(client):
    client.post("/api/users", json={"uid": "u1", "email": "a@b.com"})

    assert client.put("/api/admin/users/1/approve").json()["data"]["status"] == "approved"

    deleted = client.delete("/api/admin/users/1")
    assert deleted.status_code == 200
    assert deleted.json()["message"] == "User deleted"
    assert client.get("/api/users/u1").status_code == 404
    assert client.delete("/api/admin/users/1").json()["error"]["code"] == "USER_NOT_FOUND"


def test_account_delete_is_owner_scoped(client):
    client.post("/api/users", json={"uid": "u1", "email": "a@b.com"})
    client.post("/api/users", json={"uid": "u2", "email": "c@d.com"})
    account = client.post(
        "/api/users/u1/accounts",
        json={"broker": "X", "accountType": "cash", "accountNumber": "1"},
    ).json()["data"]

    assert client.delete(f"/api/users/u2/accounts/{account['id']}").status_code == 404
    assert client.delete(f"/api/users/u1/accounts/{account['id']}").status_code == 200
    assert client.get("/api/users/u1/accounts").json()["data"]["items"] == []


def test_admin_bot_partial_update_over_http(client):
    admin_bot = client.post(
        "/api/admin/bots",
        json={"name": "Scalper", "price": 7, "cost": 5, "subscriptionFee": 1},
    ).json()["data"]

    updated = client.put(f"/api/admin/bots/{admin_bot['id']}", json={"price": 10})

    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["price"] == 10
    assert (data["name"], data["cost"], data["subscriptionFee"]) == ("Scalper", 5, 1)

    assert client.delete(f"/api/admin/bots/{admin_bot['id']}").status_code == 200
    assert client.get("/api/admin/bots").json()["data"]["total"] == 0


def test_admin_bot_with_non_numeric_price_is_rejected(client):
    resp = client.post("/api/admin/bots", json={"name": "A", "price": "cheap", "cost": 1, "subscriptionFee": 1})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "REQ_VALIDATION_FAILED"


def test_unknown_catalog_bot_is_404_over_http(client):
    client.post("/api/users", json={"uid": "u1", "email": "a@b.com"})
    account = client.post(
        "/api/users/u1/accounts",
        json={"broker": "X", "accountType": "cash", "accountNumber": "1"},
    ).json()["data"]

    resp = client.post(
        "/api/users/u1/bots",
        json={"brokerAccountId": account["id"], "botId": 1, "signedAgreementUrl": "https://x/y.pdf"},
    )

    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Bot not found"
    assert client.get("/api/users/u1/bots").json()["data"]["total"] == 0


def test_static_catalog_and_careers(client):
    catalog = client.get("/api/bots/catalog").json()["data"]
    assert catalog["total"] == 3

    created = client.post(
        "/api/careers",
        json={"name": "N", "address": "A", "nic": "1", "phone": "2", "whatsapp": "3", "preferredRole": "QA"},
    )
    assert created.status_code == 201
    assert created.json()["data"]["preferredRole"] == "QA"
    assert created.json()["data"]["employmentType"] == "full-time"

    missing = client.post("/api/careers", json={"name": "N"})
    assert missing.status_code == 400
    assert missing.json()["error"]["message"] == "Required fields missing"

    assert client.get("/api/admin/careers").json()["data"]["total"] == 1


def test_non_integer_path_id_and_unknown_route(client):
    bad_id = client.put("/api/admin/users/abc/approve")
    assert bad_id.status_code == 400
    assert bad_id.json()["error"]["code"] == "REQ_VALIDATION_FAILED"

    missing = client.get("/api/nowhere")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "REQ_NOT_FOUND"


def test_oversized_body_is_rejected(tmp_path: Path):
    store = TradeDeskStore(JsonFileDocumentStore(tmp_path / "db.json"))
    client = TestClient(create_app(store=store, environ={"TRADEDESK_MAX_BODY_BYTES": "256"}))
    client.post("/api/users", json={"uid": "u1", "email": "a@b.com"})

    resp = client.post("/api/users/u1/kyc", json={"nicFront": "A" * 1024})

    assert resp.status_code == 413
    assert resp.json()["error"]["code"] == "REQ_BODY_TOO_LARGE"
    assert store.get_user(uid="u1")["kyc"] is None


def test_strict_approvals_surface_as_conflict(tmp_path: Path):
    store = TradeDeskStore(JsonFileDocumentStore(tmp_path / "db.json"), workflow=ApprovalWorkflow(strict=True))
    client = TestClient(create_app(store=store, environ={}))
    client.post("/api/users", json={"uid": "u1", "email": "a@b.com"})
    client.post("/api/users/u1/kyc", json={"fullName": "A"})
    client.put("/api/admin/kyc-requests/1/approve")

    resp = client.put("/api/admin/kyc-requests/1/reject")

    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "WF_STATE_TRANSITION_INVALID"


def test_write_failure_is_reported_as_server_error():
    backend = WriteFailingDocumentStore()
    store = TradeDeskStore(backend)
    client = TestClient(create_app(store=store, environ={}))
    store.snapshot()
    backend.fail_writes = True

    resp = client.post("/api/users", json={"uid": "u1", "email": "a@b.com"})

    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "STORE_WRITE_FAILED"
    assert resp.json()["error"]["class"] == "persistence"
    backend.fail_writes = False
    assert store.list_users() == []


def test_chunked_body_over_the_limit_is_rejected(tmp_path: Path):
    store = TradeDeskStore(JsonFileDocumentStore(tmp_path / "db.json"))
    client = TestClient(create_app(store=store, environ={"TRADEDESK_MAX_BODY_BYTES": "256"}))
    client.post("/api/users", json={"uid": "u1", "email": "a@b.com"})
    chunks = [b'{"nicFront": "', b"A" * 1024, b'"}']

    resp = client.post(
        "/api/users/u1/kyc",
        content=(chunk for chunk in chunks),
        headers={"content-type": "application/json"},
    )

    assert resp.status_code == 413
    assert resp.json()["error"]["code"] == "REQ_BODY_TOO_LARGE"
    assert store.get_user(uid="u1")["kyc"] is None


def test_non_finite_bot_prices_are_rejected_before_saving(client, store: TradeDeskStore, db_path: Path):
    for body in (
        '{"name": "X", "price": NaN, "cost": 1, "subscriptionFee": 1}',
        '{"name": "X", "price": 1, "cost": Infinity, "subscriptionFee": 1}',
    ):
        resp = client.post("/api/admin/bots", content=body, headers={"content-type": "application/json"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "REQ_VALIDATION_FAILED"

    assert client.get("/api/admin/bots").json()["data"]["total"] == 0
    assert "NaN" not in db_path.read_text(encoding="utf-8")


def test_non_finite_bot_price_update_is_rejected(client, admin_bot: dict):
    resp = client.put(
        f"/api/admin/bots/{admin_bot['id']}",
        content='{"price": -Infinity}',
        headers={"content-type": "application/json"},
    )

    assert resp.status_code == 400
    assert client.get("/api/admin/bots").json()["data"]["items"][0]["price"] == 10


def test_lone_surrogate_text_is_rejected(client, store: TradeDeskStore):
    resp = client.post(
        "/api/users",
        content='{"uid": "u\\ud800", "email": "a@b.com"}',
        headers={"content-type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "REQ_VALIDATION_FAILED"
    assert store.list_users() == []


def test_string_account_id_does_not_resolve_an_account(client, account: dict, admin_bot: dict):
    resp = client.post(
        "/api/users/u1/bots",
        json={
            "brokerAccountId": str(account["id"]),
            "botId": admin_bot["id"],
            "signedAgreementUrl": "https://x/y.pdf",
        },
    )

    assert resp.status_code == 400
    assert client.get("/api/users/u1/bots").json()["data"]["total"] == 0
