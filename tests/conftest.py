import pathlib
import sys

import pytest
from fastapi.testclient import TestClient

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tradedesk.main import create_app
from tradedesk.store import TradeDeskStore
from tradedesk.store_backends import JsonFileDocumentStore


class FrozenClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now_ms: int = 1_760_000_000_000) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


@pytest.fixture
def db_path(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "db.json"


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def store(db_path: pathlib.Path, clock: FrozenClock) -> TradeDeskStore:
    return TradeDeskStore(JsonFileDocumentStore(db_path), clock=clock)


@pytest.fixture
def client(store: TradeDeskStore) -> TestClient:
    return TestClient(create_app(store=store, environ={}))


@pytest.fixture
def registered_user(store: TradeDeskStore) -> dict:
    user, _ = store.register_user(uid="u1", email="a@b.com", name="Alice")
    return user


@pytest.fixture
def account(store: TradeDeskStore, registered_user: dict) -> dict:
    return store.create_account(uid="u1", broker="X", account_type="margin", account_number="123")


@pytest.fixture
def admin_bot(store: TradeDeskStore) -> dict:
    return store.create_admin_bot(name="Scalper", price=10, cost=5, subscription_fee=1)
