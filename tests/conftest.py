import os

# Avant tout import de l'app: pas de Redis réel pour le limiter ni pour les paniers
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.setdefault("USE_FAKE_REDIS_FOR_TESTS", "1")

import pytest
import fakeredis
from typing import Any, Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from storefront.app import app as fastapi_app

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Un Redis en mémoire neuf par test pour les paniers
@pytest.fixture(autouse=True)
def cart_redis(monkeypatch):
    r = fakeredis.FakeRedis(decode_responses=True)
    monkeypatch.setattr("storefront.infra.redis_client.get_cart_redis", lambda: r)
    return r

# Aucun accès Supabase réel
@pytest.fixture(scope="function", autouse=True)
def mock_db_dependency(monkeypatch):
    monkeypatch.setattr("storefront.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: MagicMock())

PRODUCTS = {
    "p1": {
        "id": "p1",
        "name": "Canvas Tote",
        "price": 12.5,
        "inStock": True,
        "images": ["/img/tote.png"],
    },
    "p2": {
        "id": "p2",
        "name": "Wool Scarf",
        "price": 7.25,
        "inStock": True,
        "images": [],
    },
    "p3": {
        "id": "p3",
        "name": "Sold Out Mug",
        "price": 9.0,
        "inStock": False,
        "images": ["/img/mug.png"],
    },
}

@pytest.fixture
def catalog(monkeypatch):
    """Catalogue figé: p1/p2 en stock, p3 épuisé."""
    monkeypatch.setattr("storefront.catalog.repository.get_product", lambda pid: PRODUCTS.get(pid))
    monkeypatch.setattr(
        "storefront.catalog.repository.list_products",
        lambda: [p for p in PRODUCTS.values() if p["inStock"]],
    )
    return PRODUCTS

class FakeOrdersDB:
    """Tables orders / order_items en mémoire, branchées à la place du repository Supabase."""

    def __init__(self):
        self.orders: List[Dict[str, Any]] = []
        self.items: List[Dict[str, Any]] = []
        self.fail_insert = False
        self.fail_items = False
        self.fail_lookup = False

    def insert_order(self, data: Dict[str, Any]) -> Optional[dict]:
        if self.fail_insert:
            return None
        row = {**data, "id": f"order-{len(self.orders) + 1}", "created_at": "2024-01-01T00:00:00+00:00"}
        self.orders.append(row)
        return dict(row)

    def insert_order_items(self, rows: List[Dict[str, Any]]) -> bool:
        if self.fail_items:
            return False
        self.items.extend(rows)
        return True

    def get_order_by_payment_intent(self, payment_intent_id: str) -> Optional[dict]:
        if self.fail_lookup:
            raise ConnectionError("supabase unreachable")
        for o in self.orders:
            if o["payment_intent_id"] == payment_intent_id:
                return dict(o)
        return None

    def get_order_items(self, order_id: str) -> List[dict]:
        return [i for i in self.items if i["order_id"] == order_id]

    def get_order_with_items(self, order_id: str) -> Optional[dict]:
        for o in self.orders:
            if o["id"] == order_id:
                return {**o, "order_items": [i for i in self.items if i["order_id"] == order_id]}
        return None

    def update_order_status(self, payment_intent_id: str, status: str) -> bool:
        for o in self.orders:
            if o["payment_intent_id"] == payment_intent_id:
                o["status"] = status
        return True

@pytest.fixture
def orders_db(monkeypatch) -> FakeOrdersDB:
    db = FakeOrdersDB()
    for name in (
        "insert_order",
        "insert_order_items",
        "get_order_by_payment_intent",
        "get_order_items",
        "get_order_with_items",
        "update_order_status",
    ):
        monkeypatch.setattr(f"storefront.orders.repository.{name}", getattr(db, name))
    return db

class FakeStripe:
    """PaymentIntents Stripe simulés (create + retrieve)."""

    def __init__(self):
        self.intents: Dict[str, Dict[str, Any]] = {}
        self.create_calls: List[Dict[str, Any]] = []
        self.retrieve_calls: List[str] = []

    def create_payment_intent(self, *, amount: int, currency: str, metadata: Dict[str, str]) -> Dict[str, Any]:
        pid = f"pi_{len(self.intents) + 1}"
        intent = {
            "id": pid,
            "client_secret": f"{pid}_secret_abc",
            "amount": amount,
            "currency": currency,
            "status": "requires_payment_method",
            "metadata": dict(metadata),
            "shipping": None,
        }
        self.create_calls.append({"amount": amount, "currency": currency, "metadata": metadata})
        self.intents[pid] = intent
        return dict(intent)

    def retrieve_payment_intent(self, payment_intent_id: str) -> Dict[str, Any]:
        self.retrieve_calls.append(payment_intent_id)
        return dict(self.intents[payment_intent_id])

    def succeed(self, payment_intent_id: str, **changes) -> None:
        self.intents[payment_intent_id].update({"status": "succeeded", **changes})

@pytest.fixture
def fake_stripe(monkeypatch) -> FakeStripe:
    fake = FakeStripe()
    monkeypatch.setattr("storefront.payments.stripe_client.create_payment_intent", fake.create_payment_intent)
    monkeypatch.setattr("storefront.payments.stripe_client.retrieve_payment_intent", fake.retrieve_payment_intent)
    return fake
