"""
Shared fixtures

Backend tests run the real Flask app, services and repositories against a
throwaway SQLite database per test. Cart sync tests use InMemoryCartStore, a
CartStore with the same semantics as the REST cart endpoints plus switches
for injecting failures and delays.
"""
import asyncio
from typing import Dict, List, Optional, Set

import pytest
from sqlalchemy.engine import Engine

from hardware_store.app import create_app
from hardware_store.cart_sync.models import CartLine
from hardware_store.cart_sync.store import CartStore
from hardware_store.core.config import Config, DatabaseConfig
from hardware_store.core.exceptions import NotFoundError, TransientError, UnauthorizedError
from hardware_store.seed import seed

ADMIN_ID = "admin"


def as_user(user_id: str) -> Dict[str, str]:
    return {"X-User-Id": user_id}


# ==================== Backend fixtures ====================

@pytest.fixture
def app(tmp_path):
    config = Config()
    config.database = DatabaseConfig(url=f"sqlite:///{tmp_path / 'store.db'}")
    application = create_app(config)
    application.config["TESTING"] = True
    yield application
    application.extensions["container"].get(Engine).dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def engine(app) -> Engine:
    return app.extensions["container"].get(Engine)


@pytest.fixture
def seeded(engine):
    return seed(engine, admin_id=ADMIN_ID)


@pytest.fixture
def products(client, seeded) -> Dict[str, dict]:
    """Seeded catalog keyed by product name"""
    response = client.get("/api/v1/products?limit=100")
    return {p["name"]: p for p in response.get_json()["data"]}


@pytest.fixture
def cement(products) -> dict:
    return products["Tororo Cement 50kg Bag"]


@pytest.fixture
def drill(products) -> dict:
    return products["Professional Cordless Drill Set"]


# ==================== Cart sync fixtures ====================

CATALOG = {
    "P1": ("Tororo Cement 50kg Bag", 35000),
    "P2": ("Iron Sheets 28 Gauge (3m)", 28000),
    "P3": ("Heavy Duty Tool Box", 320000),
}


class InMemoryCartStore(CartStore):
    """
    Persisted cart held in memory

    fail_next: exceptions (of any type) raised by the next store calls, in order
    fail_fetch: exception raised by every fetch while set
    delay: seconds every call sleeps before acting
    """

    def __init__(self, catalog=None):
        self.catalog = dict(catalog or CATALOG)
        self.carts: Dict[str, Dict[str, int]] = {}
        self.fail_next: List[Exception] = []
        self.fail_fetch: Optional[Exception] = None
        self.delay = 0.0
        self.calls: List[tuple] = []
        self.gates: Dict[str, asyncio.Event] = {}
        self.closed = False
        self.known_identities: Optional[Set[str]] = None

    def cart(self, identity: str) -> Dict[str, int]:
        return dict(self.carts.get(identity, {}))

    async def _enter(self, name: str, identity: str, *args):
        self.calls.append((name, identity) + args)
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.known_identities is not None and identity not in self.known_identities:
            raise UnauthorizedError("Session expired")
        if self.fail_next:
            raise self.fail_next.pop(0)

    async def fetch_cart_lines(self, identity):
        await self._enter("fetch", identity)
        if self.fail_fetch is not None:
            raise self.fail_fetch
        lines = []
        for ref, quantity in self.carts.get(identity, {}).items():
            name, price = self.catalog[ref]
            lines.append(CartLine(ref, quantity, price, name, f"/{ref.lower()}.jpg"))
        return lines

    async def upsert_cart_line(self, identity, product_ref, quantity, increment=True):
        await self._enter("upsert", identity, product_ref, quantity, increment)
        cart = self.carts.setdefault(identity, {})
        if increment:
            if product_ref not in self.catalog:
                raise NotFoundError("Product", product_ref)
            cart[product_ref] = cart.get(product_ref, 0) + quantity
        else:
            if product_ref not in cart:
                raise NotFoundError("Cart item", product_ref)
            cart[product_ref] = quantity
        return None

    async def delete_cart_line(self, identity, product_ref):
        await self._enter("delete", identity, product_ref)
        self.carts.get(identity, {}).pop(product_ref, None)

    async def delete_all_cart_lines(self, identity):
        await self._enter("clear", identity)
        self.carts.pop(identity, None)

    async def aclose(self):
        self.closed = True

    def mutation_calls(self):
        return [call for call in self.calls if call[0] != "fetch"]


@pytest.fixture
def store() -> InMemoryCartStore:
    return InMemoryCartStore()


@pytest.fixture
def transient() -> TransientError:
    return TransientError("Network unreachable")
