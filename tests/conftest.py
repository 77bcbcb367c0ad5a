import os

# Pas de Redis pendant les tests: le lifespan désactive le rate limiting
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import json
import threading
from typing import Any, Dict, Generator, Optional

import pytest
from fastapi.testclient import TestClient

from storefront.app import app as fastapi_app
from storefront.checkout.gateway import PaymentGatewayError, get_gateway
from storefront.checkout.repository import get_product_store

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


class FakeProductStore:
    """
    Store produits en mémoire, mêmes opérations que ProductStore.
    settle() reproduit la fonction SQL: décréments conditionnels tout-ou-rien sous verrou.
    """

    def __init__(self, products: Optional[Dict[str, Dict[str, Any]]] = None):
        self.products = {pid: dict(p) for pid, p in (products or {}).items()}
        self.lock = threading.Lock()
        self.calls = []

    def fetch_stock(self, ids):
        self.calls.append(("fetch_stock", list(ids)))
        return {pid: self.products[pid].get("stock") for pid in ids if pid in self.products}

    def fetch_prices(self, ids):
        self.calls.append(("fetch_prices", list(ids)))
        return {pid: self.products[pid].get("price", 0) for pid in ids if pid in self.products}

    def settle(self, quantities):
        self.calls.append(("settle", dict(quantities)))
        with self.lock:
            for pid, qty in quantities.items():
                product = self.products.get(pid)
                if product is None:
                    return pid
                stock = product.get("stock")
                if stock is not None and stock < qty:
                    return pid
            for pid, qty in quantities.items():
                if self.products[pid].get("stock") is not None:
                    self.products[pid]["stock"] -= qty
            return None

    def stock(self, pid):
        return self.products[pid].get("stock")


class FakeGateway:
    """Passerelle Stripe factice; fail_on = nom de l'étape qui doit échouer."""

    publishable_key = "pk_test_fake"

    def __init__(self, fail_on: Optional[str] = None):
        self.fail_on = fail_on
        self.calls = []
        self._seq = 0

    def _step(self, name: str, *args):
        self.calls.append((name,) + args)
        if self.fail_on == name:
            raise PaymentGatewayError({
                "type": "APIConnectionError",
                "code": None,
                "message": "Network error",
                "http_status": None,
            })

    def create_customer(self):
        self._step("create_customer")
        self._seq += 1
        return {"id": f"cus_test_{self._seq}"}

    def create_ephemeral_key(self, customer_id):
        self._step("create_ephemeral_key", customer_id)
        return {"id": "ephkey_test", "secret": f"ek_test_{customer_id}"}

    def create_payment_intent(self, amount, customer_id, metadata=None):
        self._step("create_payment_intent", amount, customer_id, metadata)
        return {"id": "pi_test", "amount": amount, "client_secret": "pi_test_secret_123"}

    def parse_event(self, payload, sig_header):
        if sig_header != "valid-signature":
            raise ValueError("bad signature")
        return json.loads(payload)


@pytest.fixture
def make_store():
    return FakeProductStore

@pytest.fixture
def product_store() -> FakeProductStore:
    # Scénario de référence: A (stock 5, 10.00), U (stock illimité, 25.00)
    return FakeProductStore({
        "A": {"price": 1000, "stock": 5},
        "U": {"price": 2500, "stock": None},
    })

@pytest.fixture
def make_gateway():
    return FakeGateway

@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app, product_store, gateway) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_product_store] = lambda: product_store
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
