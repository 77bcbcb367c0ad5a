import asyncio
import threading

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront.checkout.repository import get_product_store
from storefront.checkout.gateway import get_gateway

SCENARIO = {"products": [{"id": "A", "quantity": 2}]}


def test_payment_sheet_returns_secrets(client, gateway):
    r = client.post("/checkout/payment-sheet", json=SCENARIO)
    assert r.status_code == 200
    data = r.json()
    assert set(data.keys()) == {"paymentIntent", "ephemeralKey", "customer", "publishableKey"}
    assert all(data[k] for k in ("paymentIntent", "ephemeralKey", "customer"))
    assert data["publishableKey"] == "pk_test_fake"
    # Montant calculé depuis le prix serveur (2 x 1000)
    assert gateway.calls[-1][1] == 2000


def test_payment_sheet_ignores_tampered_price(client, gateway):
    body = {"products": [{"id": "A", "quantity": 2, "price": 1}]}
    assert client.post("/checkout/payment-sheet", json=body).status_code == 200
    assert gateway.calls[-1][1] == 2000


def test_payment_sheet_out_of_stock(client, gateway):
    r = client.post("/checkout/payment-sheet", json={"products": [{"id": "A", "quantity": 6}]})
    assert r.status_code == 400
    assert r.json() == {"error": "Produit A en rupture de stock"}
    assert gateway.calls == []


def test_payment_sheet_unknown_product(client):
    body = {"products": [{"id": "A", "quantity": 1}, {"id": "B", "quantity": 1}]}
    r = client.post("/checkout/payment-sheet", json=body)
    assert r.status_code == 400
    assert r.json() == {"error": "Produit B en rupture de stock"}


def test_payment_sheet_malformed_cart(client):
    r = client.post("/checkout/payment-sheet", json={"products": [{"id": "A", "quantity": 0}]})
    assert r.status_code == 400
    assert "products.0.quantity" in r.json()["error"]


def test_payment_sheet_invalid_json(client):
    r = client.post("/checkout/payment-sheet", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert "body" in r.json()["error"]


def test_payment_sheet_gateway_failure(app, product_store, make_gateway):
    app.dependency_overrides[get_product_store] = lambda: product_store
    app.dependency_overrides[get_gateway] = lambda: make_gateway(fail_on="create_customer")
    try:
        with TestClient(app) as c:
            r = c.post("/checkout/payment-sheet", json=SCENARIO)
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json()["error"]["type"] == "APIConnectionError"


def test_payment_sheet_does_not_touch_stock(client, product_store):
    client.post("/checkout/payment-sheet", json=SCENARIO)
    assert product_store.stock("A") == 5


def test_success_decrements_stock(client, product_store):
    r = client.post("/checkout/success", json=SCENARIO)
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert product_store.stock("A") == 3


def test_success_twice_decrements_twice(client, product_store):
    assert client.post("/checkout/success", json=SCENARIO).status_code == 200
    assert client.post("/checkout/success", json=SCENARIO).status_code == 200
    assert product_store.stock("A") == 1


def test_success_out_of_stock_changes_nothing(client, product_store):
    body = {"products": [{"id": "U", "quantity": 1}, {"id": "A", "quantity": 6}]}
    r = client.post("/checkout/success", json=body)
    assert r.status_code == 400
    assert r.json() == {"error": "Produit A en rupture de stock"}
    assert product_store.stock("A") == 5


def test_success_malformed_cart(client):
    r = client.post("/checkout/success", json={"products": []})
    assert r.status_code == 400
    assert "products" in r.json()["error"]


def test_store_failure_returns_500(app, gateway):
    class BrokenStore:
        def fetch_stock(self, ids):
            raise RuntimeError("db unreachable")

    app.dependency_overrides[get_product_store] = lambda: BrokenStore()
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            r = c.post("/checkout/payment-sheet", json=SCENARIO)
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json() == {"error": "Internal Server Error"}


def test_payment_sheet_rate_limited_with_local_fallback(client, app, monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    app.state._rl_store = {}
    try:
        codes = [client.post("/checkout/payment-sheet", json=SCENARIO).status_code for _ in range(11)]
    finally:
        app.state._rl_store = {}
    assert codes[:10] == [200] * 10
    assert codes[10] == 429


def test_payment_sheet_requests_run_concurrently(app, product_store, make_gateway):
    # Deux requêtes doivent être dans create_customer en même temps pour franchir la barrière
    barrier = threading.Barrier(2, timeout=5)

    class BlockingGateway(make_gateway):
        def create_customer(self):
            barrier.wait()
            return super().create_customer()

    gw = BlockingGateway()
    app.dependency_overrides[get_product_store] = lambda: product_store
    app.dependency_overrides[get_gateway] = lambda: gw

    async def _two_requests():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
            return await asyncio.gather(
                c.post("/checkout/payment-sheet", json=SCENARIO),
                c.post("/checkout/payment-sheet", json=SCENARIO),
            )

    try:
        responses = asyncio.run(_two_requests())
    finally:
        app.dependency_overrides.clear()
    assert [r.status_code for r in responses] == [200, 200]
    assert not barrier.broken


def test_success_rejects_out_of_range_quantity(client, product_store):
    # Stock illimité: la borne de quantité est vérifiée avant tout appel au store
    r = client.post("/checkout/success", json={"products": [{"id": "U", "quantity": 2**31}]})
    assert r.status_code == 400
    assert "products.0.quantity" in r.json()["error"]
    assert product_store.calls == []
