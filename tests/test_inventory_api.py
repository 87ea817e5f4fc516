"""Tests for the inventory HTTP endpoints via TestClient."""

from decimal import Decimal

from fastapi.testclient import TestClient

BASE = "/api/v1/inventory"


def _create(client, **overrides):
    """Helper: POST an item and return the response body."""
    payload = {
        "name": "Widget",
        "category": "Hardware",
        "quantity": 5,
        "price": "9.99",
    }
    payload.update(overrides)
    response = client.post(BASE, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateEndpoint:
    def test_create_item(self, client):
        body = _create(client, minimum_stock_level=10, description="Steel")

        assert body["id"]
        assert body["quantity"] == 5
        assert Decimal(body["price"]) == Decimal("9.99")
        assert body["description"] == "Steel"
        assert body["low_stock"] is True
        assert body["out_of_stock"] is False

    def test_default_threshold(self, client):
        body = _create(client, quantity=0)
        assert body["minimum_stock_level"] == 10
        assert body["out_of_stock"] is True

    def test_schema_validation(self, client):
        response = client.post(BASE, json={"name": "", "category": "x", "quantity": -1, "price": "1"})
        assert response.status_code == 422

    def test_missing_price(self, client):
        response = client.post(BASE, json={"name": "a", "category": "x", "quantity": 1})
        assert response.status_code == 422


class TestReadEndpoints:
    def test_get_item(self, client):
        created = _create(client)
        response = client.get(f"{BASE}/{created['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Widget"

    def test_get_missing_item(self, client):
        response = client.get(f"{BASE}/does-not-exist")
        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "not_found"
        assert body["details"]["item_id"] == "does-not-exist"

    def test_list_with_category_filter(self, client):
        _create(client, name="Hammer", category="Tools")
        _create(client, name="Rake", category="Garden")

        assert len(client.get(BASE).json()) == 2
        names = [it["name"] for it in client.get(BASE, params={"category": "tools"}).json()]
        assert names == ["Hammer"]

    def test_status_lists_and_count(self, client):
        _create(client, name="Plenty", quantity=100)
        low = _create(client, name="Low", quantity=3)
        empty = _create(client, name="Empty", quantity=0)

        low_ids = {it["id"] for it in client.get(f"{BASE}/low-stock").json()}
        out_ids = {it["id"] for it in client.get(f"{BASE}/out-of-stock").json()}

        assert low_ids == {low["id"], empty["id"]}
        assert out_ids == {empty["id"]}
        assert client.get(f"{BASE}/stats/count").json() == {"count": 3}


class TestUpdateAndDelete:
    def test_partial_update(self, client):
        created = _create(client, description="keep me")

        response = client.patch(f"{BASE}/{created['id']}", json={"quantity": 20})

        assert response.status_code == 200
        body = response.json()
        assert body["quantity"] == 20
        assert body["name"] == "Widget"
        assert body["description"] == "keep me"
        assert body["low_stock"] is False

    def test_put_is_also_a_partial_update(self, client):
        created = _create(client)
        response = client.put(f"{BASE}/{created['id']}", json={"name": "Gizmo"})
        assert response.status_code == 200
        assert response.json()["quantity"] == 5

    def test_explicit_null_clears_description(self, client):
        created = _create(client, description="old")
        body = client.patch(f"{BASE}/{created['id']}", json={"description": None}).json()
        assert body["description"] is None

    def test_explicit_null_name_is_rejected(self, client):
        created = _create(client)
        response = client.patch(f"{BASE}/{created['id']}", json={"name": None})
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "name"

    def test_update_missing_item(self, client):
        response = client.patch(f"{BASE}/missing", json={"name": "x"})
        assert response.status_code == 404

    def test_delete_then_get(self, client):
        created = _create(client)

        response = client.delete(f"{BASE}/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"ok": True}

        assert client.get(f"{BASE}/{created['id']}").status_code == 404
        assert client.delete(f"{BASE}/{created['id']}").status_code == 404


class TestStockEndpoints:
    def test_add_and_reduce(self, client):
        item_id = _create(client, quantity=5, minimum_stock_level=10)["id"]

        body = client.post(f"{BASE}/{item_id}/stock/add", json={"quantity": 3, "reason": "delivery"}).json()
        assert body["quantity"] == 8
        assert body["low_stock"] is True

        body = client.post(f"{BASE}/{item_id}/stock/reduce", json={"quantity": 8}).json()
        assert body["quantity"] == 0
        assert body["out_of_stock"] is True

    def test_insufficient_stock(self, client):
        item_id = _create(client, quantity=2)["id"]

        response = client.post(f"{BASE}/{item_id}/stock/reduce", json={"quantity": 3})

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "insufficient_stock"
        assert body["details"]["requested"] == 3
        assert body["details"]["available"] == 2
        assert client.get(f"{BASE}/{item_id}").json()["quantity"] == 2

    def test_negative_amount(self, client):
        item_id = _create(client)["id"]
        response = client.post(f"{BASE}/{item_id}/stock/add", json={"quantity": -4})
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_argument"

    def test_stock_change_on_missing_item(self, client):
        response = client.post(f"{BASE}/missing/stock/reduce", json={"quantity": 1})
        assert response.status_code == 404

    def test_availability(self, client):
        item_id = _create(client, quantity=5)["id"]

        ok = client.get(f"{BASE}/{item_id}/availability", params={"quantity": 5}).json()
        short = client.get(f"{BASE}/{item_id}/availability", params={"quantity": 6}).json()

        assert ok == {"item_id": item_id, "quantity": 5, "available": True}
        assert short["available"] is False
        assert client.get(f"{BASE}/missing/availability", params={"quantity": 1}).status_code == 404


def test_application_uses_memory_store_when_configured():
    from main import app

    with TestClient(app) as client:
        item_id = _create(client, quantity=1)["id"]
        assert client.get(f"{BASE}/{item_id}").json()["quantity"] == 1
        assert client.get("/docs").status_code == 200
