"""Component tests for checkout and customer order history"""
import pytest

from conftest import as_user

ALICE = as_user("alice")
BOB = as_user("bob")

CHECKOUT = {"shipping_address": "Plot 12, Kampala Road, Kampala", "payment_method": "mobile-money"}


def add(client, product_id, quantity=1, headers=ALICE):
    return client.post("/api/v1/cart", json={"product_id": product_id, "quantity": quantity}, headers=headers)


def checkout(client, headers=ALICE, **overrides):
    return client.post("/api/v1/orders", json={**CHECKOUT, **overrides}, headers=headers)


class TestCheckout:

    def test_checkout_from_cart(self, client, cement):
        # Arrange
        add(client, cement["id"], 2)

        # Act
        response = checkout(client)

        # Assert
        assert response.status_code == 201
        order = response.get_json()["data"]
        assert order["status"] == "pending"
        assert order["subtotal"] == 70000
        assert order["shipping_fee"] == 15000
        assert order["tax"] == 12600
        assert order["total"] == 97600
        assert order["currency"] == "UGX"
        assert order["items"] == [{
            "product_id": cement["id"],
            "product_name": "Tororo Cement 50kg Bag",
            "unit_price": 35000,
            "quantity": 2,
            "subtotal": 70000,
        }]

    def test_checkout_empties_cart_and_decrements_stock(self, client, cement):
        add(client, cement["id"], 3)

        checkout(client)

        assert client.get("/api/v1/cart", headers=ALICE).get_json()["data"]["items"] == []
        product = client.get(f"/api/v1/products/{cement['id']}").get_json()["data"]
        assert product["stock_quantity"] == cement["stock_quantity"] - 3

    def test_checkout_with_explicit_items(self, client, cement, drill):
        response = checkout(client, items=[
            {"product_id": drill["id"], "quantity": 1},
            {"product_id": cement["id"], "quantity": 1},
            {"product_id": cement["id"], "quantity": 1},
        ])

        order = response.get_json()["data"]
        assert order["subtotal"] == 550000 + 2 * 35000
        assert sorted(item["quantity"] for item in order["items"]) == [1, 2]

    def test_empty_cart_is_refused(self, client, seeded):
        response = checkout(client)

        assert response.status_code == 422
        assert response.get_json()["error"]["details"]["violated_rule"] == "empty_order"

    def test_insufficient_stock_rolls_back(self, client, cement, drill):
        add(client, cement["id"], 1)
        add(client, drill["id"], 1)

        response = checkout(client, items=[
            {"product_id": cement["id"], "quantity": 1},
            {"product_id": drill["id"], "quantity": drill["stock_quantity"] + 1},
        ])

        assert response.status_code == 422
        assert response.get_json()["error"]["details"]["violated_rule"] == "insufficient_stock"
        product = client.get(f"/api/v1/products/{cement['id']}").get_json()["data"]
        assert product["stock_quantity"] == cement["stock_quantity"]
        assert client.get("/api/v1/cart", headers=ALICE).get_json()["data"]["total_items"] == 2

    def test_unknown_product_in_items(self, client, seeded):
        response = checkout(client, items=[{"product_id": "missing", "quantity": 1}])

        assert response.status_code == 404

    @pytest.mark.parametrize("overrides", [
        {"payment_method": "bitcoin"},
        {"shipping_address": ""},
        {"items": []},
    ])
    def test_invalid_checkout_payload(self, client, cement, overrides):
        add(client, cement["id"])

        response = checkout(client, **overrides)

        assert response.status_code == 400

    def test_checkout_requires_identity(self, client, seeded):
        response = client.post("/api/v1/orders", json=CHECKOUT)

        assert response.status_code == 401


class TestOrderHistory:

    def test_orders_are_listed_newest_first(self, client, cement, drill):
        add(client, cement["id"])
        first = checkout(client).get_json()["data"]["id"]
        add(client, drill["id"])
        second = checkout(client).get_json()["data"]["id"]

        orders = client.get("/api/v1/orders", headers=ALICE).get_json()["data"]

        assert [o["id"] for o in orders] == [second, first]
        assert orders[0]["items"][0]["product_name"] == "Professional Cordless Drill Set"

    def test_account_orders_alias(self, client, cement):
        add(client, cement["id"])
        checkout(client)

        direct = client.get("/api/v1/orders", headers=ALICE).get_json()["data"]
        alias = client.get("/api/v1/account/orders", headers=ALICE).get_json()["data"]

        assert alias == direct

    def test_orders_are_private(self, client, cement):
        add(client, cement["id"])
        order_id = checkout(client).get_json()["data"]["id"]

        assert client.get(f"/api/v1/orders/{order_id}", headers=ALICE).status_code == 200
        assert client.get(f"/api/v1/orders/{order_id}", headers=BOB).status_code == 404
        assert client.get("/api/v1/orders", headers=BOB).get_json()["data"] == []
