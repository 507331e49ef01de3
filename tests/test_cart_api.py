"""Component tests for the persisted cart endpoints"""
from conftest import as_user

ALICE = as_user("alice")
BOB = as_user("bob")


def add(client, product_id, quantity=1, headers=ALICE):
    return client.post("/api/v1/cart", json={"product_id": product_id, "quantity": quantity}, headers=headers)


class TestCartReads:

    def test_missing_identity_is_unauthorized(self, client, seeded):
        response = client.get("/api/v1/cart")

        assert response.status_code == 401
        assert response.get_json()["error"]["code"] == "UNAUTHORIZED"

    def test_empty_cart(self, client, seeded):
        response = client.get("/api/v1/cart", headers=ALICE)

        cart = response.get_json()["data"]
        assert cart["items"] == []
        assert cart["total_items"] == 0
        assert cart["is_empty"] is True
        assert cart["currency"] == "UGX"

    def test_lines_keep_insertion_order_and_totals(self, client, cement, drill):
        add(client, drill["id"])
        add(client, cement["id"], 2)

        cart = client.get("/api/v1/cart", headers=ALICE).get_json()["data"]

        assert [line["product_id"] for line in cart["items"]] == [drill["id"], cement["id"]]
        assert cart["total_items"] == 3
        assert cart["total_price"] == 550000 + 2 * 35000

    def test_carts_are_scoped_per_identity(self, client, cement):
        add(client, cement["id"], 4)

        bob_cart = client.get("/api/v1/cart", headers=BOB).get_json()["data"]

        assert bob_cart["items"] == []


class TestAddItem:

    def test_add_creates_then_increments(self, client, cement):
        first = add(client, cement["id"], 2)
        second = add(client, cement["id"], 3)

        assert first.status_code == 201
        assert first.get_json()["data"]["quantity"] == 2
        assert second.get_json()["data"]["quantity"] == 5
        assert second.get_json()["data"]["name"] == "Tororo Cement 50kg Bag"

    def test_quantity_defaults_to_one(self, client, cement):
        response = client.post("/api/v1/cart", json={"product_id": cement["id"]}, headers=ALICE)

        assert response.get_json()["data"]["quantity"] == 1

    def test_unknown_product(self, client, seeded):
        response = add(client, "00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404

    def test_invalid_quantity(self, client, cement):
        assert add(client, cement["id"], 0).status_code == 400
        assert add(client, cement["id"], "2").status_code == 400

        body = add(client, cement["id"], -1).get_json()
        assert body["error"]["details"]["field_errors"][0]["field"] == "quantity"

    def test_line_limit(self, client, cement):
        add(client, cement["id"], 60)

        response = add(client, cement["id"], 60)

        assert response.status_code == 422
        assert response.get_json()["error"]["details"]["violated_rule"] == "max_item_quantity_exceeded"
        cart = client.get("/api/v1/cart", headers=ALICE).get_json()["data"]
        assert cart["total_items"] == 60

    def test_non_json_body(self, client, seeded):
        response = client.post("/api/v1/cart", data="product_id=x", headers=ALICE)

        assert response.status_code == 400


class TestUpdateAndRemove:

    def test_patch_sets_quantity(self, client, cement):
        add(client, cement["id"], 2)

        response = client.patch("/api/v1/cart", json={"product_id": cement["id"], "quantity": 7}, headers=ALICE)

        assert response.status_code == 200
        assert response.get_json()["data"]["quantity"] == 7

    def test_patch_zero_removes(self, client, cement):
        add(client, cement["id"], 2)

        response = client.patch("/api/v1/cart", json={"product_id": cement["id"], "quantity": 0}, headers=ALICE)

        assert response.status_code == 200
        assert response.get_json()["data"] is None
        assert client.get("/api/v1/cart", headers=ALICE).get_json()["data"]["items"] == []

    def test_patch_absent_line(self, client, cement):
        response = client.patch("/api/v1/cart", json={"product_id": cement["id"], "quantity": 3}, headers=ALICE)

        assert response.status_code == 404

    def test_delete_is_idempotent(self, client, cement):
        add(client, cement["id"])

        first = client.delete(f"/api/v1/cart?product_id={cement['id']}", headers=ALICE)
        second = client.delete(f"/api/v1/cart?product_id={cement['id']}", headers=ALICE)

        assert first.status_code == second.status_code == 200
        assert first.get_json()["data"]["removed"] is True
        assert second.get_json()["data"]["removed"] is False

    def test_delete_requires_product_id(self, client, seeded):
        response = client.delete("/api/v1/cart", headers=ALICE)

        assert response.status_code == 400

    def test_clear_only_touches_caller(self, client, cement, drill):
        add(client, cement["id"])
        add(client, drill["id"])
        add(client, cement["id"], headers=BOB)

        response = client.delete("/api/v1/cart/clear", headers=ALICE)

        assert response.get_json()["data"]["removed"] == 2
        assert client.get("/api/v1/cart", headers=ALICE).get_json()["data"]["items"] == []
        assert client.get("/api/v1/cart", headers=BOB).get_json()["data"]["total_items"] == 1
