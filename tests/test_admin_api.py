"""Component tests for the admin back office"""
import pytest

from conftest import ADMIN_ID, as_user

ADMIN = as_user(ADMIN_ID)
ALICE = as_user("alice")

NEW_PRODUCT = {
    "name": "PVC Pipe 1/2 inch (6m)",
    "description": "Pressure pipe for cold water lines.",
    "price": 12000,
    "stock_quantity": 150,
}


@pytest.fixture
def plumbing(client, seeded) -> dict:
    return client.get("/api/v1/categories/plumbing").get_json()["data"]


class TestAdminGate:

    def test_requires_identity(self, client, seeded):
        assert client.get("/api/v1/admin/products").status_code == 401

    def test_customer_is_forbidden(self, client, seeded):
        client.post("/api/v1/account/profile", json={"email": "alice@example.com"}, headers=ALICE)

        response = client.get("/api/v1/admin/orders", headers=ALICE)

        assert response.status_code == 403
        assert response.get_json()["error"]["code"] == "FORBIDDEN"

    def test_identity_without_profile_is_forbidden(self, client, seeded):
        assert client.get("/api/v1/admin/categories", headers=as_user("ghost")).status_code == 403


class TestAdminProducts:

    def test_create_update_delete(self, client, plumbing):
        # Create
        created = client.post(
            "/api/v1/admin/products", json={**NEW_PRODUCT, "category_id": plumbing["id"]}, headers=ADMIN
        )
        assert created.status_code == 201
        product = created.get_json()["data"]
        assert product["image"] == "/placeholder.svg"
        assert product["category"]["slug"] == "plumbing"
        assert product["is_featured"] is False

        # Update
        updated = client.patch(
            f"/api/v1/admin/products/{product['id']}",
            json={"price": 11000, "original_price": 12000, "badge": "Sale"},
            headers=ADMIN,
        )
        assert updated.status_code == 200
        assert updated.get_json()["data"]["price"] == 11000
        assert updated.get_json()["data"]["name"] == NEW_PRODUCT["name"]

        # Delete
        deleted = client.delete(f"/api/v1/admin/products/{product['id']}", headers=ADMIN)
        assert deleted.status_code == 200
        assert client.get(f"/api/v1/products/{product['id']}").status_code == 404

    def test_create_validates_payload(self, client, seeded):
        missing_price = {k: v for k, v in NEW_PRODUCT.items() if k != "price"}

        assert client.post("/api/v1/admin/products", json=missing_price, headers=ADMIN).status_code == 400
        assert client.post(
            "/api/v1/admin/products", json={**NEW_PRODUCT, "price": -5}, headers=ADMIN
        ).status_code == 400
        assert client.post(
            "/api/v1/admin/products", json={**NEW_PRODUCT, "category_id": 9999}, headers=ADMIN
        ).status_code == 400

    def test_update_unknown_product(self, client, seeded):
        response = client.patch("/api/v1/admin/products/missing", json={"price": 1}, headers=ADMIN)

        assert response.status_code == 404

    def test_ordered_product_cannot_be_deleted(self, client, cement):
        client.post("/api/v1/orders", json={
            "shipping_address": "Plot 12, Kampala Road",
            "payment_method": "cash-on-delivery",
            "items": [{"product_id": cement["id"], "quantity": 1}],
        }, headers=ALICE)

        response = client.delete(f"/api/v1/admin/products/{cement['id']}", headers=ADMIN)

        assert response.status_code == 422
        assert response.get_json()["error"]["details"]["violated_rule"] == "product_has_orders"


class TestAdminCategories:

    def test_create_derives_slug(self, client, seeded):
        response = client.post("/api/v1/admin/categories", json={"name": "Garden & Outdoor"}, headers=ADMIN)

        assert response.status_code == 201
        category = response.get_json()["data"]
        assert category["slug"] == "garden-outdoor"
        assert category["product_count"] == 0

    def test_duplicate_name_or_slug(self, client, seeded):
        by_name = client.post("/api/v1/admin/categories", json={"name": "roofing"}, headers=ADMIN)
        by_slug = client.post(
            "/api/v1/admin/categories", json={"name": "Roof Things", "slug": "roofing"}, headers=ADMIN
        )

        assert by_name.status_code == 409
        assert by_slug.status_code == 409

    def test_invalid_slug(self, client, seeded):
        response = client.post(
            "/api/v1/admin/categories", json={"name": "Tiles", "slug": "Tiles & More"}, headers=ADMIN
        )

        assert response.status_code == 400

    def test_update_category(self, client, plumbing):
        response = client.patch(
            f"/api/v1/admin/categories/{plumbing['id']}",
            json={"description": "Pipes, fittings, taps and tanks"},
            headers=ADMIN,
        )

        assert response.status_code == 200
        assert response.get_json()["data"]["description"] == "Pipes, fittings, taps and tanks"
        assert response.get_json()["data"]["slug"] == "plumbing"

    def test_delete_rules(self, client, plumbing):
        roofing = client.get("/api/v1/categories/roofing").get_json()["data"]

        refused = client.delete(f"/api/v1/admin/categories/{roofing['id']}", headers=ADMIN)
        deleted = client.delete(f"/api/v1/admin/categories/{plumbing['id']}", headers=ADMIN)

        assert refused.status_code == 422
        assert refused.get_json()["error"]["details"]["violated_rule"] == "category_has_products"
        assert deleted.status_code == 200
        assert client.get("/api/v1/categories/plumbing").status_code == 404
        assert client.get(f"/api/v1/admin/categories/{plumbing['id']}", headers=ADMIN).status_code == 404


class TestAdminOrders:

    @pytest.fixture
    def order_id(self, client, cement):
        client.post("/api/v1/account/profile", json={
            "email": "alice@example.com", "full_name": "Alice Nakato", "city": "Kampala",
        }, headers=ALICE)
        client.post("/api/v1/cart", json={"product_id": cement["id"], "quantity": 2}, headers=ALICE)
        response = client.post("/api/v1/orders", json={
            "shipping_address": "Plot 12, Kampala Road", "payment_method": "card",
        }, headers=ALICE)
        return response.get_json()["data"]["id"]

    def test_list_embeds_customer(self, client, order_id):
        orders = client.get("/api/v1/admin/orders", headers=ADMIN).get_json()["data"]

        assert [o["id"] for o in orders] == [order_id]
        assert orders[0]["user_id"] == "alice"
        assert orders[0]["customer"]["full_name"] == "Alice Nakato"
        assert orders[0]["customer"]["email"] == "alice@example.com"

    def test_detail_includes_contact_and_items(self, client, order_id):
        order = client.get(f"/api/v1/admin/orders/{order_id}", headers=ADMIN).get_json()["data"]

        assert order["customer"]["city"] == "Kampala"
        assert order["items"][0]["quantity"] == 2
        assert order["total"] == 97600

    @pytest.mark.parametrize("status", ["processing", "shipped", "delivered", "cancelled", "pending"])
    def test_status_update(self, client, order_id, status):
        response = client.patch(f"/api/v1/admin/orders/{order_id}", json={"status": status}, headers=ADMIN)

        assert response.status_code == 200
        assert response.get_json()["data"]["status"] == status
        customer_view = client.get(f"/api/v1/orders/{order_id}", headers=ALICE).get_json()["data"]
        assert customer_view["status"] == status

    def test_invalid_status(self, client, order_id):
        response = client.patch(f"/api/v1/admin/orders/{order_id}", json={"status": "lost"}, headers=ADMIN)

        assert response.status_code == 400

    def test_unknown_order(self, client, seeded):
        response = client.patch("/api/v1/admin/orders/999", json={"status": "shipped"}, headers=ADMIN)

        assert response.status_code == 404

    def test_filters(self, client, order_id):
        client.patch(f"/api/v1/admin/orders/{order_id}", json={"status": "shipped"}, headers=ADMIN)

        shipped = client.get("/api/v1/admin/orders?status=shipped", headers=ADMIN).get_json()["data"]
        pending = client.get("/api/v1/admin/orders?status=pending", headers=ADMIN).get_json()["data"]
        future = client.get("/api/v1/admin/orders?since=2999-01-01", headers=ADMIN).get_json()["data"]
        past = client.get("/api/v1/admin/orders?since=2000-01-01", headers=ADMIN).get_json()["data"]

        assert len(shipped) == 1
        assert pending == []
        assert future == []
        assert len(past) == 1

    def test_bad_filters(self, client, seeded):
        assert client.get("/api/v1/admin/orders?status=lost", headers=ADMIN).status_code == 400
        assert client.get("/api/v1/admin/orders?since=yesterday-ish", headers=ADMIN).status_code == 400
