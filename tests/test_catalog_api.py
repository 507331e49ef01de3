"""Component tests for catalog browsing: products and categories"""
from conftest import as_user


class TestProductListing:

    def test_lists_seeded_products_with_embedded_category(self, client, products):
        assert len(products) == 8

        cement = products["Tororo Cement 50kg Bag"]
        assert cement["price"] == 35000
        assert cement["badge"] == "Best Seller"
        assert cement["category"]["slug"] == "building-materials"
        assert cement["in_stock"] is True

    def test_sale_product_keeps_original_price(self, products):
        drill = products["Professional Cordless Drill Set"]

        assert drill["price"] == 550000
        assert drill["original_price"] == 650000

    def test_featured_filter(self, client, seeded):
        response = client.get("/api/v1/products?featured=true")

        names = {p["name"] for p in response.get_json()["data"]}
        assert names == {
            "Tororo Cement 50kg Bag",
            "Iron Sheets 28 Gauge (3m)",
            "Professional Cordless Drill Set",
            "Socket Wrench Set (120pc)",
        }

    def test_search_is_case_insensitive(self, client, seeded):
        response = client.get("/api/v1/products?search=CEMENT")

        names = sorted(p["name"] for p in response.get_json()["data"])
        assert names == ["Tororo Cement 25kg Bag", "Tororo Cement 50kg Bag"]

    def test_search_matches_description(self, client, seeded):
        response = client.get("/api/v1/products?search=self-levelling")

        assert [p["name"] for p in response.get_json()["data"]] == ["Laser Level & Measuring Tool"]

    def test_search_too_short_is_rejected(self, client, seeded):
        response = client.get("/api/v1/products?search=a")

        assert response.status_code == 400
        assert response.get_json()["success"] is False

    def test_sort_by_price_ascending_with_limit(self, client, seeded):
        response = client.get("/api/v1/products?sort=price&order=asc&limit=3")

        prices = [p["price"] for p in response.get_json()["data"]]
        assert prices == [18000, 25000, 28000]

    def test_invalid_sort_and_limit(self, client, seeded):
        assert client.get("/api/v1/products?sort=stock").status_code == 400
        assert client.get("/api/v1/products?limit=0").status_code == 400
        assert client.get("/api/v1/products?limit=abc").status_code == 400

    def test_filter_by_category(self, client, seeded):
        roofing = client.get("/api/v1/categories/roofing").get_json()["data"]

        response = client.get(f"/api/v1/products?category={roofing['id']}")

        assert {p["category"]["name"] for p in response.get_json()["data"]} == {"Roofing"}
        assert len(response.get_json()["data"]) == 2

    def test_get_product_and_missing_product(self, client, cement):
        response = client.get(f"/api/v1/products/{cement['id']}")
        assert response.status_code == 200
        assert response.get_json()["data"]["name"] == "Tororo Cement 50kg Bag"

        missing = client.get("/api/v1/products/does-not-exist")
        assert missing.status_code == 404
        assert missing.get_json()["error"]["code"] == "NOT_FOUND"

    def test_catalog_needs_no_identity(self, client, seeded):
        anonymous = client.get("/api/v1/products")
        signed_in = client.get("/api/v1/products", headers=as_user("alice"))

        assert anonymous.status_code == signed_in.status_code == 200


class TestCategories:

    def test_categories_ordered_by_name_with_counts(self, client, seeded):
        response = client.get("/api/v1/categories")

        categories = response.get_json()["data"]
        assert len(categories) == 11
        assert [c["name"] for c in categories] == sorted(c["name"] for c in categories)
        counts = {c["slug"]: c["product_count"] for c in categories}
        assert counts["roofing"] == 2
        assert counts["building-materials"] == 2
        assert counts["plumbing"] == 0

    def test_category_page(self, client, seeded):
        response = client.get("/api/v1/categories/power-tools")

        page = response.get_json()["data"]
        assert page["name"] == "Power Tools"
        assert [p["name"] for p in page["products"]] == ["Professional Cordless Drill Set"]

    def test_unknown_category(self, client, seeded):
        response = client.get("/api/v1/categories/garden")

        assert response.status_code == 404


class TestSeedAndHealth:

    def test_seed_is_idempotent(self, engine, seeded):
        from hardware_store.seed import seed

        assert seeded == {"categories": 11, "products": 8, "profiles": 1}
        assert seed(engine) == {"categories": 0, "products": 0, "profiles": 0}

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["database"] == "reachable"

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/v1/nope")

        assert response.status_code == 404
        assert response.get_json()["success"] is False
