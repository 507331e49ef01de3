"""Component tests for customer profiles"""
from conftest import as_user

ALICE = as_user("alice")

PROFILE = {
    "email": "Alice@Example.COM",
    "full_name": "Alice Nakato",
    "phone": "+256 700 123456",
    "city": "Kampala",
    "country": "Uganda",
}


class TestProfile:

    def test_profile_lifecycle(self, client):
        assert client.get("/api/v1/account/profile", headers=ALICE).status_code == 404

        created = client.post("/api/v1/account/profile", json=PROFILE, headers=ALICE)
        assert created.status_code == 201
        profile = created.get_json()["data"]
        assert profile["id"] == "alice"
        assert profile["email"] == "alice@example.com"
        assert profile["is_admin"] is False

        updated = client.patch(
            "/api/v1/account/profile", json={"address": "Plot 4, Jinja Road"}, headers=ALICE
        )
        assert updated.status_code == 200
        assert updated.get_json()["data"]["address"] == "Plot 4, Jinja Road"
        assert updated.get_json()["data"]["full_name"] == "Alice Nakato"

    def test_profile_cannot_be_created_twice(self, client):
        client.post("/api/v1/account/profile", json=PROFILE, headers=ALICE)

        again = client.post("/api/v1/account/profile", json=PROFILE, headers=ALICE)

        assert again.status_code == 409

    def test_email_must_be_unique(self, client):
        client.post("/api/v1/account/profile", json=PROFILE, headers=ALICE)

        response = client.post(
            "/api/v1/account/profile", json={"email": "alice@example.com"}, headers=as_user("bob")
        )

        assert response.status_code == 409
        assert response.get_json()["error"]["details"]["conflict_field"] == "email"

    def test_invalid_email_and_phone(self, client):
        bad_email = client.post("/api/v1/account/profile", json={"email": "not-an-email"}, headers=ALICE)
        bad_phone = client.post(
            "/api/v1/account/profile", json={**PROFILE, "phone": "call me"}, headers=ALICE
        )

        assert bad_email.status_code == 400
        assert bad_phone.status_code == 400

    def test_is_admin_cannot_be_self_assigned(self, client):
        client.post("/api/v1/account/profile", json={**PROFILE, "is_admin": True}, headers=ALICE)
        client.patch("/api/v1/account/profile", json={"is_admin": True}, headers=ALICE)

        profile = client.get("/api/v1/account/profile", headers=ALICE).get_json()["data"]

        assert profile["is_admin"] is False

    def test_update_missing_profile(self, client):
        response = client.patch("/api/v1/account/profile", json={"city": "Gulu"}, headers=ALICE)

        assert response.status_code == 404

    def test_invalid_identity_header(self, client):
        response = client.get("/api/v1/account/profile", headers=as_user("bad id!"))

        assert response.status_code == 400
