"""API tests for user registration and system settings."""

from carledger.initial_data import seed_settings
from carledger.models.system_settings_model import SystemSetting
from tests.conftest import auth


class TestUsers:
    def test_register(self, client, db) -> None:
        resp = client.post("/users/", json={"email": "  Jane@Example.COM ", "name": "Jane"})

        assert resp.status_code == 201
        assert resp.json()["email"] == "jane@example.com"
        assert resp.json()["is_admin"] is False

    def test_configured_email_registers_as_admin(self, client, admin_id) -> None:
        resp = client.get("/users/me", headers=auth(admin_id))

        assert resp.json()["is_admin"] is True

    def test_register_duplicate_email(self, client, owner_id) -> None:
        resp = client.post("/users/", json={"email": "OWNER@example.com"})

        assert resp.status_code == 409
        assert resp.json()["detail"] == "Email already registered"

    def test_register_invalid_email(self, client, db) -> None:
        resp = client.post("/users/", json={"email": "not-an-email"})

        assert resp.status_code == 422

    def test_me(self, client, owner_id) -> None:
        resp = client.get("/users/me", headers=auth(owner_id))

        assert resp.json()["user_id"] == owner_id
        assert resp.json()["name"] == "Owner"

    def test_me_requires_header(self, client, db) -> None:
        assert client.get("/users/me").status_code == 401
        assert client.get("/users/me", headers={"X-User-Id": "abc"}).status_code == 401


class TestSettings:
    def test_list_seeded_defaults(self, client, owner_id, db) -> None:
        assert seed_settings(db) == 1
        assert seed_settings(db) == 0

        resp = client.get("/settings", headers=auth(owner_id))

        assert resp.json() == [
            {
                "key": "loan_paid_off_precedence",
                "value": "EITHER",
                "description": "Which paid-off signal wins: EITHER, BALANCE or SCHEDULE",
            }
        ]

    def test_list_requires_auth(self, client, db) -> None:
        assert client.get("/settings").status_code == 401

    def test_create_free_form_setting(self, client, admin_id, db) -> None:
        resp = client.post(
            "/settings",
            json={"key": " currency ", "value": "USD", "description": "Display currency"},
            headers=auth(admin_id),
        )

        assert resp.status_code == 201
        row = db.query(SystemSetting).filter(SystemSetting.key == "currency").one()
        assert row.value == "USD"
        assert row.updated_by == admin_id

    def test_create_duplicate(self, client, admin_id, db) -> None:
        seed_settings(db)

        resp = client.post(
            "/settings",
            json={"key": "loan_paid_off_precedence", "value": "SCHEDULE"},
            headers=auth(admin_id),
        )

        assert resp.status_code == 409

    def test_create_requires_auth(self, client, db) -> None:
        resp = client.post("/settings", json={"key": "currency", "value": "USD"})

        assert resp.status_code == 401

    def test_create_by_plain_user(self, client, owner_id, db) -> None:
        resp = client.post("/settings", json={"key": "currency", "value": "USD"}, headers=auth(owner_id))

        assert resp.status_code == 403
        assert resp.json()["detail"] == "Only an administrator can change settings"
        assert db.query(SystemSetting).count() == 0

    def test_patch_precedence(self, client, admin_id, db) -> None:
        seed_settings(db)

        resp = client.patch(
            "/settings",
            json={"key": "loan_paid_off_precedence", "value": "schedule"},
            headers=auth(admin_id),
        )

        assert resp.status_code == 200
        assert resp.json()["value"] == "SCHEDULE"

    def test_patch_by_plain_user(self, client, owner_id, db) -> None:
        seed_settings(db)

        resp = client.patch(
            "/settings",
            json={"key": "loan_paid_off_precedence", "value": "BALANCE"},
            headers=auth(owner_id),
        )

        assert resp.status_code == 403
        row = db.query(SystemSetting).filter(SystemSetting.key == "loan_paid_off_precedence").one()
        assert row.value == "EITHER"

    def test_patch_invalid_precedence(self, client, admin_id, db) -> None:
        seed_settings(db)

        resp = client.patch(
            "/settings",
            json={"key": "loan_paid_off_precedence", "value": "sometimes"},
            headers=auth(admin_id),
        )

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid value for loan_paid_off_precedence"

    def test_patch_unknown_key(self, client, admin_id) -> None:
        resp = client.patch("/settings", json={"key": "nope", "value": "x"}, headers=auth(admin_id))

        assert resp.status_code == 404
