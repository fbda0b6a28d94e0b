"""End-to-end tests of the HTTP API through FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from tests.fixtures.api import API


def _register(client: TestClient, email: str = "seller@example.com", password: str = "long-enough-pw"):
    return client.post(
        f"{API}/register",
        json={"name": "Seller", "email": email, "password": password},
    )


def _login(client: TestClient, email: str = "seller@example.com", password: str = "long-enough-pw"):
    return client.post(f"{API}/login", json={"email": email, "password": password})


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestHealth:
    def test_health_reports_database(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert "timestamp" in body

    def test_health_when_database_down(self, client: TestClient, app_dependencies, monkeypatch):
        monkeypatch.setattr(app_dependencies.database_service, "health_check", lambda: False)

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"

    def test_request_id_echoed(self, client: TestClient):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"


class TestRegisterAndLogin:
    def test_register_then_login(self, client: TestClient):
        response = _register(client)
        assert response.status_code == 201
        assert response.json() == {"message": "user registered successfully"}

        login = _login(client)
        assert login.status_code == 200
        assert login.json()["token"]

    def test_duplicate_email(self, client: TestClient):
        _register(client)

        response = _register(client)

        assert response.status_code == 409
        assert "already exists" in response.json()["error"]

    def test_short_password(self, client: TestClient):
        response = _register(client, password="short")

        assert response.status_code == 400
        assert "at least 8" in response.json()["error"]

    def test_invalid_email(self, client: TestClient):
        response = _register(client, email="not-an-email")

        assert response.status_code == 400
        assert "error" in response.json()

    def test_email_stored_as_sent(self, client: TestClient):
        assert _register(client, email="bob@EXAMPLE.com").status_code == 201
        assert _register(client, email="bob@example.com").status_code == 201

        assert _login(client, email="bob@EXAMPLE.com").status_code == 200
        assert _login(client, email="bob@example.com").status_code == 200

    def test_missing_fields(self, client: TestClient):
        response = client.post(f"{API}/register", json={"email": "x@example.com"})

        assert response.status_code == 400
        assert "name" in response.json()["error"]

    def test_bad_credentials(self, client: TestClient):
        _register(client)

        response = _login(client, password="wrong-password")

        assert response.status_code == 401
        assert response.json() == {"error": "invalid credentials"}


class TestAuthentication:
    def test_missing_header(self, client: TestClient):
        response = client.get(f"{API}/products")

        assert response.status_code == 401
        assert response.json() == {"error": "Authorization header missing"}

    @pytest.mark.parametrize("header", ["Token abc", "Bearer", "Bearer a b"])
    def test_malformed_header(self, client: TestClient, header: str):
        response = client.get(f"{API}/products", headers={"Authorization": header})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid authorization format"}

    def test_invalid_token(self, client: TestClient):
        response = client.get(f"{API}/products", headers=_bearer("garbage.token.value"))

        assert response.status_code == 401

    def test_non_admin_cannot_manage_users(self, client: TestClient, user_headers):
        response = client.get(f"{API}/users", headers=user_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Insufficient permissions"}


class TestProductsFlow:
    def test_register_login_create_product(self, client: TestClient):
        """Should create a product owned by the caller with the default status."""
        _register(client)
        token = _login(client).json()["token"]

        response = client.post(
            f"{API}/products",
            json={"code": "BIKE-1", "name": "Road bike", "price": 45000},
            headers=_bearer(token),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "active"
        assert body["code"] == "BIKE-1"
        assert body["id"] > 0
        assert body["user_id"] > 0

    def test_create_without_token(self, client: TestClient):
        response = client.post(
            f"{API}/products", json={"code": "X", "name": "X", "price": 1}
        )

        assert response.status_code == 401

    def test_create_for_unknown_owner(self, client: TestClient, user_headers):
        response = client.post(
            f"{API}/products",
            json={"code": "X", "name": "X", "price": 1, "user_id": 9999},
            headers=user_headers,
        )

        assert response.status_code == 404
        assert response.json() == {"error": "user not found"}

    def test_negative_price_rejected(self, client: TestClient, user_headers):
        response = client.post(
            f"{API}/products",
            json={"code": "X", "name": "X", "price": -1},
            headers=user_headers,
        )

        assert response.status_code == 400

    def test_crud_roundtrip(self, client: TestClient, user_headers):
        created = client.post(
            f"{API}/products",
            json={"code": "LAMP-1", "name": "Lamp", "price": 1200, "status": "draft"},
            headers=user_headers,
        ).json()
        product_id = created["id"]

        by_code = client.get(f"{API}/products/code/LAMP-1", headers=user_headers)
        assert by_code.status_code == 200
        assert by_code.json()["id"] == product_id

        patched = client.patch(
            f"{API}/products/{product_id}",
            json={"price": 999, "description": "Warm light"},
            headers=user_headers,
        )
        assert patched.status_code == 200
        assert patched.json()["price"] == 999
        assert patched.json()["description"] == "Warm light"
        assert patched.json()["status"] == "draft"

        deleted = client.delete(f"{API}/products/{product_id}", headers=user_headers)
        assert deleted.status_code == 200
        assert "message" in deleted.json()

        missing = client.get(f"{API}/products/{product_id}", headers=user_headers)
        assert missing.status_code == 404
        assert missing.json() == {"error": "product not found"}

    def test_duplicate_code(self, client: TestClient, user_headers):
        payload = {"code": "DUP", "name": "First", "price": 1}
        client.post(f"{API}/products", json=payload, headers=user_headers)

        response = client.post(f"{API}/products", json=payload, headers=user_headers)

        assert response.status_code == 409

    def test_empty_patch_rejected(self, client: TestClient, user_headers):
        created = client.post(
            f"{API}/products", json={"code": "P", "name": "P", "price": 1}, headers=user_headers
        ).json()

        response = client.patch(f"{API}/products/{created['id']}", json={}, headers=user_headers)

        assert response.status_code == 400

    def test_list_with_filters_and_pagination(self, client: TestClient, user_headers):
        for i in range(3):
            client.post(
                f"{API}/products",
                json={"code": f"CHAIR-{i}", "name": f"Chair {i}", "price": 10},
                headers=user_headers,
            )
        client.post(
            f"{API}/products", json={"code": "TABLE", "name": "Table", "price": 10}, headers=user_headers
        )

        response = client.get(
            f"{API}/products",
            params={"code": "CHAIR", "page": 1, "page_size": 2},
            headers=user_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert body["total_pages"] == 2
        assert body["page_size"] == 2
        assert len(body["data"]) == 2

    def test_list_page_size_zero_uses_default(self, client: TestClient, user_headers):
        response = client.get(f"{API}/products", params={"page_size": 0}, headers=user_headers)

        assert response.json()["page_size"] == 10

    def test_huge_page_number_returns_empty_page(self, client: TestClient, user_headers):
        response = client.get(
            f"{API}/products",
            params={"page": 10**18, "page_size": 100},
            headers=user_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_product_reads_embed_owner(self, client: TestClient, user_headers):
        created = client.post(
            f"{API}/products", json={"code": "OWNED", "name": "Owned", "price": 5}, headers=user_headers
        ).json()
        assert created["user"]["email"] == "member@example.com"

        fetched = client.get(f"{API}/products/{created['id']}", headers=user_headers).json()
        listed = client.get(f"{API}/products", headers=user_headers).json()["data"]

        assert fetched["user"]["id"] == created["user_id"]
        assert "password" not in fetched["user"]
        assert listed[0]["user"]["email"] == "member@example.com"


class TestUserAdministration:
    def test_admin_crud(self, client: TestClient, admin_headers):
        created = client.post(
            f"{API}/users",
            json={"name": "Staff", "email": "staff@example.com", "password": "staff-password", "role": "admin"},
            headers=admin_headers,
        )
        assert created.status_code == 201
        body = created.json()
        assert body["role"] == "admin"
        assert "password" not in body
        user_id = body["id"]

        fetched = client.get(f"{API}/users/{user_id}", headers=admin_headers)
        assert fetched.json()["email"] == "staff@example.com"

        patched = client.patch(f"{API}/users/{user_id}", json={"name": "Staff Lead"}, headers=admin_headers)
        assert patched.status_code == 200
        assert patched.json()["name"] == "Staff Lead"

        deleted = client.delete(f"{API}/users/{user_id}", headers=admin_headers)
        assert deleted.status_code == 200

        assert client.get(f"{API}/users/{user_id}", headers=admin_headers).status_code == 404

    def test_list_users_never_exposes_passwords(self, client: TestClient, admin_headers):
        _register(client)

        response = client.get(f"{API}/users", params={"email": "seller"}, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert all("password" not in user for user in body["data"])

    def test_update_missing_user(self, client: TestClient, admin_headers):
        response = client.patch(f"{API}/users/424242", json={"name": "Ghost"}, headers=admin_headers)

        assert response.status_code == 404

    def test_null_field_rejected(self, client: TestClient, admin_headers):
        response = client.patch(f"{API}/users/1", json={"name": None}, headers=admin_headers)

        assert response.status_code == 400

    def test_password_change_allows_new_login(self, client: TestClient, admin_headers):
        _register(client)
        user_id = client.get(
            f"{API}/users", params={"email": "seller"}, headers=admin_headers
        ).json()["data"][0]["id"]

        client.patch(f"{API}/users/{user_id}", json={"password": "rotated-password"}, headers=admin_headers)

        assert _login(client, password="rotated-password").status_code == 200
        assert _login(client).status_code == 401
