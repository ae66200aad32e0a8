"""
Users API Tests — CRUD, activation and the JSON error envelope.
"""

import pytest
from httpx import AsyncClient


def _user_payload(**overrides) -> dict:
    payload = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "phone_number": "+441234567",
        "date_of_birth": "1990-12-10",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
class TestUsersAPI:
    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_list_users(self, client: AsyncClient):
        response = await client.get("/api/v1/users/")
        assert response.status_code == 200
        assert [u["email"] for u in response.json()] == ["john.doe@example.com", "jane.smith@example.com"]

    async def test_create_user(self, client: AsyncClient):
        response = await client.post("/api/v1/users/", json=_user_payload())
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "ada@example.com"
        assert data["role"] == "user"
        assert data["is_active"] is True

    async def test_create_duplicate_email(self, client: AsyncClient):
        response = await client.post("/api/v1/users/", json=_user_payload(email="john.doe@example.com"))
        assert response.status_code == 409
        error = response.json()["error"]
        assert error["message"] == "A resource with the same identifier already exists."
        assert "john.doe@example.com" in error["details"]

    async def test_create_invalid_email(self, client: AsyncClient):
        response = await client.post("/api/v1/users/", json=_user_payload(email="not-an-email"))
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Business rule violation."

    async def test_get_user(self, client: AsyncClient):
        response = await client.get("/api/v1/users/2")
        assert response.status_code == 200
        assert response.json()["first_name"] == "Jane"

    async def test_get_user_not_found(self, client: AsyncClient):
        response = await client.get("/api/v1/users/77")
        assert response.status_code == 404
        assert response.json()["error"]["details"] == "User with ID '77' was not found."

    async def test_get_by_email(self, client: AsyncClient):
        response = await client.get("/api/v1/users/by-email", params={"email": "jane.smith@example.com"})
        assert response.status_code == 200
        assert response.json()["id"] == 2

    async def test_update_user(self, client: AsyncClient):
        response = await client.put(
            "/api/v1/users/2",
            json=_user_payload(first_name="Janet", email="jane.smith@example.com"),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["first_name"] == "Janet"
        assert data["updated_at"] is not None

    async def test_update_user_to_taken_email(self, client: AsyncClient):
        response = await client.put("/api/v1/users/2", json=_user_payload(email="john.doe@example.com"))
        assert response.status_code == 409

    async def test_deactivate_and_activate(self, client: AsyncClient):
        response = await client.post("/api/v1/users/2/deactivate")
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        active = await client.get("/api/v1/users/", params={"active": True})
        assert [u["id"] for u in active.json()] == [1]

        response = await client.post("/api/v1/users/2/activate")
        assert response.json()["is_active"] is True

    async def test_delete_user_cascades_products(self, client: AsyncClient):
        response = await client.delete("/api/v1/users/1")
        assert response.status_code == 204

        assert (await client.get("/api/v1/users/1")).status_code == 404
        assert (await client.get("/api/v1/products/")).json() == []

    async def test_delete_missing_user(self, client: AsyncClient):
        response = await client.delete("/api/v1/users/55")
        assert response.status_code == 404
