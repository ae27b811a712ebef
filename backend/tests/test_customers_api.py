"""
Imob API — Customer Endpoint Tests
===================================

What:  End-to-end HTTP tests: ASGI app + middleware chain + SQLite database.

What we test:
    ✅ Create → 201 with camelCase record; defaults and normalization applied
    ✅ Field rule failures → 400 {"error": "Validation failed", "details": [...]}
    ✅ Duplicate document/email → 400 "Duplicate key", also under concurrency
    ✅ Get / list / role filter / update / soft & hard delete
    ✅ Unknown or malformed IDs → 404; unknown routes → 404 "Not Found - <path>"
    ✅ Unexpected failures → 500 envelope
"""

import asyncio
import uuid
from unittest.mock import AsyncMock

import pytest


async def create(client, headers, payload):
    response = await client.post("/customers", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateCustomer:

    @pytest.mark.asyncio
    async def test_create(self, client, auth_headers, customer_payload):
        response = await client.post("/customers", json=customer_payload, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        uuid.UUID(body["id"])
        assert body["email"] == "joana@imob.io"
        assert body["role"] == "agent"
        assert body["isActive"] is True
        assert body["profile"]["phone"] == "+55 11 99999-0000"
        assert "createdAt" in body and "updatedAt" in body

    @pytest.mark.asyncio
    async def test_defaults(self, client, auth_headers):
        body = await create(
            client, auth_headers, {"document": "12345678901", "name": "Jo", "email": "jo@imob.io"}
        )
        assert body["role"] == "agent"
        assert body["isActive"] is True

    @pytest.mark.asyncio
    async def test_short_name_rejected(self, client, auth_headers, customer_payload):
        customer_payload["name"] = "J"

        response = await client.post("/customers", json=customer_payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Validation failed",
            "details": ["Name must be at least 2 characters long"],
        }

    @pytest.mark.asyncio
    async def test_missing_fields_rejected(self, client, auth_headers):
        response = await client.post("/customers", json={"name": "Jo"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["details"] == ["Document is required", "Email is required"]

    @pytest.mark.asyncio
    async def test_invalid_role_rejected(self, client, auth_headers, customer_payload):
        customer_payload["role"] = "owner"
        response = await client.post("/customers", json=customer_payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["details"] == ["Role must be one of: admin, agent"]

    @pytest.mark.asyncio
    async def test_array_body_rejected(self, client, auth_headers):
        response = await client.post("/customers", json=[], headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["details"] == ["Request body must be a JSON object"]

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client, auth_headers, customer_payload):
        await create(client, auth_headers, customer_payload)
        customer_payload["document"] = "10987654321"
        customer_payload["email"] = "JOANA@imob.io"

        response = await client.post("/customers", json=customer_payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Duplicate key",
            "message": "A customer with this document or email already exists",
        }

    @pytest.mark.asyncio
    async def test_concurrent_duplicates(self, client, auth_headers, customer_payload):
        second = {**customer_payload, "document": "10987654321"}

        responses = await asyncio.gather(
            client.post("/customers", json=customer_payload, headers=auth_headers),
            client.post("/customers", json=second, headers=auth_headers),
        )

        assert sorted(r.status_code for r in responses) == [201, 400]
        listing = await client.get("/customers", headers=auth_headers)
        assert len(listing.json()) == 1


class TestReadCustomers:

    @pytest.mark.asyncio
    async def test_get_by_id(self, client, auth_headers, customer_payload):
        created = await create(client, auth_headers, customer_payload)

        response = await client.get(f"/customers/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert body["email"] == "joana@imob.io"
        assert body["profile"] == created["profile"]
        assert body["createdAt"] == created["createdAt"]
        assert body["updatedAt"] == created["updatedAt"]

    @pytest.mark.asyncio
    async def test_unknown_id(self, client, auth_headers):
        missing = uuid.uuid4()
        response = await client.get(f"/customers/{missing}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {
            "error": "Customer not found",
            "message": f"No customer found with ID: {missing}",
        }

    @pytest.mark.asyncio
    async def test_malformed_id(self, client, auth_headers):
        response = await client.get("/customers/12345", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Customer not found"

    @pytest.mark.asyncio
    async def test_list_only_active(self, client, auth_headers, customer_payload):
        first = await create(client, auth_headers, customer_payload)
        second = await create(
            client,
            auth_headers,
            {"document": "10987654321", "name": "Carlos", "email": "carlos@imob.io", "role": "admin"},
        )
        await client.delete(f"/customers/{first['id']}", headers=auth_headers)

        response = await client.get("/customers", headers=auth_headers)

        assert [c["id"] for c in response.json()] == [second["id"]]

    @pytest.mark.asyncio
    async def test_role_filter(self, client, auth_headers, customer_payload):
        await create(client, auth_headers, customer_payload)
        admin = await create(
            client,
            auth_headers,
            {"document": "10987654321", "name": "Carlos", "email": "carlos@imob.io", "role": "admin"},
        )

        response = await client.get("/customers", params={"role": "admin"}, headers=auth_headers)

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [admin["id"]]

    @pytest.mark.asyncio
    async def test_role_filter_invalid(self, client, auth_headers):
        response = await client.get("/customers", params={"role": "owner"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["details"] == ["Role must be one of: admin, agent"]


class TestUpdateCustomer:

    @pytest.mark.asyncio
    async def test_update(self, client, auth_headers, customer_payload):
        created = await create(client, auth_headers, customer_payload)

        response = await client.put(
            f"/customers/{created['id']}",
            json={"name": "Joana Souza", "role": "admin", "profile": {"bio": "Team lead"}},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Joana Souza"
        assert body["role"] == "admin"
        assert body["profile"]["bio"] == "Team lead"
        assert body["profile"]["phone"] == "+55 11 99999-0000"
        assert body["document"] == created["document"]

    @pytest.mark.asyncio
    async def test_update_document_rejected(self, client, auth_headers, customer_payload):
        created = await create(client, auth_headers, customer_payload)

        response = await client.put(
            f"/customers/{created['id']}", json={"document": "10987654321"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["details"] == ["Document cannot be changed"]

    @pytest.mark.asyncio
    async def test_update_invalid_values(self, client, auth_headers, customer_payload):
        created = await create(client, auth_headers, customer_payload)

        response = await client.put(
            f"/customers/{created['id']}",
            json={"name": "x" * 51, "profile": {"bio": "y" * 501}},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["details"] == [
            "Name cannot exceed 50 characters",
            "Bio cannot exceed 500 characters",
        ]

    @pytest.mark.asyncio
    async def test_update_unknown(self, client, auth_headers):
        response = await client.put(
            f"/customers/{uuid.uuid4()}", json={"name": "Nobody"}, headers=auth_headers
        )
        assert response.status_code == 404


class TestDeleteCustomer:

    @pytest.mark.asyncio
    async def test_soft_delete_by_default(self, client, auth_headers, customer_payload):
        created = await create(client, auth_headers, customer_payload)

        response = await client.delete(f"/customers/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Customer deactivated successfully"
        assert body["customer"]["isActive"] is False

        still_there = await client.get(f"/customers/{created['id']}", headers=auth_headers)
        assert still_there.status_code == 200
        assert still_there.json()["isActive"] is False

    @pytest.mark.asyncio
    async def test_hard_delete(self, client, auth_headers, customer_payload):
        created = await create(client, auth_headers, customer_payload)

        response = await client.delete(
            f"/customers/{created['id']}", params={"deletionType": "hard"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Customer removed successfully"
        assert response.json()["customer"]["id"] == created["id"]

        gone = await client.get(f"/customers/{created['id']}", headers=auth_headers)
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_deletion_type(self, client, auth_headers, customer_payload):
        created = await create(client, auth_headers, customer_payload)

        response = await client.delete(
            f"/customers/{created['id']}", params={"deletionType": "purge"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    @pytest.mark.asyncio
    async def test_delete_unknown(self, client, auth_headers):
        response = await client.delete(f"/customers/{uuid.uuid4()}", headers=auth_headers)
        assert response.status_code == 404


class TestFallbacks:

    @pytest.mark.asyncio
    async def test_unknown_route(self, client, auth_headers):
        response = await client.get("/properties", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Not Found - /properties"

    @pytest.mark.asyncio
    async def test_unexpected_error(self, app, client, auth_headers):
        app.state.customer_repository.list_active = AsyncMock(side_effect=RuntimeError("boom"))

        response = await client.get("/customers", headers=auth_headers)

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal Server Error"
        # ENVIRONMENT=test is not production, so the raw message and stack are included
        assert body["message"] == "boom"
        assert "RuntimeError" in body["stack"]
