"""Tests for the categories endpoints.

Covers the authorization gate, envelopes, pagination metadata and
bulk delete.
"""

from httpx import AsyncClient

from tests.conftest import EMPLOYEE_UID, auth_header

_BASE = "/api/v1/categories"


async def _create(client: AsyncClient, token: str, name: str) -> dict:
    response = await client.post(_BASE, json={"name": name}, headers=auth_header(token))
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestAuthorizationGate:
    """Every category route requires a staff token."""

    async def test_missing_token(self, client):
        response = await client.get(_BASE)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "MISSING_TOKEN"

    async def test_non_bearer_scheme(self, client):
        response = await client.get(_BASE, headers={"Authorization": "Basic abc"})
        assert response.json()["error"]["code"] == "MISSING_TOKEN"

    async def test_invalid_token(self, client):
        response = await client.get(_BASE, headers=auth_header("garbage"))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    async def test_expired_token(self, client, expired_token):
        response = await client.get(_BASE, headers=auth_header(expired_token))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "EXPIRED_TOKEN"

    async def test_token_without_roles(self, client, identity):
        token = identity.issue_token("someone", [])

        response = await client.get(_BASE, headers=auth_header(token))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "NOT_AUTHORIZED"

    async def test_gate_runs_before_body_validation(self, client):
        """An unauthenticated write is refused before the body is looked at."""
        response = await client.post(_BASE, json={"unexpected": True})
        assert response.status_code == 403

    async def test_gate_runs_before_body_parsing(self, client):
        """A tokenless write with malformed JSON is still a 403."""
        response = await client.post(
            _BASE, content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "MISSING_TOKEN"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    async def test_token_endpoint_is_public(self, client):
        """The sign-in endpoint validates its body without asking for a token."""
        response = await client.post(
            "/api/v1/auth/token",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestCrud:
    async def test_create_sets_owner(self, client, employee_token):
        data = await _create(client, employee_token, "  Beverages ")

        assert data["name"] == "Beverages"
        assert data["created_by_id"] == EMPLOYEE_UID

    async def test_get_and_missing(self, client, employee_token):
        created = await _create(client, employee_token, "Snacks")

        found = await client.get(f"{_BASE}/{created['id']}", headers=auth_header(employee_token))
        missing = await client.get(f"{_BASE}/999", headers=auth_header(employee_token))

        assert found.json() == {"data": created}
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "NOT_FOUND"

    async def test_patch_renames(self, client, admin_token):
        created = await _create(client, admin_token, "Old")

        response = await client.patch(
            f"{_BASE}/{created['id']}", json={"name": "New"}, headers=auth_header(admin_token)
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "New"

    async def test_patch_missing(self, client, admin_token):
        response = await client.patch(
            f"{_BASE}/42", json={"name": "New"}, headers=auth_header(admin_token)
        )
        assert response.status_code == 404

    async def test_duplicate_name(self, client, admin_token):
        await _create(client, admin_token, "Dup")

        response = await client.post(
            _BASE, json={"name": "Dup"}, headers=auth_header(admin_token)
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CONSTRAINT_VIOLATION"


class TestList:
    async def test_envelope_and_filter(self, client, employee_token):
        for i in range(1, 26):
            await _create(client, employee_token, f"john {i:02d}")
        await _create(client, employee_token, "unrelated")

        response = await client.get(
            _BASE,
            params={"filter": "JOHN", "page": 2, "pageSize": 10},
            headers=auth_header(employee_token),
        )

        body = response.json()
        assert response.status_code == 200
        assert body["_metadata"] == {
            "total": 25,
            "page": 2,
            "pageSize": 10,
            "totalPages": 3,
        }
        assert [c["name"] for c in body["data"]] == [f"john {i:02d}" for i in range(11, 21)]

    async def test_invalid_paging_falls_back_to_defaults(self, client, employee_token):
        response = await client.get(
            _BASE, params={"page": 0, "pageSize": 1000}, headers=auth_header(employee_token)
        )

        meta = response.json()["_metadata"]
        assert meta["page"] == 1
        assert meta["pageSize"] == 100

    async def test_empty_collection(self, client, employee_token):
        response = await client.get(_BASE, headers=auth_header(employee_token))
        assert response.json() == {
            "_metadata": {"total": 0, "page": 1, "pageSize": 20, "totalPages": 0},
            "data": [],
        }


class TestBulkDelete:
    async def test_counts_existing_ids_only(self, client, admin_token):
        one = await _create(client, admin_token, "One")
        two = await _create(client, admin_token, "Two")
        await _create(client, admin_token, "Three")

        response = await client.post(
            f"{_BASE}/bulk-delete",
            json={"ids": [one["id"], two["id"], 999]},
            headers=auth_header(admin_token),
        )

        assert response.json() == {"data": {"count": 2}}
        remaining = await client.get(_BASE, headers=auth_header(admin_token))
        assert [c["name"] for c in remaining.json()["data"]] == ["Three"]

    async def test_empty_ids(self, client, admin_token):
        response = await client.post(
            f"{_BASE}/bulk-delete", json={"ids": []}, headers=auth_header(admin_token)
        )
        assert response.json() == {"data": {"count": 0}}
