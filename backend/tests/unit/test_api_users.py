"""Tests for the users endpoints."""

from httpx import AsyncClient

from tests.conftest import ADMIN_UID, EMPLOYEE_UID, auth_header

_BASE = "/api/v1/users"

_NEW_USER = {
    "email": "new.hire@example.com",
    "password": "initial-password",
    "first_name": "New",
    "last_name": "Hire",
    "roles": ["employee"],
}


async def _total_users(client: AsyncClient, token: str) -> int:
    response = await client.get(_BASE, headers=auth_header(token))
    return response.json()["_metadata"]["total"]


class TestCreateUser:
    async def test_admin_creates_user(self, client, admin_token, identity):
        response = await client.post(_BASE, json=_NEW_USER, headers=auth_header(admin_token))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["email"] == "new.hire@example.com"
        assert data["roles"] == ["employee"]
        assert data["created_by"]["id"] == ADMIN_UID
        assert "password" not in data
        assert data["id"] in identity.accounts

    async def test_employee_cannot_create(self, client, employee_token):
        response = await client.post(_BASE, json=_NEW_USER, headers=auth_header(employee_token))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "NOT_AUTHORIZED"

    async def test_duplicate_email_keeps_single_record(self, client, admin_token):
        await client.post(_BASE, json=_NEW_USER, headers=auth_header(admin_token))
        before = await _total_users(client, admin_token)

        response = await client.post(_BASE, json=_NEW_USER, headers=auth_header(admin_token))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"
        assert await _total_users(client, admin_token) == before

    async def test_unknown_role_is_validation_error(self, client, admin_token):
        body = {**_NEW_USER, "roles": ["superuser"]}

        response = await client.post(_BASE, json=body, headers=auth_header(admin_token))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestReadUsers:
    async def test_me(self, client, employee_token):
        response = await client.get(f"{_BASE}/me", headers=auth_header(employee_token))

        data = response.json()["data"]
        assert data["id"] == EMPLOYEE_UID
        assert data["created_by"]["id"] == ADMIN_UID

    async def test_me_without_local_record(self, client, identity):
        token = identity.issue_token("stranger", ["employee"])
        response = await client.get(f"{_BASE}/me", headers=auth_header(token))
        assert response.status_code == 404

    async def test_listing_is_admin_only(self, client, employee_token):
        response = await client.get(_BASE, headers=auth_header(employee_token))
        assert response.status_code == 403

    async def test_role_filter(self, client, admin_token):
        response = await client.get(
            _BASE, params={"role": "employee"}, headers=auth_header(admin_token)
        )

        body = response.json()
        assert body["_metadata"]["total"] == 1
        assert body["data"][0]["id"] == EMPLOYEE_UID

    async def test_text_filter_matches_nif(self, client, admin_token):
        response = await client.get(
            _BASE, params={"filter": "345678"}, headers=auth_header(admin_token)
        )
        assert [u["id"] for u in response.json()["data"]] == [EMPLOYEE_UID]

    async def test_staff_can_read_single_user(self, client, employee_token):
        found = await client.get(f"{_BASE}/{ADMIN_UID}", headers=auth_header(employee_token))
        missing = await client.get(f"{_BASE}/nobody", headers=auth_header(employee_token))

        assert found.json()["data"]["roles"] == ["admin"]
        assert missing.status_code == 404


class TestPerUserListings:
    async def test_records_created_by_user(self, client, employee_token, admin_token):
        headers = auth_header(employee_token)
        await client.post("/api/v1/categories", json={"name": "Mine"}, headers=headers)
        await client.post(
            "/api/v1/categories", json={"name": "Theirs"}, headers=auth_header(admin_token)
        )
        await client.post("/api/v1/suppliers", json={"name": "Acme"}, headers=headers)
        await client.post("/api/v1/products", json={"name": "Cola"}, headers=headers)

        categories = await client.get(f"{_BASE}/{EMPLOYEE_UID}/categories", headers=headers)
        suppliers = await client.get(f"{_BASE}/{EMPLOYEE_UID}/suppliers", headers=headers)
        products = await client.get(f"{_BASE}/{EMPLOYEE_UID}/products", headers=headers)

        assert [c["name"] for c in categories.json()["data"]] == ["Mine"]
        assert suppliers.json()["_metadata"]["total"] == 1
        assert [p["name"] for p in products.json()["data"]] == ["Cola"]

    async def test_unknown_user(self, client, employee_token):
        response = await client.get(
            f"{_BASE}/nobody/products", headers=auth_header(employee_token)
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


class TestUpdateUser:
    async def test_patch_roles_and_name(self, client, admin_token):
        response = await client.patch(
            f"{_BASE}/{EMPLOYEE_UID}",
            json={"roles": ["admin", "employee"], "last_name": "Promoted"},
            headers=auth_header(admin_token),
        )

        data = response.json()["data"]
        assert data["roles"] == ["admin", "employee"]
        assert data["last_name"] == "Promoted"

    async def test_email_is_not_updatable(self, client, admin_token):
        response = await client.patch(
            f"{_BASE}/{EMPLOYEE_UID}",
            json={"email": "other@example.com"},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 400

    async def test_null_roles_rejected(self, client, admin_token):
        response = await client.patch(
            f"{_BASE}/{EMPLOYEE_UID}", json={"roles": None}, headers=auth_header(admin_token)
        )
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_missing_user(self, client, admin_token):
        response = await client.patch(
            f"{_BASE}/nobody", json={"first_name": "X"}, headers=auth_header(admin_token)
        )
        assert response.status_code == 404


class TestBulkDeleteUsers:
    async def test_deletes_and_orphans_owned_records(self, client, admin_token, employee_token):
        created = await client.post(
            "/api/v1/categories", json={"name": "Mine"}, headers=auth_header(employee_token)
        )
        category_id = created.json()["data"]["id"]

        response = await client.post(
            f"{_BASE}/bulk-delete",
            json={"ids": [EMPLOYEE_UID, "nobody"]},
            headers=auth_header(admin_token),
        )

        assert response.json() == {"data": {"count": 1}}
        category = await client.get(
            f"/api/v1/categories/{category_id}", headers=auth_header(admin_token)
        )
        assert category.json()["data"]["created_by_id"] is None
