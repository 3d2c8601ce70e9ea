"""Tests for FirebaseIdentityProvider.

The firebase-admin SDK is patched at the module functions; its real
exception classes are used so the error mapping is exercised as deployed.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from firebase_admin import auth as firebase_auth

from stockroom.providers.identity.errors import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    EmailAlreadyExistsError,
    InvalidEmailError,
    TokenExpiredError,
    TokenVerificationError,
)
from stockroom.providers.identity.firebase_adapter import FirebaseIdentityProvider


@pytest.fixture
def app() -> MagicMock:
    return MagicMock(name="firebase_app")


@pytest.fixture
def provider(app: MagicMock) -> FirebaseIdentityProvider:
    return FirebaseIdentityProvider(project_id="stockroom-test", app=app)


class TestVerifyToken:
    """Tests for verify_token()."""

    async def test_maps_claims_to_principal(self, provider, app):
        decoded = {"uid": "fb-1", "roles": ["admin", "employee"]}
        with patch.object(firebase_auth, "verify_id_token", return_value=decoded) as verify:
            principal = await provider.verify_token("id-token")

        verify.assert_called_once_with("id-token", app=app, check_revoked=True)
        assert principal.uid == "fb-1"
        assert principal.roles == frozenset({"admin", "employee"})

    async def test_single_role_string_claim(self, provider):
        with patch.object(
            firebase_auth, "verify_id_token", return_value={"uid": "fb-1", "roles": "admin"}
        ):
            principal = await provider.verify_token("id-token")
        assert principal.roles == frozenset({"admin"})

    async def test_no_roles_claim(self, provider):
        with patch.object(firebase_auth, "verify_id_token", return_value={"uid": "fb-1"}):
            principal = await provider.verify_token("id-token")
        assert principal.roles == frozenset()

    async def test_no_uid_resolves_to_none(self, provider):
        with patch.object(firebase_auth, "verify_id_token", return_value={}):
            assert await provider.verify_token("id-token") is None

    async def test_expired(self, provider):
        error = firebase_auth.ExpiredIdTokenError("Token expired", None)
        with (
            patch.object(firebase_auth, "verify_id_token", side_effect=error),
            pytest.raises(TokenExpiredError),
        ):
            await provider.verify_token("id-token")

    async def test_invalid(self, provider):
        error = firebase_auth.InvalidIdTokenError("Bad signature")
        with (
            patch.object(firebase_auth, "verify_id_token", side_effect=error),
            pytest.raises(TokenVerificationError),
        ):
            await provider.verify_token("id-token")

    async def test_malformed_input(self, provider):
        with (
            patch.object(firebase_auth, "verify_id_token", side_effect=ValueError("empty")),
            pytest.raises(TokenVerificationError),
        ):
            await provider.verify_token("")


class TestCreateAccount:
    """Tests for create_account()."""

    async def test_creates_user_and_sets_role_claims(self, provider, app):
        with (
            patch.object(
                firebase_auth, "create_user", return_value=SimpleNamespace(uid="fb-9")
            ) as create,
            patch.object(firebase_auth, "set_custom_user_claims") as set_claims,
        ):
            uid = await provider.create_account(
                email="a@example.com",
                password="secret-password",
                display_name="A B",
                roles=["employee", "admin", "admin"],
            )

        assert uid == "fb-9"
        create.assert_called_once_with(
            email="a@example.com",
            password="secret-password",
            display_name="A B",
            app=app,
        )
        set_claims.assert_called_once_with(
            "fb-9", {"roles": ["admin", "employee"]}, app=app
        )

    async def test_email_already_exists(self, provider):
        error = firebase_auth.EmailAlreadyExistsError("exists", None, None)
        with (
            patch.object(firebase_auth, "create_user", side_effect=error),
            pytest.raises(EmailAlreadyExistsError),
        ):
            await provider.create_account(email="a@example.com", password="secret-password")

    async def test_requested_uid_is_forwarded(self, provider, app):
        with (
            patch.object(
                firebase_auth, "create_user", return_value=SimpleNamespace(uid="kept")
            ) as create,
            patch.object(firebase_auth, "set_custom_user_claims"),
        ):
            uid = await provider.create_account(
                email="a@example.com", password="secret-password", uid="kept"
            )

        assert uid == "kept"
        assert create.call_args.kwargs["uid"] == "kept"

    async def test_uid_already_exists(self, provider):
        error = firebase_auth.UidAlreadyExistsError("exists", None, None)
        with (
            patch.object(firebase_auth, "create_user", side_effect=error),
            pytest.raises(AccountAlreadyExistsError),
        ):
            await provider.create_account(
                email="a@example.com", password="secret-password", uid="kept"
            )

    async def test_invalid_email(self, provider):
        with (
            patch.object(firebase_auth, "create_user", side_effect=ValueError("bad email")),
            pytest.raises(InvalidEmailError),
        ):
            await provider.create_account(email="nope", password="secret-password")

    async def test_claims_failure_removes_account(self, provider, app):
        with (
            patch.object(
                firebase_auth, "create_user", return_value=SimpleNamespace(uid="fb-9")
            ),
            patch.object(
                firebase_auth, "set_custom_user_claims", side_effect=RuntimeError("boom")
            ),
            patch.object(firebase_auth, "delete_user") as delete_user,
            pytest.raises(RuntimeError),
        ):
            await provider.create_account(email="a@example.com", password="secret-password")

        delete_user.assert_called_once_with("fb-9", app=app)


class TestSetRolesAndDelete:
    async def test_set_roles_unknown_user(self, provider):
        error = firebase_auth.UserNotFoundError("missing")
        with (
            patch.object(firebase_auth, "set_custom_user_claims", side_effect=error),
            pytest.raises(AccountNotFoundError),
        ):
            await provider.set_roles("missing", ["admin"])

    async def test_delete_batches_uids(self, provider, app):
        uids = [f"u{i}" for i in range(1500)]
        result = SimpleNamespace(failure_count=0)
        with patch.object(firebase_auth, "delete_users", return_value=result) as delete:
            await provider.delete_accounts(uids)

        assert delete.call_count == 2
        first_batch = delete.call_args_list[0].args[0]
        second_batch = delete.call_args_list[1].args[0]
        assert len(first_batch) == 1000
        assert len(second_batch) == 500

    async def test_delete_nothing_skips_sdk(self, provider):
        with patch.object(firebase_auth, "delete_users") as delete:
            await provider.delete_accounts([])
        delete.assert_not_called()
