"""User service: account registration and management.

A user exists in two places: the identity provider (credentials, role
claims) and the local store (profile, role rows, ownership of records).

Registration runs as a two-phase saga:

    1. create the identity-provider account with the roles as claims
    2. insert and commit the local record under the returned uid

If phase 2 fails, phase 1 is compensated by deleting the account. If the
compensation fails too, the orphaned uid is logged at ERROR for manual
clean-up and the phase-2 error still propagates.
"""

import logging
from collections.abc import Collection, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.errors import BadRequestError
from stockroom.core.filtering import normalize_search_term
from stockroom.core.pagination import Pagination
from stockroom.models.user import User
from stockroom.providers.identity.base import IdentityProvider
from stockroom.providers.identity.errors import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    EmailAlreadyExistsError,
    InvalidEmailError,
)
from stockroom.repositories.user_repository import UserRepository
from stockroom.schemas.auth import Role

logger = logging.getLogger(__name__)


class UserService:
    """Business operations on users.

    Args:
        db: Async database session.
        identity_provider: Service holding the login accounts.
    """

    def __init__(self, db: AsyncSession, identity_provider: IdentityProvider) -> None:
        self._db = db
        self._identity = identity_provider

    async def list_users(
        self,
        *,
        pagination: Pagination,
        search: str | None = None,
        role: str | None = None,
    ) -> tuple[list[User], int]:
        """List users matching an optional text filter and role.

        Returns:
            Tuple of (users on this page, total matching).
        """
        return await UserRepository.list_paginated(
            self._db,
            pagination=pagination,
            search=normalize_search_term(search),
            role=role,
        )

    async def get_by_id(self, user_id: str) -> User | None:
        return await UserRepository.get_by_id(self._db, user_id)

    async def create(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        roles: Sequence[str],
        nif: str | None = None,
        created_by_id: str | None = None,
    ) -> User:
        """Register a user with the identity provider and the local store.

        Commits on success. The caller must not hold other pending writes
        in the session.

        Args:
            email: Login email.
            password: Initial password, forwarded to the identity provider.
            first_name: Given name.
            last_name: Family name.
            roles: Role tags (stored locally and as token claims).
            nif: Tax identification number.
            created_by_id: uid of the registering principal. Ignored when
                that principal has no local record.

        Returns:
            The created User.

        Raises:
            BadRequestError: INVALID_EMAIL or DUPLICATE_EMAIL.
        """
        if created_by_id is not None and await UserRepository.get_by_id(
            self._db, created_by_id
        ) is None:
            created_by_id = None

        try:
            uid = await self._identity.create_account(
                email=email,
                password=password,
                display_name=f"{first_name} {last_name}",
                roles=roles,
            )
        except EmailAlreadyExistsError as exc:
            raise BadRequestError(
                f"Email '{email}' is already registered", code="DUPLICATE_EMAIL"
            ) from exc
        except InvalidEmailError as exc:
            raise BadRequestError(
                f"'{email}' is not a valid email address", code="INVALID_EMAIL"
            ) from exc

        try:
            user = await UserRepository.create(
                self._db,
                user_id=uid,
                email=email,
                first_name=first_name,
                last_name=last_name,
                roles=roles,
                nif=nif,
                created_by_id=created_by_id,
            )
            await self._db.commit()
        except Exception as exc:
            await self._db.rollback()
            await self._compensate_account(uid)
            if isinstance(exc, IntegrityError):
                raise BadRequestError(
                    f"Email '{email}' is already registered", code="DUPLICATE_EMAIL"
                ) from exc
            raise

        logger.info("Registered user %s with roles %s", uid, sorted(set(roles)))
        return user

    async def _compensate_account(self, uid: str) -> None:
        """Undo phase 1 of registration by deleting the identity account."""
        logger.warning("Local record for %s failed; deleting identity account", uid)
        try:
            await self._identity.delete_accounts([uid])
        except Exception:
            logger.exception(
                "Compensation failed: identity account %s is orphaned "
                "and must be removed manually",
                uid,
            )

    async def update(
        self,
        user_id: str,
        *,
        roles: Sequence[str] | None = None,
        **fields: str | None,
    ) -> User | None:
        """Apply a partial update; role changes also update token claims.

        Args:
            user_id: User to update.
            roles: Replacement role set; None leaves roles unchanged.
            **fields: Profile fields the client sent (first_name,
                last_name, nif).

        Returns:
            Updated User, or None if it does not exist.
        """
        user = await UserRepository.get_by_id(self._db, user_id)
        if user is None:
            return None

        if fields:
            user = await UserRepository.update(self._db, user_id, **fields)
        if roles is not None:
            user = await UserRepository.set_roles(self._db, user_id, roles)
            try:
                await self._identity.set_roles(user_id, roles)
            except AccountNotFoundError:
                logger.warning(
                    "User %s has no identity account; roles updated locally only",
                    user_id,
                )
        return user

    async def delete_many(self, user_ids: Collection[str]) -> int:
        """Delete local records, commit, then delete the identity accounts.

        Records the users created survive with no creator. Accounts are only
        removed once the local deletion is durable; if the provider call
        then fails, the error propagates and the leftover uids are logged.

        Returns:
            Number of users actually deleted.
        """
        deleted = await UserRepository.delete_many(self._db, user_ids)
        await self._db.commit()
        logger.info("Deleted %d of %d requested users", len(deleted), len(user_ids))

        if deleted:
            try:
                await self._identity.delete_accounts(deleted)
            except Exception:
                logger.exception(
                    "Identity accounts %s outlived their local records "
                    "and must be removed manually",
                    deleted,
                )
                raise
        return len(deleted)

    async def ensure_admin(self, *, email: str, password: str) -> User:
        """Make sure an admin with this email can sign in.

        With no local record, the admin is registered through the normal
        saga. With a local record but no identity account (the local
        provider forgets accounts on restart), the account is recreated
        under the existing uid with the stored roles.

        Args:
            email: Login email of the bootstrap admin.
            password: Password for a newly created account. An existing
                account keeps its password.

        Returns:
            The admin's local User.

        Raises:
            BadRequestError: DUPLICATE_EMAIL if the provider knows the email
                under another uid and no local record exists.
        """
        user = await UserRepository.get_by_email(self._db, email)
        if user is None:
            return await self.create(
                email=email,
                password=password,
                first_name="Bootstrap",
                last_name="Admin",
                roles=[Role.ADMIN.value],
            )

        try:
            await self._identity.create_account(
                email=user.email,
                password=password,
                display_name=f"{user.first_name} {user.last_name}",
                roles=user.roles,
                uid=user.id,
            )
        except (EmailAlreadyExistsError, AccountAlreadyExistsError):
            logger.debug("Bootstrap admin %s already has an identity account", user.id)
        else:
            logger.info("Recreated identity account for bootstrap admin %s", user.id)
        return user
