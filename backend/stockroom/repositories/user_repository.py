"""Repository for User CRUD operations.

Users are keyed by identity-provider uid. Roles are stored as one
user_roles row per role and exposed through ``User.roles``.
"""

from collections.abc import Collection, Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from stockroom.core.filtering import text_search_clause
from stockroom.core.pagination import Pagination
from stockroom.models.user import User, UserRole
from stockroom.repositories.paging import fetch_page

# Columns matched by the free-text ``filter`` parameter
_SEARCH_COLUMNS = (User.email, User.nif, User.first_name, User.last_name)

# Fields that may be updated via UserRepository.update().
# Security: Never add 'id', 'email', 'created_by_id', 'created_at', or
# 'updated_at'. Roles change only through set_roles().
_UPDATABLE_FIELDS: frozenset[str] = frozenset({"first_name", "last_name", "nif"})

# Loads the user's roles plus the creator summary (and the creator's roles)
_PROJECTION_OPTIONS = (
    selectinload(User.role_links),
    selectinload(User.created_by).selectinload(User.role_links),
)


class UserRepository:
    """Stateless repository for User table operations.

    All methods are static with no instance state. Pass an AsyncSession
    for every call so the caller controls transaction boundaries.
    """

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str) -> User | None:
        """Fetch a user by uid with roles and creator loaded.

        Args:
            db: Async database session.
            user_id: Identity-provider uid.

        Returns:
            User if found, None otherwise.
        """
        stmt = (
            select(User)
            .where(User.id == user_id)
            .options(*_PROJECTION_OPTIONS)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Fetch a user by email address (case-insensitive).

        Args:
            db: Async database session.
            email: Email address to look up.

        Returns:
            User if found, None otherwise.
        """
        stmt = (
            select(User)
            .where(User.email == email.lower())
            .options(*_PROJECTION_OPTIONS)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_paginated(
        db: AsyncSession,
        *,
        pagination: Pagination,
        search: str | None = None,
        role: str | None = None,
    ) -> tuple[list[User], int]:
        """List users, optionally filtered.

        Args:
            db: Async database session.
            pagination: Page window.
            search: Case-insensitive substring matched against email, tax
                id, first name and last name.
            role: Only users holding this role.

        Returns:
            Tuple of (users on this page, total matching).
        """
        where = [text_search_clause(search, _SEARCH_COLUMNS)]
        if role is not None:
            where.append(User.role_links.any(UserRole.role == role))
        return await fetch_page(
            db,
            User,
            where=where,
            order_by=User.id,
            pagination=pagination,
            options=_PROJECTION_OPTIONS,
        )

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        user_id: str,
        email: str,
        first_name: str,
        last_name: str,
        roles: Iterable[str],
        nif: str | None = None,
        created_by_id: str | None = None,
    ) -> User:
        """Create a local user record for an identity-provider account.

        Email is normalized to lowercase before storage.

        Args:
            db: Async database session.
            user_id: uid returned by the identity provider.
            email: User email address.
            first_name: Given name.
            last_name: Family name.
            roles: Role tags to assign.
            nif: Tax identification number.
            created_by_id: uid of the user performing the registration.

        Returns:
            Created User with roles and creator loaded.

        Raises:
            sqlalchemy.exc.IntegrityError: If the uid or email already exists.
        """
        user = User(
            id=user_id,
            email=email.lower(),
            first_name=first_name,
            last_name=last_name,
            nif=nif,
            created_by_id=created_by_id,
            role_links=[UserRole(role=role) for role in sorted(set(roles))],
        )
        db.add(user)
        await db.flush()
        # Reload so roles and creator reflect the flushed row
        stmt = (
            select(User)
            .where(User.id == user_id)
            .options(*_PROJECTION_OPTIONS)
            .execution_options(populate_existing=True)
        )
        return (await db.execute(stmt)).scalar_one()

    @staticmethod
    async def update(db: AsyncSession, user_id: str, **kwargs: str | None) -> User | None:
        """Update user profile fields.

        Only fields in _UPDATABLE_FIELDS are allowed. Unknown field names
        raise ValueError.

        Returns:
            Updated User if found, None if user does not exist.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        unknown = set(kwargs) - _UPDATABLE_FIELDS
        if unknown:
            msg = f"Unknown fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        user = await UserRepository.get_by_id(db, user_id)
        if user is None:
            return None

        for field, value in kwargs.items():
            setattr(user, field, value)

        await db.flush()
        return await UserRepository.get_by_id(db, user_id)

    @staticmethod
    async def set_roles(db: AsyncSession, user_id: str, roles: Iterable[str]) -> User | None:
        """Replace a user's role set.

        Separated from update() so role changes are always explicit.

        Returns:
            Updated User if found, None if user does not exist.
        """
        user = await UserRepository.get_by_id(db, user_id)
        if user is None:
            return None

        wanted = set(roles)
        user.role_links = [link for link in user.role_links if link.role in wanted]
        held = {link.role for link in user.role_links}
        user.role_links.extend(UserRole(role=role) for role in sorted(wanted - held))

        await db.flush()
        return await UserRepository.get_by_id(db, user_id)

    @staticmethod
    async def delete_many(db: AsyncSession, user_ids: Collection[str]) -> list[str]:
        """Delete users by uid.

        Role rows go with the user (ON DELETE CASCADE). Records the user
        created are kept with created_by_id set to NULL.

        Returns:
            uids that existed and were deleted.
        """
        if not user_ids:
            return []
        existing = await db.execute(select(User.id).where(User.id.in_(set(user_ids))))
        found = sorted(existing.scalars().all())
        if not found:
            return []
        await db.execute(delete(User).where(User.id.in_(found)))
        return found
