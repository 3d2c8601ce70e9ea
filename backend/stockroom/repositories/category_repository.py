"""Repository for Category CRUD operations."""

from collections.abc import Collection

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.filtering import text_search_clause
from stockroom.core.pagination import Pagination
from stockroom.models.category import Category
from stockroom.repositories.paging import fetch_page

# Columns matched by the free-text ``filter`` parameter
_SEARCH_COLUMNS = (Category.name,)


class CategoryRepository:
    """Stateless repository for Category table operations.

    All methods are static with no instance state. Pass an AsyncSession
    for every call so the caller controls transaction boundaries.
    """

    @staticmethod
    async def get_by_id(db: AsyncSession, category_id: int) -> Category | None:
        """Fetch a category by primary key, refreshing any cached copy.

        Args:
            db: Async database session.
            category_id: Integer primary key.

        Returns:
            Category if found, None otherwise.
        """
        stmt = (
            select(Category)
            .where(Category.id == category_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_many(db: AsyncSession, category_ids: Collection[int]) -> list[Category]:
        """Fetch all categories whose id is in category_ids.

        Unknown ids are silently absent from the result.
        """
        if not category_ids:
            return []
        stmt = select(Category).where(Category.id.in_(set(category_ids)))
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_paginated(
        db: AsyncSession,
        *,
        pagination: Pagination,
        search: str | None = None,
        created_by_id: str | None = None,
    ) -> tuple[list[Category], int]:
        """List categories, optionally filtered.

        Args:
            db: Async database session.
            pagination: Page window.
            search: Case-insensitive substring matched against the name.
            created_by_id: Only categories created by this user.

        Returns:
            Tuple of (categories on this page, total matching).
        """
        where = [text_search_clause(search, _SEARCH_COLUMNS)]
        if created_by_id is not None:
            where.append(Category.created_by_id == created_by_id)
        return await fetch_page(
            db, Category, where=where, order_by=Category.id, pagination=pagination
        )

    @staticmethod
    async def create(
        db: AsyncSession, *, name: str, created_by_id: str | None = None
    ) -> Category:
        """Create a new category.

        Raises:
            sqlalchemy.exc.IntegrityError: If the name already exists.
        """
        category = Category(name=name, created_by_id=created_by_id)
        db.add(category)
        await db.flush()
        # Reload so relationships reflect the flushed row
        stmt = (
            select(Category)
            .where(Category.id == category.id)
            .execution_options(populate_existing=True)
        )
        return (await db.execute(stmt)).scalar_one()

    @staticmethod
    async def update(db: AsyncSession, category_id: int, *, name: str) -> Category | None:
        """Rename a category.

        Returns:
            Updated Category if found, None if it does not exist.

        Raises:
            sqlalchemy.exc.IntegrityError: If the new name already exists.
        """
        category = await db.get(Category, category_id)
        if category is None:
            return None
        category.name = name
        await db.flush()
        return await CategoryRepository.get_by_id(db, category_id)

    @staticmethod
    async def delete_many(db: AsyncSession, category_ids: Collection[int]) -> int:
        """Delete categories by id.

        Product links are removed by the ON DELETE CASCADE on
        product_categories; the products themselves are kept.

        Returns:
            Number of categories actually deleted (unknown ids do not count).
        """
        if not category_ids:
            return 0
        result = await db.execute(
            delete(Category).where(Category.id.in_(set(category_ids)))
        )
        return result.rowcount
