"""Category service: CRUD operations.

Services flush but do not commit; routes commit once the service returns.
Constraint violations raised by the flush are rolled back and reported as
BadRequestError so the client sees a 400 instead of a 500.
"""

import logging
from collections.abc import Collection

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.errors import BadRequestError
from stockroom.core.filtering import normalize_search_term
from stockroom.core.pagination import Pagination
from stockroom.models.category import Category
from stockroom.repositories.category_repository import CategoryRepository

logger = logging.getLogger(__name__)


class CategoryService:
    """Business operations on categories.

    Args:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_categories(
        self,
        *,
        pagination: Pagination,
        search: str | None = None,
        created_by_id: str | None = None,
    ) -> tuple[list[Category], int]:
        """List categories matching an optional name filter.

        Returns:
            Tuple of (categories on this page, total matching).
        """
        return await CategoryRepository.list_paginated(
            self._db,
            pagination=pagination,
            search=normalize_search_term(search),
            created_by_id=created_by_id,
        )

    async def get_by_id(self, category_id: int) -> Category | None:
        return await CategoryRepository.get_by_id(self._db, category_id)

    async def create(self, *, name: str, created_by_id: str | None) -> Category:
        """Create a category.

        Raises:
            BadRequestError: CONSTRAINT_VIOLATION if the name is taken.
        """
        try:
            return await CategoryRepository.create(
                self._db, name=name, created_by_id=created_by_id
            )
        except IntegrityError as exc:
            await self._db.rollback()
            logger.info("Category create rejected by store: %s", exc.orig)
            raise BadRequestError(
                f"Category '{name}' already exists", code="CONSTRAINT_VIOLATION"
            ) from exc

    async def update(self, category_id: int, *, name: str) -> Category | None:
        """Rename a category.

        Returns:
            Updated Category, or None if it does not exist.

        Raises:
            BadRequestError: CONSTRAINT_VIOLATION if the new name is taken.
        """
        try:
            return await CategoryRepository.update(self._db, category_id, name=name)
        except IntegrityError as exc:
            await self._db.rollback()
            raise BadRequestError(
                f"Category '{name}' already exists", code="CONSTRAINT_VIOLATION"
            ) from exc

    async def delete_many(self, category_ids: Collection[int]) -> int:
        """Delete categories; product links are removed with them.

        Returns:
            Number of categories actually deleted.
        """
        count = await CategoryRepository.delete_many(self._db, category_ids)
        logger.info("Deleted %d of %d requested categories", count, len(category_ids))
        return count
