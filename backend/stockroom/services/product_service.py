"""Product service: CRUD operations.

Products reference categories (many-to-many) and, optionally, one supplier.
References are checked before the write so an unknown id is reported as
UNKNOWN_REFERENCE rather than surfacing as a foreign-key failure.
"""

import logging
from collections.abc import Collection

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.errors import BadRequestError
from stockroom.core.filtering import normalize_search_term
from stockroom.core.pagination import Pagination
from stockroom.models.category import Category
from stockroom.models.product import Product
from stockroom.repositories.category_repository import CategoryRepository
from stockroom.repositories.product_repository import ProductRepository
from stockroom.repositories.supplier_repository import SupplierRepository

logger = logging.getLogger(__name__)


class ProductService:
    """Business operations on products.

    Args:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_products(
        self,
        *,
        pagination: Pagination,
        search: str | None = None,
        category_id: int | None = None,
        supplier_id: int | None = None,
        created_by_id: str | None = None,
    ) -> tuple[list[Product], int]:
        """List products with optional name, category and supplier filters.

        Returns:
            Tuple of (products on this page, total matching).
        """
        return await ProductRepository.list_paginated(
            self._db,
            pagination=pagination,
            search=normalize_search_term(search),
            category_id=category_id,
            supplier_id=supplier_id,
            created_by_id=created_by_id,
        )

    async def get_by_id(self, product_id: int) -> Product | None:
        return await ProductRepository.get_by_id(self._db, product_id)

    async def _resolve_categories(self, category_ids: Collection[int]) -> list[Category]:
        """Load categories by id, rejecting any id that does not exist."""
        wanted = set(category_ids)
        categories = await CategoryRepository.get_many(self._db, wanted)
        missing = wanted - {c.id for c in categories}
        if missing:
            raise BadRequestError(
                "Unknown category id(s)",
                code="UNKNOWN_REFERENCE",
                details=[{"field": "category_ids", "ids": sorted(missing)}],
            )
        return sorted(categories, key=lambda c: c.id)

    async def _check_supplier(self, supplier_id: int | None) -> None:
        if supplier_id is None:
            return
        if await SupplierRepository.get_by_id(self._db, supplier_id) is None:
            raise BadRequestError(
                f"Unknown supplier id {supplier_id}",
                code="UNKNOWN_REFERENCE",
                details=[{"field": "supplier_id", "ids": [supplier_id]}],
            )

    async def create(
        self,
        *,
        name: str,
        quantity: int,
        category_ids: Collection[int],
        supplier_id: int | None,
        created_by_id: str | None,
    ) -> Product:
        """Register a product.

        Raises:
            BadRequestError: UNKNOWN_REFERENCE for a missing category or
                supplier, CONSTRAINT_VIOLATION if the store rejects the row.
        """
        categories = await self._resolve_categories(category_ids)
        await self._check_supplier(supplier_id)
        try:
            return await ProductRepository.create(
                self._db,
                name=name,
                quantity=quantity,
                categories=categories,
                supplier_id=supplier_id,
                created_by_id=created_by_id,
            )
        except IntegrityError as exc:
            await self._db.rollback()
            logger.info("Product create rejected by store: %s", exc.orig)
            raise BadRequestError(
                "Product violates a store constraint", code="CONSTRAINT_VIOLATION"
            ) from exc

    async def update(
        self,
        product_id: int,
        *,
        category_ids: Collection[int] | None = None,
        **fields: str | int | None,
    ) -> Product | None:
        """Apply a partial update.

        Args:
            product_id: Product to update.
            category_ids: Replacement category set; None leaves it as is.
            **fields: Scalar fields the client sent. ``supplier_id=None``
                detaches the supplier.

        Returns:
            Updated Product, or None if it does not exist.

        Raises:
            BadRequestError: UNKNOWN_REFERENCE or CONSTRAINT_VIOLATION.
        """
        if await ProductRepository.get_by_id(self._db, product_id) is None:
            return None

        categories = None
        if category_ids is not None:
            categories = await self._resolve_categories(category_ids)
        if "supplier_id" in fields:
            supplier_id = fields["supplier_id"]
            await self._check_supplier(supplier_id if isinstance(supplier_id, int) else None)

        try:
            return await ProductRepository.update(
                self._db, product_id, categories=categories, **fields
            )
        except IntegrityError as exc:
            await self._db.rollback()
            logger.info("Product update rejected by store: %s", exc.orig)
            raise BadRequestError(
                "Product violates a store constraint", code="CONSTRAINT_VIOLATION"
            ) from exc

    async def delete_many(self, product_ids: Collection[int]) -> int:
        """Delete products and their category links.

        Returns:
            Number of products actually deleted.
        """
        count = await ProductRepository.delete_many(self._db, product_ids)
        logger.info("Deleted %d of %d requested products", count, len(product_ids))
        return count
