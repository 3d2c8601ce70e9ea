"""Repository for Product CRUD operations.

Products load their categories and supplier eagerly (selectin) so the
projection can be built without lazy loads on the async session.
"""

from collections.abc import Collection

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.filtering import text_search_clause
from stockroom.core.pagination import Pagination
from stockroom.models.category import Category
from stockroom.models.product import Product
from stockroom.repositories.paging import fetch_page

# Columns matched by the free-text ``filter`` parameter
_SEARCH_COLUMNS = (Product.name,)

# Scalar fields that may be updated via ProductRepository.update().
# Security: Never add 'id', 'created_by_id', 'created_at', or 'updated_at'.
_UPDATABLE_FIELDS: frozenset[str] = frozenset({"name", "quantity", "supplier_id"})


class ProductRepository:
    """Stateless repository for Product table operations."""

    @staticmethod
    async def get_by_id(db: AsyncSession, product_id: int) -> Product | None:
        """Fetch a product by primary key, refreshing any cached copy."""
        stmt = (
            select(Product)
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_paginated(
        db: AsyncSession,
        *,
        pagination: Pagination,
        search: str | None = None,
        category_id: int | None = None,
        supplier_id: int | None = None,
        created_by_id: str | None = None,
    ) -> tuple[list[Product], int]:
        """List products, optionally filtered.

        Args:
            db: Async database session.
            pagination: Page window.
            search: Case-insensitive substring matched against the name.
            category_id: Only products linked to this category.
            supplier_id: Only products from this supplier.
            created_by_id: Only products created by this user.

        Returns:
            Tuple of (products on this page, total matching).
        """
        where = [text_search_clause(search, _SEARCH_COLUMNS)]
        if category_id is not None:
            where.append(Product.categories.any(Category.id == category_id))
        if supplier_id is not None:
            where.append(Product.supplier_id == supplier_id)
        if created_by_id is not None:
            where.append(Product.created_by_id == created_by_id)
        return await fetch_page(
            db, Product, where=where, order_by=Product.id, pagination=pagination
        )

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        quantity: int = 0,
        categories: Collection[Category] = (),
        supplier_id: int | None = None,
        created_by_id: str | None = None,
    ) -> Product:
        """Create a new product linked to the given categories.

        Raises:
            sqlalchemy.exc.IntegrityError: On a constraint violation.
        """
        product = Product(
            name=name,
            quantity=quantity,
            categories=list(categories),
            supplier_id=supplier_id,
            created_by_id=created_by_id,
        )
        db.add(product)
        await db.flush()
        # Reload so relationships reflect the flushed row
        stmt = (
            select(Product)
            .where(Product.id == product.id)
            .execution_options(populate_existing=True)
        )
        return (await db.execute(stmt)).scalar_one()

    @staticmethod
    async def update(
        db: AsyncSession,
        product_id: int,
        *,
        categories: Collection[Category] | None = None,
        **kwargs: str | int | None,
    ) -> Product | None:
        """Update product fields and, optionally, replace its categories.

        Args:
            db: Async database session.
            product_id: Product to update.
            categories: New category set; None leaves links unchanged.
            **kwargs: Scalar field names and values (see _UPDATABLE_FIELDS).

        Returns:
            Updated Product if found, None if it does not exist.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        unknown = set(kwargs) - _UPDATABLE_FIELDS
        if unknown:
            msg = f"Unknown fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        product = await ProductRepository.get_by_id(db, product_id)
        if product is None:
            return None

        for field, value in kwargs.items():
            setattr(product, field, value)
        if categories is not None:
            product.categories = list(categories)

        await db.flush()
        return await ProductRepository.get_by_id(db, product_id)

    @staticmethod
    async def delete_many(db: AsyncSession, product_ids: Collection[int]) -> int:
        """Delete products by id.

        Returns:
            Number of products actually deleted.
        """
        if not product_ids:
            return 0
        result = await db.execute(delete(Product).where(Product.id.in_(set(product_ids))))
        return result.rowcount
