"""Repository for Supplier CRUD operations."""

from collections.abc import Collection

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.filtering import text_search_clause
from stockroom.core.pagination import Pagination
from stockroom.models.supplier import Supplier
from stockroom.repositories.paging import fetch_page

# Columns matched by the free-text ``filter`` parameter
_SEARCH_COLUMNS = (Supplier.name, Supplier.nif)

# Fields that may be updated via SupplierRepository.update().
# Security: Never add 'id', 'created_by_id', 'created_at', or 'updated_at'.
_UPDATABLE_FIELDS: frozenset[str] = frozenset({"name", "nif"})


class SupplierRepository:
    """Stateless repository for Supplier table operations."""

    @staticmethod
    async def get_by_id(db: AsyncSession, supplier_id: int) -> Supplier | None:
        """Fetch a supplier by primary key, refreshing any cached copy."""
        stmt = (
            select(Supplier)
            .where(Supplier.id == supplier_id)
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
        created_by_id: str | None = None,
    ) -> tuple[list[Supplier], int]:
        """List suppliers, matching ``search`` against name and tax id.

        Returns:
            Tuple of (suppliers on this page, total matching).
        """
        where = [text_search_clause(search, _SEARCH_COLUMNS)]
        if created_by_id is not None:
            where.append(Supplier.created_by_id == created_by_id)
        return await fetch_page(
            db, Supplier, where=where, order_by=Supplier.id, pagination=pagination
        )

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        nif: str | None = None,
        created_by_id: str | None = None,
    ) -> Supplier:
        """Create a new supplier.

        Raises:
            sqlalchemy.exc.IntegrityError: If the tax id already exists.
        """
        supplier = Supplier(name=name, nif=nif, created_by_id=created_by_id)
        db.add(supplier)
        await db.flush()
        # Reload so relationships reflect the flushed row
        stmt = (
            select(Supplier)
            .where(Supplier.id == supplier.id)
            .execution_options(populate_existing=True)
        )
        return (await db.execute(stmt)).scalar_one()

    @staticmethod
    async def update(
        db: AsyncSession, supplier_id: int, **kwargs: str | None
    ) -> Supplier | None:
        """Update supplier fields.

        Only fields in _UPDATABLE_FIELDS are allowed.

        Returns:
            Updated Supplier if found, None if it does not exist.

        Raises:
            ValueError: If an unknown field name is passed.
            sqlalchemy.exc.IntegrityError: If the new tax id already exists.
        """
        unknown = set(kwargs) - _UPDATABLE_FIELDS
        if unknown:
            msg = f"Unknown fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        supplier = await db.get(Supplier, supplier_id)
        if supplier is None:
            return None

        for field, value in kwargs.items():
            setattr(supplier, field, value)

        await db.flush()
        return await SupplierRepository.get_by_id(db, supplier_id)

    @staticmethod
    async def delete_many(db: AsyncSession, supplier_ids: Collection[int]) -> int:
        """Delete suppliers by id.

        Products keep existing with supplier_id set to NULL.

        Returns:
            Number of suppliers actually deleted.
        """
        if not supplier_ids:
            return 0
        result = await db.execute(
            delete(Supplier).where(Supplier.id.in_(set(supplier_ids)))
        )
        return result.rowcount
