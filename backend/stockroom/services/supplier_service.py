"""Supplier service: CRUD operations."""

import logging
from collections.abc import Collection

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.errors import BadRequestError
from stockroom.core.filtering import normalize_search_term
from stockroom.core.pagination import Pagination
from stockroom.models.supplier import Supplier
from stockroom.repositories.supplier_repository import SupplierRepository

logger = logging.getLogger(__name__)


def _constraint_violation(nif: str | None, exc: IntegrityError) -> BadRequestError:
    """Describe a rejected write from the tax id the client sent, if any."""
    logger.info("Supplier write rejected by store: %s", exc.orig)
    if nif is None:
        message = "Supplier write violates a store constraint"
    else:
        message = f"A supplier with tax id '{nif}' already exists"
    return BadRequestError(message, code="CONSTRAINT_VIOLATION")


class SupplierService:
    """Business operations on suppliers.

    Args:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_suppliers(
        self,
        *,
        pagination: Pagination,
        search: str | None = None,
        created_by_id: str | None = None,
    ) -> tuple[list[Supplier], int]:
        """List suppliers whose name or tax id matches an optional filter."""
        return await SupplierRepository.list_paginated(
            self._db,
            pagination=pagination,
            search=normalize_search_term(search),
            created_by_id=created_by_id,
        )

    async def get_by_id(self, supplier_id: int) -> Supplier | None:
        return await SupplierRepository.get_by_id(self._db, supplier_id)

    async def create(
        self, *, name: str, nif: str | None, created_by_id: str | None
    ) -> Supplier:
        """Register a supplier.

        Raises:
            BadRequestError: CONSTRAINT_VIOLATION if the tax id is taken.
        """
        try:
            return await SupplierRepository.create(
                self._db, name=name, nif=nif, created_by_id=created_by_id
            )
        except IntegrityError as exc:
            await self._db.rollback()
            raise _constraint_violation(nif, exc) from exc

    async def update(self, supplier_id: int, **fields: str | None) -> Supplier | None:
        """Apply a partial update.

        Args:
            supplier_id: Supplier to update.
            **fields: Only the fields the client sent. An explicit None for
                ``nif`` clears it.

        Returns:
            Updated Supplier, or None if it does not exist.

        Raises:
            BadRequestError: CONSTRAINT_VIOLATION if the new tax id is taken.
        """
        try:
            return await SupplierRepository.update(self._db, supplier_id, **fields)
        except IntegrityError as exc:
            await self._db.rollback()
            raise _constraint_violation(fields.get("nif"), exc) from exc

    async def delete_many(self, supplier_ids: Collection[int]) -> int:
        """Delete suppliers; their products are kept without a supplier.

        Returns:
            Number of suppliers actually deleted.
        """
        count = await SupplierRepository.delete_many(self._db, supplier_ids)
        logger.info("Deleted %d of %d requested suppliers", count, len(supplier_ids))
        return count
