"""Count + page-fetch helper shared by the repositories.

Listing always issues two statements in the caller's session: a COUNT over
the filtered set and a SELECT of one page ordered by primary key. They are
not snapshot-consistent; a write committed between the two may make the
total disagree with the fetched page by the size of that write.
"""

from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.base import ExecutableOption

from stockroom.core.pagination import Pagination

ModelT = TypeVar("ModelT")


async def fetch_page(
    db: AsyncSession,
    model: type[ModelT],
    *,
    where: Sequence[ColumnElement[bool]],
    order_by: InstrumentedAttribute[Any],
    pagination: Pagination,
    options: Sequence[ExecutableOption] = (),
) -> tuple[list[ModelT], int]:
    """Fetch one page of rows plus the total matching count.

    Args:
        db: Async database session.
        model: Mapped class to select.
        where: Filter clauses (AND-combined).
        order_by: Column giving a stable order across pages.
        pagination: Offset/limit window.
        options: Loader options for the page query.

    Returns:
        Tuple of (rows on this page, total matching rows).
    """
    count_stmt = select(func.count()).select_from(model).where(*where)
    total = (await db.execute(count_stmt)).scalar_one()

    page_stmt = (
        select(model)
        .where(*where)
        .order_by(order_by)
        .offset(pagination.offset)
        .limit(pagination.limit)
        .options(*options)
    )
    rows = (await db.execute(page_stmt)).scalars().all()
    return list(rows), total
