"""Pagination utilities.

Query parameters: page (default 1), pageSize (default 20, max 100).

Absent or non-positive values fall back to the defaults instead of failing
the request, and oversized pages are clamped to the ceiling. A page past the
last record is not an error; it simply returns no data.
"""

from dataclasses import dataclass

from fastapi import Query

from stockroom.core.config import settings

DEFAULT_PAGE = 1


@dataclass(frozen=True)
class Pagination:
    """Resolved pagination window.

    Attributes:
        current_page: Current page number (1-indexed).
        page_size: Number of items per page.
    """

    current_page: int
    page_size: int

    @property
    def past_records_count(self) -> int:
        """Number of records on the pages before this one."""
        return (self.current_page - 1) * self.page_size

    @property
    def offset(self) -> int:
        """SQL OFFSET for database queries (0 for page 1)."""
        return self.past_records_count

    @property
    def limit(self) -> int:
        """SQL LIMIT for database queries (same as page_size)."""
        return self.page_size


def compute_pagination(
    page: int | None,
    page_size: int | None,
    *,
    default_page_size: int | None = None,
    max_page_size: int | None = None,
) -> Pagination:
    """Convert a requested page/size into a pagination window.

    Pure function: no I/O and no exceptions for out-of-range input.

    Args:
        page: Requested page number. None or < 1 resolves to page 1.
        page_size: Requested page size. None or < 1 resolves to the default;
            values above the ceiling are clamped to it.
        default_page_size: Override for settings.default_page_size.
        max_page_size: Override for settings.max_page_size.

    Returns:
        Pagination with current_page, page_size and past_records_count.

    Examples:
        >>> compute_pagination(2, 10).past_records_count
        10
        >>> compute_pagination(None, 0).page_size
        20
    """
    default_size = default_page_size or settings.default_page_size
    ceiling = max_page_size or settings.max_page_size

    resolved_page = page if page is not None and page >= 1 else DEFAULT_PAGE
    if page_size is None or page_size < 1:
        resolved_size = default_size
    else:
        resolved_size = page_size

    return Pagination(current_page=resolved_page, page_size=min(resolved_size, ceiling))


def pagination_params(
    page: int | None = Query(default=None, description="Page number (1-indexed)"),
    page_size: int | None = Query(
        default=None,
        alias="pageSize",
        description="Items per page (default 20, max 100)",
    ),
) -> Pagination:
    """FastAPI dependency for pagination query parameters.

    Usage:
        @router.get("")
        async def list_items(pagination: Pagination = Depends(pagination_params)):
            records, total = await service.list(pagination=pagination)
            ...

    Args:
        page: Raw page query parameter.
        page_size: Raw pageSize query parameter.

    Returns:
        Pagination resolved through compute_pagination().
    """
    return compute_pagination(page, page_size)
