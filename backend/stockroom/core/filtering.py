"""Filtering helpers for collection endpoints.

Free-text search:
    - `?filter=john` - case-insensitive substring match across a fixed set
      of columns per resource (OR across columns)

Categorical filters (resource specific) are AND-combined with the text
predicate by the repositories:
    - `/users?role=admin`
    - `/products?category_id=3&supplier_id=7`

Example:
    GET /users?filter=john&role=employee&page=2&pageSize=10
"""

from collections.abc import Sequence

from sqlalchemy import ColumnElement, false, or_, true
from sqlalchemy.orm import InstrumentedAttribute

# Longest accepted free-text filter; longer input is truncated
MAX_FILTER_LENGTH = 255


def normalize_search_term(value: str | None) -> str | None:
    """Trim a free-text filter and treat blank input as no filter.

    Args:
        value: Raw ``filter`` query string.

    Returns:
        Trimmed term (at most MAX_FILTER_LENGTH characters), or None.

    Examples:
        >>> normalize_search_term("  john ")
        'john'

        >>> normalize_search_term("   ") is None
        True
    """
    if value is None:
        return None
    term = value.strip()[:MAX_FILTER_LENGTH]
    return term or None


def text_search_clause(
    term: str | None,
    columns: Sequence[InstrumentedAttribute[str] | InstrumentedAttribute[str | None]],
) -> ColumnElement[bool]:
    """Build a case-insensitive substring predicate over several columns.

    LIKE wildcards in the term are escaped so ``%`` and ``_`` match
    literally.

    Args:
        term: Search term, already normalized. None matches everything.
        columns: Columns to search (OR-combined).

    Returns:
        SQL boolean expression usable in ``.where()``.
    """
    if term is None:
        return true()
    if not columns:
        return false()
    return or_(*(column.icontains(term, autoescape=True) for column in columns))
