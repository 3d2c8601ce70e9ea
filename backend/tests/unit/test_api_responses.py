"""Tests for response envelope models."""

from stockroom.core.pagination import Pagination
from stockroom.core.responses import (
    DataResponse,
    ErrorDetail,
    ErrorResponse,
    ListResponse,
    PaginationMeta,
)


class TestPaginationMeta:
    """Tests for PaginationMeta."""

    def test_total_pages_rounds_up(self):
        """25 items at 10 per page is 3 pages."""
        meta = PaginationMeta(total=25, page=1, page_size=10)
        assert meta.total_pages == 3

    def test_total_pages_zero_when_empty(self):
        """No items means no pages."""
        assert PaginationMeta(total=0, page=1, page_size=20).total_pages == 0

    def test_serializes_camel_case(self):
        """Metadata keys match the query parameter names."""
        meta = PaginationMeta(total=5, page=2, page_size=2)
        assert meta.model_dump(by_alias=True) == {
            "total": 5,
            "page": 2,
            "pageSize": 2,
            "totalPages": 3,
        }


class TestListResponse:
    """Tests for ListResponse."""

    def test_paginated_builds_metadata(self):
        """paginated() copies the window into _metadata."""
        response = ListResponse.paginated(
            ["a", "b"], 12, Pagination(current_page=2, page_size=2)
        )
        body = response.model_dump(by_alias=True)
        assert body["data"] == ["a", "b"]
        assert body["_metadata"] == {
            "total": 12,
            "page": 2,
            "pageSize": 2,
            "totalPages": 6,
        }

    def test_accepts_alias_on_input(self):
        """Envelope can be rebuilt from its own serialized form."""
        body = {"_metadata": {"total": 1, "page": 1, "pageSize": 20}, "data": [1]}
        response = ListResponse[int].model_validate(body)
        assert response.meta.total == 1
        assert response.data == [1]


class TestDataAndErrorResponses:
    """Tests for single-record and error envelopes."""

    def test_data_response_wraps_payload(self):
        """Single records are wrapped in a data key."""
        assert DataResponse(data={"count": 2}).model_dump() == {"data": {"count": 2}}

    def test_error_response_shape(self):
        """Errors carry code, message and optional details."""
        body = ErrorResponse(
            error=ErrorDetail(code="NOT_FOUND", message="Category not found")
        ).model_dump()
        assert body == {
            "error": {"code": "NOT_FOUND", "message": "Category not found", "details": None}
        }
