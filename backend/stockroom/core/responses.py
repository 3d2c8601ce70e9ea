"""Response envelope models.

Consistent response format for all API endpoints:
- single resources: {"data": {...}}
- collections: {"_metadata": {...}, "data": [...]}
- errors: {"error": {"code", "message", "details"}}
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

from stockroom.core.pagination import Pagination

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata for collections.

    Serialized with camelCase keys to match the query parameters.

    Attributes:
        total: Total number of items across all pages.
        page: Current page number (1-indexed).
        page_size: Number of items per page.
    """

    model_config = ConfigDict(populate_by_name=True)

    total: int
    page: int
    page_size: int = Field(alias="pageSize")

    @computed_field(alias="totalPages")  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        """Calculate total number of pages.

        Returns:
            Number of pages needed to display all items.
            Returns 0 if total is 0.
        """
        if self.total == 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size


class DataResponse(BaseModel, Generic[T]):
    """Standard response envelope for single resources.

    Usage:
        @router.get("/categories/{id}")
        async def get_category(id: int) -> DataResponse[CategoryRead]:
            category = await service.get_by_id(id)
            return DataResponse(data=category)
    """

    data: T


class ListResponse(BaseModel, Generic[T]):
    """Standard response envelope for collections.

    Usage:
        @router.get("/categories")
        async def list_categories(
            pagination: Pagination = Depends(pagination_params),
        ) -> ListResponse[CategoryRead]:
            records, total = await service.list(pagination=pagination)
            return ListResponse.paginated(records, total, pagination)
    """

    model_config = ConfigDict(populate_by_name=True)

    meta: PaginationMeta = Field(alias="_metadata")
    data: list[T]

    @classmethod
    def paginated(
        cls, data: list[T], total: int, pagination: Pagination
    ) -> "ListResponse[T]":
        """Wrap one page of records with its pagination metadata.

        Args:
            data: Records on the current page.
            total: Total matching records across all pages.
            pagination: Window the records were fetched with.

        Returns:
            ListResponse ready to return from a route.
        """
        return cls(
            data=data,
            meta=PaginationMeta(
                total=total,
                page=pagination.current_page,
                page_size=pagination.page_size,
            ),
        )


class ErrorDetail(BaseModel):
    """Error detail for response body.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        details: Optional list of field-level errors (for validation).
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Standard error response envelope.

    Usage in exception handlers:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=ErrorDetail(code=exc.code, message=exc.message)
            ).model_dump(),
        )
    """

    error: ErrorDetail
