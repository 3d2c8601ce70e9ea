"""Categories API router.

Reads and writes require the admin or employee role.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from stockroom.api.deps import DbSession, Paging, StaffPrincipal
from stockroom.core.errors import NotFoundError
from stockroom.core.responses import DataResponse, ListResponse
from stockroom.schemas.bulk import BulkDeleteRequest, BulkDeleteResult
from stockroom.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from stockroom.services.category_service import CategoryService

router = APIRouter()

SearchFilter = Annotated[
    str | None,
    Query(alias="filter", description="Case-insensitive match on name"),
]


@router.get("")
async def list_categories(
    _principal: StaffPrincipal,
    db: DbSession,
    pagination: Paging,
    search: SearchFilter = None,
) -> ListResponse[CategoryRead]:
    """List categories with pagination and optional name filter."""
    records, total = await CategoryService(db).list_categories(
        pagination=pagination, search=search
    )
    return ListResponse.paginated(
        [CategoryRead.model_validate(r) for r in records], total, pagination
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(
    principal: StaffPrincipal,
    db: DbSession,
    body: CategoryCreate,
) -> DataResponse[CategoryRead]:
    """Create a category owned by the caller."""
    category = await CategoryService(db).create(
        name=body.name, created_by_id=principal.uid
    )
    await db.commit()
    return DataResponse(data=CategoryRead.model_validate(category))


@router.post("/bulk-delete")
async def bulk_delete_categories(
    _principal: StaffPrincipal,
    db: DbSession,
    body: BulkDeleteRequest,
) -> DataResponse[BulkDeleteResult]:
    """Delete categories by id. Unknown ids are ignored."""
    count = await CategoryService(db).delete_many(body.ids)
    await db.commit()
    return DataResponse(data=BulkDeleteResult(count=count))


@router.get("/{category_id}")
async def get_category(
    _principal: StaffPrincipal,
    db: DbSession,
    category_id: int,
) -> DataResponse[CategoryRead]:
    """Get a category by id."""
    category = await CategoryService(db).get_by_id(category_id)
    if category is None:
        raise NotFoundError("Category", str(category_id))
    return DataResponse(data=CategoryRead.model_validate(category))


@router.patch("/{category_id}")
async def update_category(
    _principal: StaffPrincipal,
    db: DbSession,
    category_id: int,
    body: CategoryUpdate,
) -> DataResponse[CategoryRead]:
    """Rename a category."""
    category = await CategoryService(db).update(category_id, name=body.name)
    if category is None:
        raise NotFoundError("Category", str(category_id))
    await db.commit()
    return DataResponse(data=CategoryRead.model_validate(category))
