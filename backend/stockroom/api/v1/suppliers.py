"""Suppliers API router.

Reads and writes require the admin or employee role.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from stockroom.api.deps import DbSession, Paging, StaffPrincipal
from stockroom.core.errors import NotFoundError, ValidationError
from stockroom.core.responses import DataResponse, ListResponse
from stockroom.schemas.bulk import BulkDeleteRequest, BulkDeleteResult
from stockroom.schemas.supplier import SupplierCreate, SupplierRead, SupplierUpdate
from stockroom.services.supplier_service import SupplierService

router = APIRouter()

SearchFilter = Annotated[
    str | None,
    Query(alias="filter", description="Case-insensitive match on name or tax id"),
]


@router.get("")
async def list_suppliers(
    _principal: StaffPrincipal,
    db: DbSession,
    pagination: Paging,
    search: SearchFilter = None,
) -> ListResponse[SupplierRead]:
    """List suppliers with pagination and optional text filter."""
    records, total = await SupplierService(db).list_suppliers(
        pagination=pagination, search=search
    )
    return ListResponse.paginated(
        [SupplierRead.model_validate(r) for r in records], total, pagination
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_supplier(
    principal: StaffPrincipal,
    db: DbSession,
    body: SupplierCreate,
) -> DataResponse[SupplierRead]:
    """Register a supplier owned by the caller."""
    supplier = await SupplierService(db).create(
        name=body.name, nif=body.nif, created_by_id=principal.uid
    )
    await db.commit()
    return DataResponse(data=SupplierRead.model_validate(supplier))


@router.post("/bulk-delete")
async def bulk_delete_suppliers(
    _principal: StaffPrincipal,
    db: DbSession,
    body: BulkDeleteRequest,
) -> DataResponse[BulkDeleteResult]:
    """Delete suppliers by id. Their products lose the supplier link."""
    count = await SupplierService(db).delete_many(body.ids)
    await db.commit()
    return DataResponse(data=BulkDeleteResult(count=count))


@router.get("/{supplier_id}")
async def get_supplier(
    _principal: StaffPrincipal,
    db: DbSession,
    supplier_id: int,
) -> DataResponse[SupplierRead]:
    """Get a supplier by id."""
    supplier = await SupplierService(db).get_by_id(supplier_id)
    if supplier is None:
        raise NotFoundError("Supplier", str(supplier_id))
    return DataResponse(data=SupplierRead.model_validate(supplier))


@router.patch("/{supplier_id}")
async def update_supplier(
    _principal: StaffPrincipal,
    db: DbSession,
    supplier_id: int,
    body: SupplierUpdate,
) -> DataResponse[SupplierRead]:
    """Partially update a supplier. ``nif: null`` clears the tax id."""
    fields = body.model_dump(exclude_unset=True)
    if "name" in fields and fields["name"] is None:
        raise ValidationError(
            "Request validation failed",
            details=[{"loc": ["body", "name"], "msg": "name cannot be null"}],
        )
    supplier = await SupplierService(db).update(supplier_id, **fields)
    if supplier is None:
        raise NotFoundError("Supplier", str(supplier_id))
    await db.commit()
    return DataResponse(data=SupplierRead.model_validate(supplier))
