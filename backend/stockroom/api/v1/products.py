"""Products API router.

Reads and writes require the admin or employee role. The list endpoint
accepts ``category_id`` and ``supplier_id`` filters alongside ``filter``.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from stockroom.api.deps import DbSession, Paging, StaffPrincipal
from stockroom.core.errors import NotFoundError, ValidationError
from stockroom.core.responses import DataResponse, ListResponse
from stockroom.schemas.bulk import BulkDeleteRequest, BulkDeleteResult
from stockroom.schemas.product import ProductCreate, ProductRead, ProductUpdate
from stockroom.services.product_service import ProductService

router = APIRouter()

SearchFilter = Annotated[
    str | None,
    Query(alias="filter", description="Case-insensitive match on name"),
]
CategoryFilter = Annotated[
    int | None,
    Query(description="Only products in this category"),
]
SupplierFilter = Annotated[
    int | None,
    Query(description="Only products from this supplier"),
]

# PATCH fields that may not be explicitly null
_NON_NULLABLE = ("name", "quantity", "category_ids")


@router.get("")
async def list_products(
    _principal: StaffPrincipal,
    db: DbSession,
    pagination: Paging,
    search: SearchFilter = None,
    category_id: CategoryFilter = None,
    supplier_id: SupplierFilter = None,
) -> ListResponse[ProductRead]:
    """List products with pagination and optional filters."""
    records, total = await ProductService(db).list_products(
        pagination=pagination,
        search=search,
        category_id=category_id,
        supplier_id=supplier_id,
    )
    return ListResponse.paginated(
        [ProductRead.model_validate(r) for r in records], total, pagination
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    principal: StaffPrincipal,
    db: DbSession,
    body: ProductCreate,
) -> DataResponse[ProductRead]:
    """Register a product owned by the caller."""
    product = await ProductService(db).create(
        name=body.name,
        quantity=body.quantity,
        category_ids=body.category_ids,
        supplier_id=body.supplier_id,
        created_by_id=principal.uid,
    )
    await db.commit()
    return DataResponse(data=ProductRead.model_validate(product))


@router.post("/bulk-delete")
async def bulk_delete_products(
    _principal: StaffPrincipal,
    db: DbSession,
    body: BulkDeleteRequest,
) -> DataResponse[BulkDeleteResult]:
    """Delete products by id. Unknown ids are ignored."""
    count = await ProductService(db).delete_many(body.ids)
    await db.commit()
    return DataResponse(data=BulkDeleteResult(count=count))


@router.get("/{product_id}")
async def get_product(
    _principal: StaffPrincipal,
    db: DbSession,
    product_id: int,
) -> DataResponse[ProductRead]:
    """Get a product by id, with its categories and supplier."""
    product = await ProductService(db).get_by_id(product_id)
    if product is None:
        raise NotFoundError("Product", str(product_id))
    return DataResponse(data=ProductRead.model_validate(product))


@router.patch("/{product_id}")
async def update_product(
    _principal: StaffPrincipal,
    db: DbSession,
    product_id: int,
    body: ProductUpdate,
) -> DataResponse[ProductRead]:
    """Partially update a product.

    ``category_ids`` replaces the category set; ``supplier_id: null``
    detaches the supplier.
    """
    fields = body.model_dump(exclude_unset=True)
    nulls = [name for name in _NON_NULLABLE if name in fields and fields[name] is None]
    if nulls:
        raise ValidationError(
            "Request validation failed",
            details=[{"loc": ["body", n], "msg": f"{n} cannot be null"} for n in nulls],
        )
    category_ids = fields.pop("category_ids", None)
    product = await ProductService(db).update(
        product_id, category_ids=category_ids, **fields
    )
    if product is None:
        raise NotFoundError("Product", str(product_id))
    await db.commit()
    return DataResponse(data=ProductRead.model_validate(product))
