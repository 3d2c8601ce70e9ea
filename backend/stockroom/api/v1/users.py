"""Users API router.

User management requires the admin role. ``GET /users/me`` is open to any
authenticated principal. The per-user listings (products, categories,
suppliers created by a user) are staff reads.
"""

from typing import Annotated

from fastapi import APIRouter, Query, Request, status

from stockroom.api.deps import (
    AdminPrincipal,
    AuthenticatedPrincipal,
    DbSession,
    Identity,
    Paging,
    StaffPrincipal,
)
from stockroom.core.config import settings
from stockroom.core.errors import NotFoundError, ValidationError
from stockroom.core.rate_limiting import limiter
from stockroom.core.responses import DataResponse, ListResponse
from stockroom.schemas.auth import Role
from stockroom.schemas.bulk import BulkDeleteResult, BulkDeleteUsersRequest
from stockroom.schemas.category import CategoryRead
from stockroom.schemas.product import ProductRead
from stockroom.schemas.supplier import SupplierRead
from stockroom.schemas.user import UserCreate, UserRead, UserUpdate
from stockroom.services.category_service import CategoryService
from stockroom.services.product_service import ProductService
from stockroom.services.supplier_service import SupplierService
from stockroom.services.user_service import UserService

router = APIRouter()

SearchFilter = Annotated[
    str | None,
    Query(
        alias="filter",
        description="Case-insensitive match on email, tax id, first or last name",
    ),
]
RoleFilter = Annotated[Role | None, Query(description="Only users holding this role")]

# PATCH fields that may not be explicitly null
_NON_NULLABLE = ("first_name", "last_name", "roles")


async def _require_user(service: UserService, user_id: str) -> None:
    if await service.get_by_id(user_id) is None:
        raise NotFoundError("User", user_id)


@router.get("")
async def list_users(
    _admin: AdminPrincipal,
    db: DbSession,
    identity: Identity,
    pagination: Paging,
    search: SearchFilter = None,
    role: RoleFilter = None,
) -> ListResponse[UserRead]:
    """List users with pagination, text filter and role filter."""
    records, total = await UserService(db, identity).list_users(
        pagination=pagination,
        search=search,
        role=role.value if role is not None else None,
    )
    return ListResponse.paginated(
        [UserRead.model_validate(r) for r in records], total, pagination
    )


@router.post("", status_code=status.HTTP_201_CREATED)
@limiter.limit(lambda: settings.rate_limit_user_create)
async def create_user(
    request: Request,  # noqa: ARG001 - required by slowapi
    admin: AdminPrincipal,
    db: DbSession,
    identity: Identity,
    body: UserCreate,
) -> DataResponse[UserRead]:
    """Register a user with the identity provider and the local store."""
    user = await UserService(db, identity).create(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        roles=[role.value for role in body.roles],
        nif=body.nif,
        created_by_id=admin.uid,
    )
    return DataResponse(data=UserRead.model_validate(user))


@router.get("/me")
async def get_current_user(
    principal: AuthenticatedPrincipal,
    db: DbSession,
    identity: Identity,
) -> DataResponse[UserRead]:
    """Return the caller's own user record."""
    user = await UserService(db, identity).get_by_id(principal.uid)
    if user is None:
        raise NotFoundError("User", principal.uid)
    return DataResponse(data=UserRead.model_validate(user))


@router.post("/bulk-delete")
async def bulk_delete_users(
    _admin: AdminPrincipal,
    db: DbSession,
    identity: Identity,
    body: BulkDeleteUsersRequest,
) -> DataResponse[BulkDeleteResult]:
    """Delete users and their identity accounts. Unknown ids are ignored."""
    count = await UserService(db, identity).delete_many(body.ids)
    return DataResponse(data=BulkDeleteResult(count=count))


@router.get("/{user_id}")
async def get_user(
    _principal: StaffPrincipal,
    db: DbSession,
    identity: Identity,
    user_id: str,
) -> DataResponse[UserRead]:
    """Get a user by uid."""
    user = await UserService(db, identity).get_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return DataResponse(data=UserRead.model_validate(user))


@router.patch("/{user_id}")
async def update_user(
    _admin: AdminPrincipal,
    db: DbSession,
    identity: Identity,
    user_id: str,
    body: UserUpdate,
) -> DataResponse[UserRead]:
    """Partially update a user. ``roles`` replaces the whole role set."""
    fields = body.model_dump(exclude_unset=True)
    nulls = [name for name in _NON_NULLABLE if name in fields and fields[name] is None]
    if nulls:
        raise ValidationError(
            "Request validation failed",
            details=[{"loc": ["body", n], "msg": f"{n} cannot be null"} for n in nulls],
        )
    roles = fields.pop("roles", None)
    user = await UserService(db, identity).update(
        user_id,
        roles=[role.value for role in roles] if roles is not None else None,
        **fields,
    )
    if user is None:
        raise NotFoundError("User", user_id)
    await db.commit()
    return DataResponse(data=UserRead.model_validate(user))


@router.get("/{user_id}/products")
async def list_user_products(
    _principal: StaffPrincipal,
    db: DbSession,
    identity: Identity,
    user_id: str,
    pagination: Paging,
) -> ListResponse[ProductRead]:
    """List products registered by a user."""
    await _require_user(UserService(db, identity), user_id)
    records, total = await ProductService(db).list_products(
        pagination=pagination, created_by_id=user_id
    )
    return ListResponse.paginated(
        [ProductRead.model_validate(r) for r in records], total, pagination
    )


@router.get("/{user_id}/categories")
async def list_user_categories(
    _principal: StaffPrincipal,
    db: DbSession,
    identity: Identity,
    user_id: str,
    pagination: Paging,
) -> ListResponse[CategoryRead]:
    """List categories created by a user."""
    await _require_user(UserService(db, identity), user_id)
    records, total = await CategoryService(db).list_categories(
        pagination=pagination, created_by_id=user_id
    )
    return ListResponse.paginated(
        [CategoryRead.model_validate(r) for r in records], total, pagination
    )


@router.get("/{user_id}/suppliers")
async def list_user_suppliers(
    _principal: StaffPrincipal,
    db: DbSession,
    identity: Identity,
    user_id: str,
    pagination: Paging,
) -> ListResponse[SupplierRead]:
    """List suppliers registered by a user."""
    await _require_user(UserService(db, identity), user_id)
    records, total = await SupplierService(db).list_suppliers(
        pagination=pagination, created_by_id=user_id
    )
    return ListResponse.paginated(
        [SupplierRead.model_validate(r) for r in records], total, pagination
    )
