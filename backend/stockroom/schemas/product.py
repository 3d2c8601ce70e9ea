"""Product request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from stockroom.schemas.category import CategoryRead
from stockroom.schemas.supplier import SupplierRead

_MAX_CATEGORIES = 50


class ProductCreate(BaseModel):
    """Request body for POST /products."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=150)
    quantity: int = Field(default=0, ge=0)
    category_ids: list[int] = Field(default_factory=list, max_length=_MAX_CATEGORIES)
    supplier_id: int | None = None


class ProductUpdate(BaseModel):
    """Request body for PATCH /products/{id}.

    All fields optional; only provided fields are updated. Sending
    ``category_ids`` replaces the whole category set; sending
    ``supplier_id: null`` detaches the supplier.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=150)
    quantity: int | None = Field(default=None, ge=0)
    category_ids: list[int] | None = Field(default=None, max_length=_MAX_CATEGORIES)
    supplier_id: int | None = None


class ProductRead(BaseModel):
    """Product projection returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    quantity: int
    categories: list[CategoryRead]
    supplier: SupplierRead | None = None
    created_by_id: str | None = None
    created_at: datetime
    updated_at: datetime
