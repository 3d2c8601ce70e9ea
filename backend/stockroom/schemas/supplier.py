"""Supplier request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SupplierCreate(BaseModel):
    """Request body for POST /suppliers."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=150)
    nif: str | None = Field(default=None, min_length=1, max_length=20)


class SupplierUpdate(BaseModel):
    """Request body for PATCH /suppliers/{id}.

    All fields optional; only provided fields are updated.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=150)
    nif: str | None = Field(default=None, min_length=1, max_length=20)


class SupplierRead(BaseModel):
    """Supplier projection returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    nif: str | None = None
    created_by_id: str | None = None
    created_at: datetime
    updated_at: datetime
