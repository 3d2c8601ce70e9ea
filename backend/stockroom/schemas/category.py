"""Category request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    """Request body for POST /categories."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)


class CategoryUpdate(BaseModel):
    """Request body for PATCH /categories/{id}."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)


class CategoryRead(BaseModel):
    """Category projection returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_by_id: str | None = None
    created_at: datetime
    updated_at: datetime
