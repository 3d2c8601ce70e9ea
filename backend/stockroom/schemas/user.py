"""User request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from stockroom.schemas.auth import Role


class UserCreate(BaseModel):
    """Request body for POST /users.

    The password is forwarded to the identity provider and never stored
    locally.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    nif: str | None = Field(default=None, min_length=1, max_length=20)
    roles: list[Role] = Field(min_length=1)


class UserUpdate(BaseModel):
    """Request body for PATCH /users/{id}.

    All fields optional; only provided fields are updated. Sending
    ``roles`` replaces the whole role set.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    nif: str | None = Field(default=None, min_length=1, max_length=20)
    roles: list[Role] | None = Field(default=None, min_length=1)


class UserSummary(BaseModel):
    """Compact user projection nested inside other records."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str
    nif: str | None = None
    roles: list[str]


class UserRead(BaseModel):
    """User projection returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    nif: str | None = None
    email: str
    roles: list[str]
    created_by: UserSummary | None = None
    created_at: datetime
    updated_at: datetime
