"""Bulk operation request/response schemas."""

from pydantic import BaseModel, Field

# Upper bound on ids per bulk request (defense-in-depth)
MAX_BULK_IDS = 500


class BulkDeleteRequest(BaseModel):
    """Request body for POST /categories|products|suppliers/bulk-delete.

    Attributes:
        ids: Integer ids to delete. Unknown ids are ignored.
    """

    ids: list[int] = Field(..., max_length=MAX_BULK_IDS, description="Ids to delete")


class BulkDeleteUsersRequest(BaseModel):
    """Request body for POST /users/bulk-delete.

    Attributes:
        ids: Identity-provider uids to delete. Unknown uids are ignored.
    """

    ids: list[str] = Field(..., max_length=MAX_BULK_IDS, description="User uids to delete")


class BulkDeleteResult(BaseModel):
    """Result of a bulk delete.

    Attributes:
        count: Number of records actually deleted.
    """

    count: int = Field(..., ge=0, description="Number of records deleted")
