"""API error classes.

Every error the API returns is an APIError subclass carrying a
machine-readable code and an HTTP status. Exception handlers in
``stockroom.main`` turn them into the ``{"error": {...}}`` envelope.

Taxonomy:
- ForbiddenError (403): missing/invalid/expired token, role mismatch
- BadRequestError / ValidationError (400): client-correctable input problems
- NotFoundError (404): id lookups that found nothing
- InternalError (500): everything else
"""


class APIError(Exception):
    """Base class for API errors.

    All API errors have a code, message, and HTTP status.
    Subclasses set default status_code.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional list of additional error details.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: list[dict] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(APIError):
    """Field validation failed (400).

    Use for request body validation errors, query param errors, etc.
    """

    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details=details,
        )


class BadRequestError(APIError):
    """Request was well-formed but cannot be applied (400).

    Use for store constraint violations and identity-provider rejections,
    e.g. a duplicate email or a reference to a category that does not exist.
    """

    def __init__(
        self,
        message: str,
        code: str = "BAD_REQUEST",
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=400,
            details=details,
        )


class ForbiddenError(APIError):
    """Not allowed to access resource (403).

    Every authorization failure maps here, including a missing credential.
    """

    def __init__(self, message: str = "Access denied", code: str = "FORBIDDEN") -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=403,
        )


class MissingTokenError(ForbiddenError):
    """No bearer token on the request (403)."""

    def __init__(self) -> None:
        super().__init__("Missing authorization token", code="MISSING_TOKEN")


class InvalidTokenError(ForbiddenError):
    """Bearer token did not resolve to a principal (403)."""

    def __init__(self) -> None:
        super().__init__("Invalid authorization token", code="INVALID_TOKEN")


class ExpiredTokenError(ForbiddenError):
    """Identity provider reported the bearer token as expired (403)."""

    def __init__(self) -> None:
        super().__init__("Expired authorization token", code="EXPIRED_TOKEN")


class NotAuthorizedError(ForbiddenError):
    """Principal holds none of the roles the route requires (403)."""

    def __init__(self) -> None:
        super().__init__("Not authorized", code="NOT_AUTHORIZED")


class NotFoundError(APIError):
    """Resource not found (404)."""

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=404,
        )


class InternalError(APIError):
    """Unexpected server error (500).

    Use for unhandled exceptions. Never expose stack traces to clients.
    """

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
        )
