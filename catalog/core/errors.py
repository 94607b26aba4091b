"""API error classes.

Every failure the core can report is one of these typed errors. Exception
handlers in main.py turn them into the {"error": {...}} envelope.

Taxonomy:
- ValidationError (400): bad caller input, never retried automatically
- UnauthorizedError / InvalidTokenError (401): missing or rejected credentials
- NotFoundError (404): identity does not exist, a normal outcome
- ConflictError / EditConflictError (409): unique or version conflicts
- StoreUnavailableError (503): timeout or transport failure, not retried
- TokenGenerationError (500): secure random source unavailable
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


class UnsafeSortInputError(ValidationError):
    """Sort token is not in the resource's safelist (400).

    Raised before any query is built, so the token never reaches SQL.
    """

    def __init__(self, sort_token: str) -> None:
        super().__init__(
            "Invalid sort value",
            details=[{"field": "sort", "message": "invalid sort value"}],
        )
        self.sort_token = sort_token


class MalformedTokenError(ValidationError):
    """Token plaintext has the wrong length or alphabet (400).

    Raised before any store lookup. Distinct from InvalidTokenError so the
    cheap rejection path is observable.
    """

    def __init__(self, message: str) -> None:
        super().__init__(
            "Malformed token",
            details=[{"field": "token", "message": message}],
        )


class UnauthorizedError(APIError):
    """Authentication required (401).

    Use when no valid auth credentials provided.
    """

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401,
        )


class InvalidTokenError(UnauthorizedError):
    """Token failed validation (401).

    Security: Deliberately the same for unknown, expired and wrong-scope
    tokens so callers cannot learn which tokens exist.
    """

    def __init__(self) -> None:
        APIError.__init__(
            self,
            code="INVALID_TOKEN",
            message="Invalid or expired token",
            status_code=401,
        )


class ForbiddenError(APIError):
    """Not allowed to access resource (403).

    Use when auth is valid but user lacks permission.
    """

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            code="FORBIDDEN",
            message=message,
            status_code=403,
        )


class InactiveAccountError(ForbiddenError):
    """Authenticated user has not activated their account (403)."""

    def __init__(self) -> None:
        APIError.__init__(
            self,
            code="ACCOUNT_NOT_ACTIVATED",
            message="Your user account must be activated to access this resource",
            status_code=403,
        )


class NotFoundError(APIError):
    """Resource not found (404).

    Raised for any "no rows" outcome so callers can branch on missing
    versus broken.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        if resource_id is not None:
            message = f"{resource} with id '{resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=404,
        )


class ConflictError(APIError):
    """Duplicate or conflicting resource (409).

    Use for unique constraint violations. Accepts custom code for specific
    conflict types.
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details,
        )


class EditConflictError(ConflictError):
    """Row changed since the caller read it (409).

    Raised by a versioned update when the stored version no longer matches
    the version the caller supplied.
    """

    def __init__(self, resource: str) -> None:
        super().__init__(
            code="EDIT_CONFLICT",
            message=(
                f"Unable to update the {resource} due to an edit conflict, "
                "please try again"
            ),
        )


class StoreUnavailableError(APIError):
    """Backing store timed out or failed at the transport level (503)."""

    def __init__(self, message: str = "The data store is temporarily unavailable") -> None:
        super().__init__(
            code="STORE_UNAVAILABLE",
            message=message,
            status_code=503,
        )


class TokenGenerationError(APIError):
    """Secure random source unavailable while minting a token (500)."""

    def __init__(self) -> None:
        super().__init__(
            code="TOKEN_GENERATION_FAILED",
            message="Unable to generate a token",
            status_code=500,
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
