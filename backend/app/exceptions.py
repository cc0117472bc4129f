"""
Journal Board Backend — Custom Exception Hierarchy
====================================================

What:  Defines application-specific exceptions for every failure the core can produce.
Why:   Services raise typed outcomes; global handlers (registered in main.py)
       translate them into HTTP responses. Services never build responses.
How:   Each exception class carries a message, optional context dict, and the
       HTTP status / machine-readable code the handler should emit.
Who:   Raised by the access gate, the ordering engine, and the services.
When:  During request processing, before the request transaction commits.

Exception Hierarchy:
    JournalBoardError (base)
    ├── ValidationError            → 422 VALIDATION_ERROR
    ├── NotFoundError              → 404 NOT_FOUND
    ├── UnauthorizedError          → 401 UNAUTHORIZED
    ├── ConsistencyViolationError  → 409 CONSISTENCY_VIOLATION
    ├── DatabaseError              → 500 DATABASE_ERROR
    └── FileStorageError           → 500 INTERNAL_ERROR

Propagation policy:
    Any of these raised inside a request rolls back the request transaction
    (see app/database.get_db_session). Nothing in the core retries; a caller
    that receives DATABASE_ERROR must resubmit the whole logical operation.
"""

from typing import Any, Dict, Optional


class JournalBoardError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only returned for client errors)
    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(JournalBoardError):
    """
    Raised when client input fails a business-level check.

    Schema-level failures (missing fields, w <= 0, unknown kind) are caught by
    FastAPI's RequestValidationError before reaching a service; this class is
    for checks that need the request content, such as upload type sniffing.
    """

    status_code = 422
    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(JournalBoardError):
    """
    Raised when a board, page or element does not exist, or does not belong
    to the parent named in the request path.

    The access gate raises this before ever comparing secrets, so a wrong
    token for a nonexistent board yields 404, never 401.
    """

    status_code = 404
    code = "NOT_FOUND"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class UnauthorizedError(JournalBoardError):
    """Raised when a capability token is missing where required, or does not match."""

    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(
        self,
        message: str = "A valid board token is required for this operation",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConsistencyViolationError(JournalBoardError):
    """
    Raised when a batch restack references an element outside the stated page
    (or names the same element or target twice).

    Raised during planning, before any write, so the batch fails atomically.
    """

    status_code = 409
    code = "CONSISTENCY_VIOLATION"

    def __init__(
        self,
        message: str = "Reorder request does not match the elements of this page",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(JournalBoardError):
    """
    Raised when a storage operation fails unexpectedly.

    Security Note:
        The message returned to the client is always generic. SQL text,
        constraint names and driver messages are logged server-side only.
    """

    code = "DATABASE_ERROR"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(JournalBoardError):
    """Raised when an uploaded file cannot be written to the upload volume."""

    code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
