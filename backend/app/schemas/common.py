"""
Journal Board Backend — Shared Response Envelopes
===================================================

What:  Pydantic models shared by every route: the success envelope, the
       error envelope, and the health check body.
Why:   Clients parse one shape for every success ({"data": ...}) and one for
       every failure ({"error": {...}, "request_id": ...}).
Who:   Route handlers (response_model) and the exception handlers in main.py.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """
    Success envelope: every 200/201 body is {"data": <payload>}.

    Example:
        {"data": {"id": "…", "title": "Summer trip", "skin": "cork", ...}}
    """
    data: T


class ErrorDetail(BaseModel):
    """Machine-readable code plus a message that is safe to show to users."""
    code: str = Field(description="Machine-readable error code, e.g. NOT_FOUND")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": {
                "code": "CONSISTENCY_VIOLATION",
                "message": "Reorder request does not match the elements of this page",
                "details": {"foreign_ids": ["…"]}
            },
            "request_id": "550e8400-e29b-41d4-a716-446655440000"
        }
    """
    error: ErrorDetail
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    Health check body returned by GET /health and GET /health/db.

    The database is the only hard dependency; the upload volume is created on
    startup and failures there surface per request.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
