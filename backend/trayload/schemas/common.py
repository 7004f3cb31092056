"""
TrayLoad Backend — Shared Response Schemas
============================================

What:  Error and health payloads shared by every router, plus the input
       helpers the resource schemas build on.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


def strip_required(value: Any) -> Any:
    """Strip a required text field; blank becomes a validation error."""
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
    return value


def strip_optional(value: Any) -> Any:
    """Strip an optional text field; blank becomes None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "tray with name 'T-101' already exists in this project",
            "details": {"resource": "tray", "field": "name", "value": "T-101"},
            "request_id": "550e8400-e29b-41d4-a716-446655440000"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
