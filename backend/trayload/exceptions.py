"""
TrayLoad Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the service layer.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    TrayLoadError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found
    ├── ConflictError     → 409 Conflict (duplicate name / number)
    └── DatabaseError     → 500 Internal Server Error

The loading engine itself (trayload.loading) raises none of these. Data
problems inside a snapshot are reported in the result, not raised.
"""

from typing import Any, Dict, Optional


class TrayLoadError(Exception):
    """
    Base exception for all TrayLoad application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info, returned as "details"
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TrayLoadError):
    """
    Raised when client input fails a business rule.

    HTTP: 400 Bad Request. Schema-level problems are FastAPI's 422; this is
    for rules that need the database, such as a grounding cable type that
    belongs to another project.
    """

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


class NotFoundError(TrayLoadError):
    """
    Raised when a requested resource does not exist.

    HTTP: 404 Not Found. Rows from another project count as missing.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(TrayLoadError):
    """
    Raised when a write would break a uniqueness rule.

    HTTP: 409 Conflict. Project numbers are unique; cable type names, tray
    names and cable ids are unique per project, case-insensitively. Material
    catalogue types are unique across the installation (scope="the catalogue").

    Example response:
        {
            "error": "conflict",
            "message": "tray with name 'T-101' already exists in this project",
            "details": {"resource": "tray", "field": "name", "value": "T-101"}
        }
    """

    def __init__(
        self,
        resource: str = "resource",
        field: Optional[str] = None,
        value: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        scope: str = "this project",
    ):
        if field and value is not None:
            message = f"{resource} with {field} '{value}' already exists in {scope}"
        else:
            message = f"{resource} already exists"
        ctx = context or {}
        ctx["resource"] = resource
        if field:
            ctx["field"] = field
        if value is not None:
            ctx["value"] = value
        super().__init__(message=message, context=ctx)


class DatabaseError(TrayLoadError):
    """
    Raised when database operations fail unexpectedly.

    HTTP: 500 Internal Server Error. The message returned to the client is
    always generic; the SQLAlchemy error is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
