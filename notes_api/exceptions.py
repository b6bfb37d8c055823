"""
Notes API - Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the three failure kinds the service knows.
How:   Each exception carries a client-safe message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching HTTP status.
Who:   Raised by the store and the note service; caught by global handlers.

Exception Hierarchy:
    NotesApiError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    └── StoreFault               → 500 Internal Server Error
        └── SchemaError          → 500 (raised while building the store)

The store never raises on bad caller input: a lookup for an identifier that
cannot exist finds nothing. StoreFault is reserved for broken invariants.
"""

from typing import Any, Dict, Optional


class NotesApiError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesApiError):
    """
    Raised when client input cannot be used as given.

    When:    Undecodable payload, empty identifier.
    HTTP:    400 Bad Request
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


class NotFoundError(NotesApiError):
    """
    Raised when a requested record does not exist.

    When:    PUT /notes/{id} for an identifier that was never created or was deleted.
    HTTP:    404 Not Found
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
        self.resource_id = resource_id


class StoreFault(NotesApiError):
    """
    Raised when the in-memory store detects a broken invariant.

    What:    Index corruption, a unique key claimed twice, use of a closed
             transaction, an unknown table or index.
    HTTP:    500 Internal Server Error

    The client only ever sees a generic message; the context is logged.
    Not retried automatically.
    """

    def __init__(
        self,
        message: str = "An internal storage error occurred.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SchemaError(StoreFault):
    """Raised when a table or index schema is invalid."""

    def __init__(
        self,
        message: str = "Invalid store schema",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
