"""
Termbook Backend: Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message, an optional context dict and
       the HTTP status it maps to. Global exception handlers (registered in
       main.py) catch these and return the fixed JSON envelope
       `{code, status, message}` (or `{code, status, messages}` for
       field-level validation failures).
Who:   Raised by services and security dependencies; caught by global handlers.

Exception Hierarchy:
    TermbookError (base)
    ├── ValidationError        → 422 Unprocessable Entity
    ├── AuthenticationError    → 401 Unauthorized
    ├── PermissionDeniedError  → 403 Forbidden
    ├── NotFoundError          → 404 Not Found
    └── DatabaseError          → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class TermbookError(Exception):
    """
    Base exception for all Termbook application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
        code:     HTTP status code used by the global handler
        status:   Status label placed in the response envelope
    """

    code: int = 500
    status: str = "Error"

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TermbookError):
    """
    Raised when client input fails validation.

    When:    Missing search criteria, unknown category, malformed payload.
    HTTP:    422 Unprocessable Entity

    Two shapes are supported:
        - a single `message` (e.g. "Term or categoryId is required")
        - field-level `messages` in the `{"errors": [{field, rule, message}]}`
          layout clients of the definitions API already parse
    """

    code = 422

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        self.errors = errors

    @property
    def messages(self) -> Optional[Dict[str, List[Dict[str, str]]]]:
        if self.errors is None:
            return None
        return {"errors": self.errors}


class AuthenticationError(TermbookError):
    """
    Raised when a route needs a user and the request carries no valid token.

    HTTP:    401 Unauthorized (with a WWW-Authenticate: Bearer header)
    """

    code = 401
    status = "Unauthorized"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(TermbookError):
    """
    Raised when the caller is authenticated but the edit policy forbids
    touching the definition (another user's submission under `owner`).

    HTTP:    403 Forbidden
    """

    code = 403
    status = "Forbidden"

    def __init__(
        self,
        message: str = "You are not allowed to modify this definition",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TermbookError):
    """
    Raised when a requested resource does not exist or is hidden by its
    moderation status.

    When:    GET /definitions/{id} on a missing or DELETED row, a search with
             no approved matches, update/delete of an unknown id.
    HTTP:    404 Not Found
    """

    code = 404
    status = "Not Found"

    def __init__(
        self,
        message: str = "Definition not found",
        resource: str = "definition",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(TermbookError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always the generic
    "Internal server error". The original exception type and any identifiers
    go into `context` and are logged server-side only.
    """

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
