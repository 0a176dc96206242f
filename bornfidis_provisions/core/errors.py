"""Domain error types for Bornfidis Provisions.

Purpose:
- Give services a small, typed vocabulary for expected failures.
- Carry the HTTP status the API should answer with, so routers stay thin and
  the exception handlers can render a uniform ``{"success": false, "error": ...}``
  envelope.

Usage:
- Raise a subclass from a service; never catch it in a router unless the
  router needs to change the message.
- Inspect ``status_code`` and ``details`` when handling generically.
"""

from __future__ import annotations

from typing import Any, Optional


class BornfidisError(Exception):
    """Base error for expected, user-facing failures.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code the API should respond with.
        details: Optional structured context (e.g. the offending field).
    """

    default_status_code = 500

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code or self.default_status_code
        self.details = details


class ValidationFailedError(BornfidisError):
    """Input passed schema validation but violates a business rule (HTTP 400)."""

    default_status_code = 400


class ConflictError(BornfidisError):
    """The request conflicts with existing state, e.g. a duplicate (HTTP 400)."""

    default_status_code = 400


class AuthenticationError(BornfidisError):
    """Missing or invalid credentials (HTTP 401)."""

    default_status_code = 401

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class PermissionDeniedError(BornfidisError):
    """Authenticated, but not allowed (HTTP 403)."""

    default_status_code = 403

    def __init__(self, message: str = "Access denied: Admin role required") -> None:
        super().__init__(message)


class NotFoundError(BornfidisError):
    """Raised when a referenced record does not exist (HTTP 404).

    Args:
        resource: Human-readable resource name, e.g. ``"Booking"``.
        resource_id: Identifier that was looked up.
    """

    default_status_code = 404

    def __init__(self, resource: str, resource_id: Optional[str] = None) -> None:
        super().__init__(f"{resource} not found", details={"id": resource_id} if resource_id else None)
        self.resource = resource
        self.resource_id = resource_id


class ExternalServiceError(BornfidisError):
    """A downstream service call failed in a way the user should see (HTTP 500)."""

    default_status_code = 500
