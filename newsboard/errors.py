from __future__ import annotations


class NewsboardError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500


class ValidationError(NewsboardError):
    """Raised when a required text field is missing or blank."""

    status_code = 400


class AccessDenied(NewsboardError):
    """Raised when an admin-only operation is invoked without admin capability."""

    status_code = 403


class NotFound(NewsboardError):
    """Raised when no news item matches the requested id."""

    status_code = 404


class StoreUnavailable(NewsboardError):
    """Raised when the backing store cannot be reached or rejects a request."""

    status_code = 503
