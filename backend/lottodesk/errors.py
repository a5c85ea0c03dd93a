# Overview: Error taxonomy shared by services and routes.

"""
Every error a write can surface belongs to one of four families so the UI
can branch on them:

- ValidationError / ConflictError / NotFoundError: caller-correctable input
- AuthenticationRequiredError: no actor on the request ("log in again")
- PermissionDeniedError / SubmissionLockedError: actor lacks the role ("ask admin")
- StorageSchemaError: the database rejected a value the schema should accept

Validation and authorization errors are raised before any write.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError


class LottoDeskError(Exception):
    """Base error carrying the HTTP status the API layer should use."""
    status_code = 500
    kind = "error"

    def to_dict(self) -> dict:
        return {"error": str(self), "kind": self.kind}


class ValidationError(LottoDeskError, ValueError):
    """400-level input problem."""
    status_code = 400
    kind = "validation"


class ConflictError(LottoDeskError, ValueError):
    """409-level business rule conflict (e.g., duplicate box number)."""
    status_code = 409
    kind = "conflict"


class NotFoundError(LottoDeskError):
    status_code = 404
    kind = "not_found"


class AuthenticationRequiredError(LottoDeskError):
    """No authenticated actor was supplied for a write."""
    status_code = 401
    kind = "authentication"


class PermissionDeniedError(LottoDeskError):
    """Actor is authenticated but lacks the required role."""
    status_code = 403
    kind = "authorization"


class SubmissionLockedError(PermissionDeniedError):
    """Date was submitted; only an administrator may change its entries."""

    def __init__(self, business_date):
        super().__init__(
            f"Entries for {business_date.isoformat()} were already submitted. "
            "Ask an administrator to make changes."
        )
        self.business_date = business_date


class StorageSchemaError(LottoDeskError):
    """
    Database rejected a value the current schema is supposed to allow.

    Raised instead of the raw driver error so an operator knows to upgrade
    the schema rather than retry.
    """
    status_code = 500
    kind = "storage_schema"


# SQLSTATE codes (PostgreSQL) and message fragments (SQLite) we recognise
_NOT_NULL_CODES = {"23502"}
_UNIQUE_CODES = {"23505"}


def translate_integrity_error(exc: IntegrityError, *, context: str) -> LottoDeskError:
    """
    Map a driver IntegrityError onto the taxonomy above.

    NOT NULL violations become StorageSchemaError with an explicit upgrade hint,
    unique violations become ConflictError. Anything else is kept generic.
    """
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    message = str(orig if orig is not None else exc)
    lowered = message.lower()

    if code in _NOT_NULL_CODES or "not null constraint" in lowered or "not-null constraint" in lowered:
        return StorageSchemaError(
            f"{context}: the database does not accept an empty value here yet. "
            "The storage schema is out of date; run the database migrations "
            "(flask db upgrade) so open/close readings can be left blank."
        )
    if code in _UNIQUE_CODES or "unique constraint" in lowered:
        return ConflictError(f"{context}: a record with the same key already exists")
    return LottoDeskError(f"{context}: {message}")
