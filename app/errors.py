"""Application error taxonomy.

Every error carries a ``kind`` (the broad class, mapped to an HTTP status) and
a machine-readable ``code`` naming the specific rule that failed. ``details``
holds structured data a client can use to explain the failure, e.g. the list of
conflicting bookings.
"""

from typing import Any


class AppError(Exception):
    kind = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, code: str | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.kind
        self.details = details

    def to_dict(self) -> dict:
        error = {"kind": self.kind, "code": self.code, "message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return error


class ValidationError(AppError):
    kind = "VALIDATION_ERROR"
    status_code = 400


class AuthorizationError(AppError):
    kind = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "Unauthorized access", code: str | None = None):
        super().__init__(message, code)


class NotFoundError(AppError):
    kind = "NOT_FOUND"
    status_code = 404


class ConflictError(AppError):
    kind = "CONFLICT"
    status_code = 409


class InternalError(AppError):
    kind = "INTERNAL_ERROR"
    status_code = 500
