"""Typed API errors.

Every failure that reaches a route is one of these. The global handlers in
`cinerate.http.problem` render them as problem+json envelopes carrying a
machine-readable `code`, a human-readable `message` and, where available,
a list of validation `errors` and the underlying storage `detail`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional


class ApiError(Exception):
    status = 500
    title = "Error"
    default_code = "ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        errors: Optional[List[str]] = None,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.errors = list(errors or [])
        self.detail = detail

    def to_problem(self) -> dict:
        problem = {
            "title": self.title,
            "status": self.status,
            "message": self.message,
            "code": self.code,
        }
        if self.errors:
            problem["errors"] = self.errors
        if self.detail:
            problem["detail"] = self.detail
        return problem


class ValidationFailed(ApiError):
    status = 400
    title = "Invalid Request"
    default_code = "VALIDATION_ERROR"


class AuthenticationError(ApiError):
    status = 401
    title = "Unauthorized"
    default_code = "UNAUTHORIZED"


class ForbiddenError(ApiError):
    status = 403
    title = "Forbidden"
    default_code = "FORBIDDEN"


class NotFoundError(ApiError):
    status = 404
    title = "Not Found"
    default_code = "NOT_FOUND"


class ConflictError(ApiError):
    status = 409
    title = "Conflict"
    default_code = "CONFLICT"


class StorageError(ApiError):
    status = 500
    title = "Internal Server Error"
    default_code = "DB_EXEC_ERROR"


@contextmanager
def storage_errors(code: str, message: str) -> Iterator[None]:
    """Re-label a StorageError raised inside the block with a route-specific code.

    Conflicts and other API errors pass through untouched.
    """
    try:
        yield
    except StorageError as exc:
        raise StorageError(message, code=code, detail=exc.detail or exc.message) from exc


__all__ = [
    "ApiError",
    "ValidationFailed",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "StorageError",
    "storage_errors",
]
