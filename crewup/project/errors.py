from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class AccessError(Exception):
    """Base class for every failure the access model knows how to name."""

    error_code = "access_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthRequired(AccessError):
    error_code = "auth_required"
    status_code = 401


class ValidationFailed(AccessError):
    error_code = "validation_failed"
    status_code = 422


class PermissionDenied(AccessError):
    error_code = "permission_denied"
    status_code = 403


class ConflictError(AccessError):
    # only raised internally; join downgrades it to success
    error_code = "conflict"
    status_code = 409


class NotFound(AccessError):
    error_code = "not_found"
    status_code = 404


class StoreError(AccessError):
    """Unexpected persistence failure. Raised, never returned."""

    error_code = "store_error"
    status_code = 503


@dataclass
class ServiceResult(Generic[T]):
    """
    Tagged outcome of an access-model operation.

    Expected conditions (validation, permission, not-found) come back as
    ``ok=False`` with ``error`` set; callers branch on ``ok``.
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[AccessError] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None, message: Optional[str] = None) -> "ServiceResult":
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, error: AccessError) -> "ServiceResult":
        return cls(ok=False, error=error, message=error.message)
