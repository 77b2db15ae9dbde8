"""Error taxonomy shared by every tierstore service."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_ARGUMENT = "invalid_argument"
    BACKEND_UNAVAILABLE = "backend_unavailable"
    INTERNAL = "internal"


class TierStoreError(Exception):
    """
    Base exception for tierstore.

    Attributes:
        kind: Which branch of the taxonomy this error belongs to.
        resource_id: Identifier of the file, version, folder or user the
            error is about, when there is one.
        details: Optional structured information for the caller.
        cause: Optional original exception that triggered this error.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        resource_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.resource_id = resource_id
        self.details = details or {}
        self.cause = cause

    @property
    def retryable(self) -> bool:
        return self.kind == ErrorKind.BACKEND_UNAVAILABLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "resource_id": self.resource_id,
            "details": self.details,
        }


class NotFoundError(TierStoreError):
    """Raised when a file, version, folder or user record does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(TierStoreError):
    """Raised when the request contradicts current state (active version, non-empty folder)."""

    kind = ErrorKind.CONFLICT


class InvalidArgumentError(TierStoreError):
    """Raised for unrecognized storage classes and malformed arguments."""

    kind = ErrorKind.INVALID_ARGUMENT


class BackendUnavailableError(TierStoreError):
    """Raised when object-store or catalog I/O fails. The only retryable kind."""

    kind = ErrorKind.BACKEND_UNAVAILABLE


class InternalError(TierStoreError):
    """Raised when a stored record violates an invariant (e.g. two active versions)."""

    kind = ErrorKind.INTERNAL
