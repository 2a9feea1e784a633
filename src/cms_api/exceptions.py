"""Domain exceptions raised by services and dependencies.

Each exception carries an ErrorKind. The classifier switches on the kind to
pick a status code and build the error envelope, so nothing downstream has to
inspect message text.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_REFERENCE = "invalid_reference"
    IN_USE = "in_use"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


@dataclass(frozen=True)
class FieldError:
    """One violated field in a validation failure."""

    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class DomainError(Exception):
    """Base class for all domain exceptions.

    ``extra`` holds additional top-level keys for the error envelope
    (e.g. ``projectCount`` or ``retryAfter``).
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self, message: str, errors: list[FieldError] | None = None, **extra: Any
    ) -> None:
        self.message = message
        self.errors = errors or []
        self.extra = extra
        super().__init__(message)


class ValidationError(DomainError):
    """Raised when input fails checks that pydantic models cannot express."""

    kind = ErrorKind.VALIDATION

    def __init__(self, errors: list[FieldError], message: str = "Validation failed") -> None:
        super().__init__(message, errors)


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, identifier: object | None = None) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found")


class ConflictError(DomainError):
    """Raised when an operation conflicts with existing state (e.g. duplicate)."""

    kind = ErrorKind.CONFLICT


class InvalidReferenceError(DomainError):
    """Raised when input points at a related row that does not exist."""

    kind = ErrorKind.INVALID_REFERENCE


class DependencyInUseError(DomainError):
    """Raised when a delete is blocked by rows that still reference the entity."""

    kind = ErrorKind.IN_USE


class AuthenticationError(DomainError):
    """Missing, malformed, invalid or expired credentials."""

    kind = ErrorKind.UNAUTHORIZED


class PermissionDeniedError(DomainError):
    """Authenticated principal lacks the required role."""

    kind = ErrorKind.FORBIDDEN


class RateLimitedError(DomainError):
    kind = ErrorKind.RATE_LIMITED

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        super().__init__(
            f"Rate limit exceeded. Try again in {retry_after} seconds",
            retryAfter=retry_after,
        )


class MediaStorageError(DomainError):
    """The media provider rejected or failed a request."""

    kind = ErrorKind.UPSTREAM

    def __init__(self, message: str, result: str | None = None) -> None:
        self.result = result
        super().__init__(message)
