"""Error classifier.

Every exception that escapes a handler lands here through the exception
handlers registered in main.py. ``classify`` picks the status code and builds
the ``{success: false, message, errors?}`` envelope; unexpected errors are
logged with traceback and reported as a generic 500.
"""

from collections.abc import Sequence
from typing import Any

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

from cms_api.exceptions import DomainError, ErrorKind, FieldError, MediaStorageError
from cms_api.logging import get_logger
from cms_api.schemas.error import ErrorItem, ErrorResponse

logger = get_logger(__name__)

VALIDATION_MESSAGE = "Validation failed"
INTERNAL_MESSAGE = "Internal server error"

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INVALID_REFERENCE: 400,
    ErrorKind.IN_USE: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.UPSTREAM: 502,
    ErrorKind.INTERNAL: 500,
}

# Request locations FastAPI prefixes onto every error location
_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})

_UNIQUE_VIOLATION = "23505"
_FOREIGN_KEY_VIOLATION = "23503"


def error_body(
    message: str, errors: Sequence[FieldError] | None = None, **extra: Any
) -> dict[str, Any]:
    """Build the error envelope as a plain dict for JSONResponse."""
    items = [ErrorItem(**error.as_dict()) for error in errors] if errors else None
    return ErrorResponse(message=message, errors=items, **extra).model_dump(exclude_none=True)


def field_errors(raw: Sequence[Any]) -> list[FieldError]:
    """Flatten pydantic error dicts into ``FieldError`` values.

    The location prefix (``body``, ``query``...) is dropped so the field
    reads as the client sent it; a model-level failure reports ``body``.
    """
    result: list[FieldError] = []
    for error in raw:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATIONS:
            location, loc = loc[0], loc[1:]
        else:
            location = "body"
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        result.append(FieldError(".".join(loc) or location, message))
    return result


def integrity_kind(exc: IntegrityError) -> ErrorKind:
    """Tell unique violations from foreign-key violations.

    asyncpg exposes the SQLSTATE on the original exception; SQLite only
    reports it in the message text.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is None:
        cause = getattr(orig, "__cause__", None)
        code = getattr(cause, "sqlstate", None)
    if code == _UNIQUE_VIOLATION:
        return ErrorKind.CONFLICT
    if code == _FOREIGN_KEY_VIOLATION:
        return ErrorKind.INVALID_REFERENCE
    text = str(orig)
    if "UNIQUE constraint failed" in text:
        return ErrorKind.CONFLICT
    if "FOREIGN KEY constraint failed" in text:
        return ErrorKind.INVALID_REFERENCE
    return ErrorKind.INTERNAL


def _from_domain(exc: DomainError, path: str) -> JSONResponse:
    status_code = STATUS_BY_KIND[exc.kind]
    if isinstance(exc, MediaStorageError) and exc.result == "not found":
        status_code = 404
    if status_code >= 500 and exc.kind is not ErrorKind.UPSTREAM:
        logger.error("domain_error", error=exc.message, kind=exc.kind, path=path)
        return JSONResponse(status_code=status_code, content=error_body(INTERNAL_MESSAGE))
    logger.warning("domain_error", error=exc.message, kind=exc.kind, path=path)
    return JSONResponse(
        status_code=status_code, content=error_body(exc.message, exc.errors, **exc.extra)
    )


def _from_integrity(exc: IntegrityError, path: str) -> JSONResponse | None:
    kind = integrity_kind(exc)
    if kind is ErrorKind.CONFLICT:
        logger.warning("unique_violation", path=path)
        return JSONResponse(
            status_code=409, content=error_body("Resource with this value already exists")
        )
    if kind is ErrorKind.INVALID_REFERENCE:
        logger.warning("foreign_key_violation", path=path)
        return JSONResponse(status_code=400, content=error_body("Referenced record does not exist"))
    return None


def classify(exc: Exception, path: str = "") -> JSONResponse:
    """Map any exception to its HTTP error response."""
    if isinstance(exc, RequestValidationError | PydanticValidationError):
        errors = field_errors(exc.errors())
        logger.info("validation_failed", path=path, fields=[error.field for error in errors])
        return JSONResponse(status_code=400, content=error_body(VALIDATION_MESSAGE, errors))
    if isinstance(exc, DomainError):
        return _from_domain(exc, path)
    if isinstance(exc, IntegrityError):
        response = _from_integrity(exc, path)
        if response is not None:
            return response
    logger.exception("unhandled_exception", path=path, exc_info=exc)
    return JSONResponse(status_code=500, content=error_body(INTERNAL_MESSAGE))
