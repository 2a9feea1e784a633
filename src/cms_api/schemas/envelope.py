"""Success envelopes and the helpers routers use to build them."""

from pydantic import BaseModel
from starlette.responses import Response

from cms_api.schemas.pagination import Paginated, PaginatedResponse, PaginationMeta


class ApiResponse[T](BaseModel):
    """Single-resource envelope: ``{success, data, message?}``."""

    success: bool = True
    data: T
    message: str | None = None


def single[M: BaseModel](
    schema: type[M], row: object, message: str | None = None
) -> ApiResponse[M]:
    """Validate an ORM row (or mapping) through ``schema`` and wrap it."""
    return ApiResponse[schema](  # type: ignore[valid-type]
        data=schema.model_validate(row), message=message
    )


def many[M: BaseModel](
    schema: type[M], rows: list[object], message: str | None = None
) -> ApiResponse[list[M]]:
    return ApiResponse[list[schema]](  # type: ignore[valid-type]
        data=[schema.model_validate(row) for row in rows], message=message
    )


def listing[M: BaseModel](
    schema: type[M],
    result: Paginated[object],
    message: str | None = None,
    query: str | None = None,
) -> PaginatedResponse[M]:
    return PaginatedResponse[schema](  # type: ignore[valid-type]
        data=[schema.model_validate(row) for row in result.items],
        pagination=PaginationMeta.of(result),
        message=message,
        query=query,
    )


def no_content() -> Response:
    """Empty 204 reply; every delete route answers 200 with a message instead."""
    return Response(status_code=204)
