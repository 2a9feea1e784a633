"""Generic pagination types shared by all list endpoints.

Paginated[T] is what services return; PaginatedResponse[T] is the serialized
envelope routers build from it.
"""

import math
from dataclasses import dataclass

from pydantic import BaseModel


@dataclass
class Paginated[T]:
    """Plain dataclass for paginated results inside the service layer.

    Services return this; routers convert it to ``PaginatedResponse`` after
    running each item through the resource's read schema::

        result = await project_service.list_projects(db, params)
        return listing(ProjectRead, result)
    """

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class PaginationMeta(BaseModel):
    """``{page, limit, total, pages}`` block carried by every listing."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def of(cls, result: Paginated[object]) -> "PaginationMeta":
        return cls(page=result.page, limit=result.limit, total=result.total, pages=result.pages)


class PaginatedResponse[T](BaseModel):
    """Listing envelope: ``{success, data, pagination, message?, query?}``.

    ``[T]`` is a Python 3.12 type parameter, so each resource reuses the same
    class without subclassing::

        ProjectListResponse = PaginatedResponse[ProjectRead]
    """

    success: bool = True
    data: list[T]
    pagination: PaginationMeta
    message: str | None = None
    query: str | None = None
