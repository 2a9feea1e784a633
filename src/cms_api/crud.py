"""Router factory for generic CRUD resources.

``mount_crud`` appends the standard handler set for a ``Resource`` to a
router: list, search, get, create (201), update and delete. Reads are
public unless ``protect_reads`` is set; writes always go through the admin
guard. Routes a caller registers on the router beforehand take precedence,
so static paths like ``/popular`` are not shadowed by ``/{item_id}``.
``routes`` selects a subset, e.g. ``READS`` on a public router and
``WRITES`` on an admin one.
"""

from collections.abc import Set
from dataclasses import replace
from enum import StrEnum
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from cms_api.dependencies import DB, ItemId, ListParams, SlugId, admin_guard
from cms_api.listing import MAX_SEARCH_LENGTH
from cms_api.resource import Resource
from cms_api.schemas.common import MessageResponse
from cms_api.schemas.envelope import ApiResponse, listing, single
from cms_api.schemas.pagination import PaginatedResponse
from cms_api.services import crud as crud_service

SearchTerm = Annotated[str, Query(min_length=1, max_length=MAX_SEARCH_LENGTH)]


class CrudRoute(StrEnum):
    LIST = "list"
    SEARCH = "search"
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


READS = frozenset({CrudRoute.LIST, CrudRoute.SEARCH, CrudRoute.GET})
WRITES = frozenset({CrudRoute.CREATE, CrudRoute.UPDATE, CrudRoute.DELETE})
ALL_ROUTES = READS | WRITES


def mount_crud(
    router: APIRouter,
    resource: Resource,
    *,
    routes: Set[CrudRoute] = ALL_ROUTES,
    protect_reads: bool = False,
) -> APIRouter:
    Read: Any = resource.read
    Create: Any = resource.create
    Update: Any = resource.update
    Key: Any = ItemId if resource.key is int else SlugId
    read_guard = [Depends(admin_guard)] if protect_reads else []
    write_guard = [Depends(admin_guard)]

    if CrudRoute.LIST in routes:

        @router.get("", response_model=PaginatedResponse[Read], dependencies=read_guard)
        async def list_items(db: DB, params: ListParams) -> PaginatedResponse[Any]:
            result = await crud_service.list_rows(db, resource, params)
            return listing(Read, result)

    if CrudRoute.SEARCH in routes:

        @router.get("/search", response_model=PaginatedResponse[Read], dependencies=read_guard)
        async def search_items(
            db: DB, params: ListParams, q: SearchTerm
        ) -> PaginatedResponse[Any]:
            query = replace(params, search=q)
            result = await crud_service.list_rows(db, resource, query)
            return listing(Read, result, query=q.strip())

    if CrudRoute.GET in routes:

        @router.get("/{item_id}", response_model=ApiResponse[Read], dependencies=read_guard)
        async def get_item(db: DB, item_id: Key) -> ApiResponse[Any]:
            row = await crud_service.get_row(db, resource, item_id)
            return single(Read, row)

    if CrudRoute.CREATE in routes:

        @router.post(
            "", response_model=ApiResponse[Read], status_code=201, dependencies=write_guard
        )
        async def create_item(db: DB, payload: Create) -> ApiResponse[Any]:
            row = await crud_service.create_row(db, resource, payload)
            return single(Read, row, f"{resource.name} created successfully")

    if CrudRoute.UPDATE in routes:

        @router.put("/{item_id}", response_model=ApiResponse[Read], dependencies=write_guard)
        async def update_item(db: DB, item_id: Key, payload: Update) -> ApiResponse[Any]:
            row = await crud_service.update_row(db, resource, item_id, payload)
            return single(Read, row, f"{resource.name} updated successfully")

    if CrudRoute.DELETE in routes:

        @router.delete("/{item_id}", response_model=MessageResponse, dependencies=write_guard)
        async def delete_item(db: DB, item_id: Key) -> MessageResponse:
            await crud_service.delete_row(db, resource, item_id)
            return MessageResponse(message=f"{resource.name} deleted successfully")

    return router
