"""Client and testimonial endpoints."""

from dataclasses import replace
from typing import Any

from fastapi import APIRouter
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.crud import mount_crud
from cms_api.dependencies import DB, ItemId, ListParams
from cms_api.listing import (
    FilterSpec,
    ListRules,
    Match,
    RawListParams,
    SortOrder,
    SortSpec,
    parse_bool,
)
from cms_api.models import Client, Project, Testimonial
from cms_api.resource import Dependents, Reference, Resource
from cms_api.schemas.client import (
    ClientCreate,
    ClientRead,
    ClientUpdate,
    TestimonialCreate,
    TestimonialRead,
    TestimonialUpdate,
)
from cms_api.schemas.envelope import listing
from cms_api.schemas.pagination import PaginatedResponse
from cms_api.services import crud as crud_service

CLIENTS = Resource(
    name="Client",
    model=Client,
    read=ClientRead,
    create=ClientCreate,
    update=ClientUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "name": "name", "industry": "industry", "createdAt": "created_at"},
        default_sort=SortSpec("id", SortOrder.ASC),
        filters={
            "industry": FilterSpec("industry", Match.CONTAINS),
            "isActive": FilterSpec("is_active", cast=parse_bool),
        },
        search_fields=("name", "industry"),
    ),
    dependents=(Dependents(Testimonial.client_id, "testimonials", "testimonialCount"),),
)

TESTIMONIALS = Resource(
    name="Testimonial",
    model=Testimonial,
    read=TestimonialRead,
    create=TestimonialCreate,
    update=TestimonialUpdate,
    rules=ListRules(
        sort_fields={
            "id": "id",
            "author": "author",
            "rating": "rating",
            "createdAt": "created_at",
        },
        default_sort=SortSpec("created_at", SortOrder.DESC),
        filters={
            "projectId": FilterSpec("project_id", cast=int),
            "clientId": FilterSpec("client_id", cast=int),
        },
        search_fields=("author", "company", "content"),
    ),
    references=(
        Reference("project_id", Project, "Project"),
        Reference("client_id", Client, "Client"),
    ),
    loads=("project", "client"),
)

clients_router = APIRouter(prefix="/clients", tags=["clients"])
mount_crud(clients_router, CLIENTS)

testimonials_router = APIRouter(prefix="/testimonials", tags=["testimonials"])


async def _testimonials_for(
    db: AsyncSession, params: RawListParams, key: str, value: int
) -> PaginatedResponse[Any]:
    query = replace(params, extra={**params.extra, key: str(value)})
    result = await crud_service.list_rows(db, TESTIMONIALS, query)
    return listing(TestimonialRead, result)


@testimonials_router.get(
    "/project/{project_id}", response_model=PaginatedResponse[TestimonialRead]
)
async def list_project_testimonials(
    db: DB, params: ListParams, project_id: ItemId
) -> PaginatedResponse[Any]:
    return await _testimonials_for(db, params, "projectId", project_id)


@testimonials_router.get("/client/{client_id}", response_model=PaginatedResponse[TestimonialRead])
async def list_client_testimonials(
    db: DB, params: ListParams, client_id: ItemId
) -> PaginatedResponse[Any]:
    return await _testimonials_for(db, params, "clientId", client_id)


mount_crud(testimonials_router, TESTIMONIALS)
