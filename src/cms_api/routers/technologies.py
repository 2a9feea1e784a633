"""Technology endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query

from cms_api.crud import ALL_ROUTES, CrudRoute, mount_crud
from cms_api.dependencies import DB, ItemId
from cms_api.listing import ListRules, SortOrder, SortSpec
from cms_api.models import Technology, project_technologies, service_technologies
from cms_api.resource import Dependents, Resource
from cms_api.schemas.envelope import ApiResponse
from cms_api.schemas.technology import (
    TechnologyCreate,
    TechnologyDetail,
    TechnologyRead,
    TechnologyUpdate,
)
from cms_api.services import technology as technology_service

TECHNOLOGIES = Resource(
    name="Technology",
    model=Technology,
    read=TechnologyRead,
    create=TechnologyCreate,
    update=TechnologyUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "name": "name", "createdAt": "created_at"},
        default_sort=SortSpec("name", SortOrder.ASC),
        search_fields=("name", "description"),
    ),
    dependents=(
        Dependents(project_technologies.c.technology_id, "projects", "projectCount"),
        Dependents(service_technologies.c.technology_id, "services", "serviceCount"),
    ),
)

Include = Annotated[str | None, Query(max_length=100)]

router = APIRouter(prefix="/technologies", tags=["technologies"])


@router.get("/name/{name}", response_model=ApiResponse[TechnologyDetail])
async def get_technology_by_name(
    db: DB, name: Annotated[str, Path(min_length=1, max_length=100)], include: Include = None
) -> ApiResponse[TechnologyDetail]:
    relations = technology_service.parse_technology_include(include)
    technology = await technology_service.get_technology_by_name(db, name, relations)
    return ApiResponse(data=technology)


mount_crud(router, TECHNOLOGIES, routes=ALL_ROUTES - {CrudRoute.GET})


# After mount_crud so that /search is matched first
@router.get("/{item_id}", response_model=ApiResponse[TechnologyDetail])
async def get_technology(
    db: DB, item_id: ItemId, include: Include = None
) -> ApiResponse[TechnologyDetail]:
    """Single technology; ``include=projects,services`` expands relations."""
    relations = technology_service.parse_technology_include(include)
    technology = await technology_service.get_technology(db, item_id, relations)
    return ApiResponse(data=technology)