"""Team member endpoints."""

from dataclasses import replace
from typing import Annotated, Any

from fastapi import APIRouter, Path

from cms_api.crud import mount_crud
from cms_api.dependencies import DB, ListParams
from cms_api.listing import FilterSpec, ListRules, Match, SortOrder, SortSpec
from cms_api.models import TeamMember
from cms_api.resource import Resource
from cms_api.schemas.envelope import ApiResponse, listing, single
from cms_api.schemas.pagination import PaginatedResponse
from cms_api.schemas.team import MetaField, TeamMemberCreate, TeamMemberRead, TeamMemberUpdate
from cms_api.services import crud as crud_service
from cms_api.services import team as team_service

TEAM_MEMBERS = Resource(
    name="Team member",
    model=TeamMember,
    read=TeamMemberRead,
    create=TeamMemberCreate,
    update=TeamMemberUpdate,
    rules=ListRules(
        sort_fields={
            "id": "id",
            "name": "name",
            "position": "position",
            "department": "department",
            "experience": "experience",
            "createdAt": "created_at",
        },
        default_sort=SortSpec("id", SortOrder.ASC),
        filters={
            "department": FilterSpec("department", Match.IEXACT),
            "position": FilterSpec("position", Match.IEXACT),
            "speciality": FilterSpec("speciality", Match.IEXACT),
        },
        search_fields=("name", "position", "department", "speciality", "bio"),
    ),
)

router = APIRouter(prefix="/team-members", tags=["team"])


@router.get("/meta/{field}", response_model=ApiResponse[list[str]])
async def list_meta_values(db: DB, field: MetaField) -> ApiResponse[list[str]]:
    """Distinct departments, positions or specialities."""
    values = await team_service.distinct_values(db, field)
    return ApiResponse(data=values, message=f"{field.value.capitalize()} retrieved successfully")


@router.get("/name/{name}", response_model=ApiResponse[TeamMemberRead])
async def get_team_member_by_name(
    db: DB, name: Annotated[str, Path(min_length=1, max_length=100)]
) -> ApiResponse[TeamMemberRead]:
    return single(TeamMemberRead, await team_service.get_by_name(db, name))


@router.get("/department/{department}", response_model=PaginatedResponse[TeamMemberRead])
async def list_by_department(
    db: DB, params: ListParams, department: Annotated[str, Path(min_length=1, max_length=100)]
) -> PaginatedResponse[Any]:
    query = replace(params, extra={**params.extra, "department": department})
    result = await crud_service.list_rows(db, TEAM_MEMBERS, query)
    return listing(TeamMemberRead, result)


mount_crud(router, TEAM_MEMBERS)
