"""Project endpoints."""

from typing import Any

from fastapi import APIRouter

from cms_api.dependencies import DB, Admin, ItemId, ListParams
from cms_api.schemas.category import CategoryRead
from cms_api.schemas.common import MessageResponse
from cms_api.schemas.envelope import ApiResponse, listing, many, single
from cms_api.schemas.pagination import PaginatedResponse
from cms_api.schemas.project import (
    ImageIn,
    ImageRead,
    ProjectCreate,
    ProjectRead,
    ProjectStatistics,
    ProjectUpdate,
    ReviewIn,
    ReviewRead,
)
from cms_api.services import project as project_service

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=PaginatedResponse[ProjectRead])
async def list_projects(db: DB, params: ListParams) -> PaginatedResponse[Any]:
    """Paginated projects; filter by ``category``/``status``, search with ``q``."""
    result = await project_service.list_projects(db, params)
    return listing(ProjectRead, result)


@router.get("/categories", response_model=ApiResponse[list[CategoryRead]])
async def list_project_categories(db: DB) -> ApiResponse[list[CategoryRead]]:
    categories = await project_service.list_categories(db)
    return many(CategoryRead, categories)


@router.get("/statistics", response_model=ApiResponse[ProjectStatistics])
async def project_statistics(db: DB) -> ApiResponse[ProjectStatistics]:
    statistics = await project_service.get_statistics(db)
    return ApiResponse(data=statistics)


@router.get("/{project_id}", response_model=ApiResponse[ProjectRead])
async def get_project(db: DB, project_id: ItemId) -> ApiResponse[ProjectRead]:
    project = await project_service.get_project(db, project_id)
    return single(ProjectRead, project)


@router.post("", response_model=ApiResponse[ProjectRead], status_code=201)
async def create_project(db: DB, _: Admin, payload: ProjectCreate) -> ApiResponse[ProjectRead]:
    project = await project_service.create_project(db, payload)
    return single(ProjectRead, project, "Project created successfully")


@router.put("/{project_id}", response_model=ApiResponse[ProjectRead])
async def update_project(
    db: DB, _: Admin, project_id: ItemId, payload: ProjectUpdate
) -> ApiResponse[ProjectRead]:
    project = await project_service.update_project(db, project_id, payload)
    return single(ProjectRead, project, "Project updated successfully")


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(db: DB, _: Admin, project_id: ItemId) -> MessageResponse:
    await project_service.delete_project(db, project_id)
    return MessageResponse(message="Project deleted successfully")


@router.post("/{project_id}/images", response_model=ApiResponse[ImageRead], status_code=201)
async def add_project_image(
    db: DB, _: Admin, project_id: ItemId, payload: ImageIn
) -> ApiResponse[ImageRead]:
    image = await project_service.add_image(db, project_id, payload)
    return single(ImageRead, image, "Image added successfully")


@router.delete("/images/{image_id}", response_model=MessageResponse)
async def delete_project_image(db: DB, _: Admin, image_id: ItemId) -> MessageResponse:
    await project_service.delete_image(db, image_id)
    return MessageResponse(message="Image deleted successfully")


@router.post("/{project_id}/reviews", response_model=ApiResponse[ReviewRead], status_code=201)
async def add_project_review(
    db: DB, _: Admin, project_id: ItemId, payload: ReviewIn
) -> ApiResponse[ReviewRead]:
    review = await project_service.add_review(db, project_id, payload)
    return single(ReviewRead, review, "Review added successfully")


@router.delete("/reviews/{review_id}", response_model=MessageResponse)
async def delete_project_review(db: DB, _: Admin, review_id: ItemId) -> MessageResponse:
    await project_service.delete_review(db, review_id)
    return MessageResponse(message="Review deleted successfully")
