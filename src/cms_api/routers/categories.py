"""Project category endpoints."""

from typing import Any

from fastapi import APIRouter

from cms_api.dependencies import DB, Admin, ListParams, SlugId
from cms_api.schemas.category import (
    CategoryCreate,
    CategoryDetail,
    CategoryListItem,
    CategoryRead,
    CategoryUpdate,
    RecalculateResult,
)
from cms_api.schemas.common import MessageResponse
from cms_api.schemas.envelope import ApiResponse, listing, single
from cms_api.schemas.pagination import PaginatedResponse
from cms_api.services import category as category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=PaginatedResponse[CategoryListItem])
async def list_categories(db: DB, params: ListParams) -> PaginatedResponse[Any]:
    result = await category_service.list_categories(db, params)
    return listing(CategoryListItem, result)


@router.post("/recalculate", response_model=ApiResponse[RecalculateResult])
async def recalculate_counts(db: DB, _: Admin) -> ApiResponse[RecalculateResult]:
    result = await category_service.recalculate_counts(db)
    return ApiResponse(data=result, message="Category counts recalculated successfully")


@router.get("/{category_id}", response_model=ApiResponse[CategoryDetail])
async def get_category(db: DB, category_id: SlugId) -> ApiResponse[CategoryDetail]:
    category = await category_service.get_category(db, category_id)
    return single(CategoryDetail, category)


@router.post("", response_model=ApiResponse[CategoryRead], status_code=201)
async def create_category(
    db: DB, _: Admin, payload: CategoryCreate
) -> ApiResponse[CategoryRead]:
    category = await category_service.create_category(db, payload)
    return single(CategoryRead, category, "Category created successfully")


@router.put("/{category_id}", response_model=ApiResponse[CategoryRead])
async def update_category(
    db: DB, _: Admin, category_id: SlugId, payload: CategoryUpdate
) -> ApiResponse[CategoryRead]:
    category = await category_service.update_category(db, category_id, payload)
    return single(CategoryRead, category, "Category updated successfully")


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(db: DB, _: Admin, category_id: SlugId) -> MessageResponse:
    await category_service.delete_category(db, category_id)
    return MessageResponse(message="Category deleted successfully")
