"""FAQ endpoints: categories, items, stats and the grouped view."""

from typing import Any

from fastapi import APIRouter

from cms_api.crud import mount_crud
from cms_api.dependencies import DB, ListParams, SlugId
from cms_api.listing import FilterSpec, ListRules, SortOrder, SortSpec, parse_bool
from cms_api.models import FaqCategory, FaqItem
from cms_api.resource import Dependents, Reference, Resource
from cms_api.schemas.envelope import ApiResponse, listing
from cms_api.schemas.faq import (
    FaqCategoryCount,
    FaqCategoryCreate,
    FaqCategoryRead,
    FaqCategoryUpdate,
    FaqGroup,
    FaqItemCreate,
    FaqItemRead,
    FaqItemUpdate,
    FaqStats,
)
from cms_api.schemas.pagination import PaginatedResponse
from cms_api.services import crud as crud_service
from cms_api.services import faq as faq_service

FAQ_CATEGORIES = Resource(
    name="FAQ category",
    model=FaqCategory,
    read=FaqCategoryRead,
    create=FaqCategoryCreate,
    update=FaqCategoryUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "name": "name", "createdAt": "created_at"},
        default_sort=SortSpec("name", SortOrder.ASC),
        search_fields=("name",),
    ),
    dependents=(Dependents(FaqItem.category_id, "items", "itemCount"),),
    key=str,
)

FAQ_ITEMS = Resource(
    name="FAQ item",
    model=FaqItem,
    read=FaqItemRead,
    create=FaqItemCreate,
    update=FaqItemUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "question": "question", "createdAt": "created_at"},
        default_sort=SortSpec("id", SortOrder.ASC),
        filters={
            "category": FilterSpec("category_id"),
            "categoryId": FilterSpec("category_id"),
            "popular": FilterSpec("popular", cast=parse_bool),
        },
        search_fields=("question", "answer"),
    ),
    references=(Reference("category_id", FaqCategory, "FAQ category"),),
)

router = APIRouter(prefix="/faq", tags=["faq"])


@router.get("/grouped", response_model=ApiResponse[list[FaqGroup]])
async def grouped_faq(db: DB) -> ApiResponse[list[FaqGroup]]:
    groups = await faq_service.grouped(db)
    return ApiResponse(data=groups)


@router.get("/stats", response_model=ApiResponse[FaqStats])
async def faq_stats(db: DB) -> ApiResponse[FaqStats]:
    return ApiResponse(data=await faq_service.stats(db))


categories_router = mount_crud(APIRouter(prefix="/categories", tags=["faq"]), FAQ_CATEGORIES)


@categories_router.get("/{category_id}/count", response_model=ApiResponse[FaqCategoryCount])
async def count_category_items(db: DB, category_id: SlugId) -> ApiResponse[FaqCategoryCount]:
    return ApiResponse(data=await faq_service.count_items(db, category_id))


items_router = APIRouter(prefix="/items", tags=["faq"])


@items_router.get("/popular", response_model=PaginatedResponse[FaqItemRead])
async def list_popular_items(db: DB, params: ListParams) -> PaginatedResponse[Any]:
    popular = (FaqItem.popular.is_(True),)
    result = await crud_service.list_rows(db, FAQ_ITEMS, params, where=popular)
    return listing(FaqItemRead, result)


@items_router.get("/category/{category_id}", response_model=PaginatedResponse[FaqItemRead])
async def list_items_by_category(
    db: DB, params: ListParams, category_id: SlugId
) -> PaginatedResponse[Any]:
    in_category = (FaqItem.category_id == category_id,)
    result = await crud_service.list_rows(db, FAQ_ITEMS, params, where=in_category)
    return listing(FaqItemRead, result)


mount_crud(items_router, FAQ_ITEMS)

router.include_router(categories_router)
router.include_router(items_router)
