"""About-us content: the resources behind the CRUD routes and the combined page payload."""

from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.exceptions import NotFoundError
from cms_api.listing import ListRules, SortOrder, SortSpec
from cms_api.models import CompanyInfo, CompanyStat, CompanyValue, TimelineItem
from cms_api.repositories import base as repo
from cms_api.resource import Resource
from cms_api.schemas.about import (
    AboutUsData,
    CompanyInfoCreate,
    CompanyInfoRead,
    CompanyInfoUpdate,
    CompanyStatCreate,
    CompanyStatRead,
    CompanyStatUpdate,
    CompanyValueCreate,
    CompanyValueRead,
    CompanyValueUpdate,
    TimelineItemCreate,
    TimelineItemRead,
    TimelineItemUpdate,
)

_ORDERED = {"id": "id", "order": "order", "createdAt": "created_at"}

COMPANY_VALUES = Resource(
    name="Company value",
    model=CompanyValue,
    read=CompanyValueRead,
    create=CompanyValueCreate,
    update=CompanyValueUpdate,
    rules=ListRules(
        sort_fields={**_ORDERED, "title": "title"},
        default_sort=SortSpec("order", SortOrder.ASC),
        search_fields=("title", "description"),
    ),
)

TIMELINE_ITEMS = Resource(
    name="Timeline item",
    model=TimelineItem,
    read=TimelineItemRead,
    create=TimelineItemCreate,
    update=TimelineItemUpdate,
    rules=ListRules(
        sort_fields={**_ORDERED, "year": "year", "title": "title"},
        default_sort=SortSpec("order", SortOrder.ASC),
        search_fields=("year", "title", "description", "achievement"),
    ),
)

COMPANY_STATS = Resource(
    name="Company stat",
    model=CompanyStat,
    read=CompanyStatRead,
    create=CompanyStatCreate,
    update=CompanyStatUpdate,
    rules=ListRules(
        sort_fields={**_ORDERED, "label": "label"},
        default_sort=SortSpec("order", SortOrder.ASC),
        search_fields=("label", "number"),
    ),
)

COMPANY_INFO = Resource(
    name="Company info",
    model=CompanyInfo,
    read=CompanyInfoRead,
    create=CompanyInfoCreate,
    update=CompanyInfoUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "companyName": "company_name", "createdAt": "created_at"},
        default_sort=SortSpec("created_at", SortOrder.DESC),
        search_fields=("company_name", "mission", "vision"),
    ),
)


async def main_company_info(db: AsyncSession) -> CompanyInfo | None:
    """The first company info record created; later rows are drafts."""
    rows = await repo.list_all(
        db, CompanyInfo, order_by=(CompanyInfo.created_at, CompanyInfo.id), limit=1
    )
    return rows[0] if rows else None


async def require_main_company_info(db: AsyncSession) -> CompanyInfo:
    info = await main_company_info(db)
    if info is None:
        raise NotFoundError("Company info")
    return info


async def complete(db: AsyncSession) -> AboutUsData:
    info = await main_company_info(db)
    values = await repo.list_all(db, CompanyValue, order_by=(CompanyValue.order, CompanyValue.id))
    timeline = await repo.list_all(db, TimelineItem, order_by=(TimelineItem.order, TimelineItem.id))
    stats = await repo.list_all(db, CompanyStat, order_by=(CompanyStat.order, CompanyStat.id))
    return AboutUsData(
        company_info=CompanyInfoRead.model_validate(info) if info else None,
        company_values=[CompanyValueRead.model_validate(row) for row in values],
        timeline_items=[TimelineItemRead.model_validate(row) for row in timeline],
        company_stats=[CompanyStatRead.model_validate(row) for row in stats],
    )
