"""FAQ reads beyond generic CRUD."""

from itertools import groupby

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.models import FaqCategory, FaqItem
from cms_api.repositories import base as repo
from cms_api.schemas.faq import FaqCategoryCount, FaqCategoryRead, FaqGroup, FaqItemRead, FaqStats


async def grouped(db: AsyncSession) -> list[FaqGroup]:
    """Every category by name with its items in id order.

    Categories without items are included with an empty list.
    """
    categories = await repo.list_all(db, FaqCategory, order_by=(FaqCategory.name,))
    items = await repo.list_all(db, FaqItem, order_by=(FaqItem.category_id, FaqItem.id))
    by_category = {
        category_id: list(rows)
        for category_id, rows in groupby(items, key=lambda item: item.category_id)
    }
    return [
        FaqGroup(
            category=FaqCategoryRead.model_validate(category),
            items=[FaqItemRead.model_validate(item) for item in by_category.get(category.id, [])],
        )
        for category in categories
    ]


async def count_items(db: AsyncSession, category_id: str) -> FaqCategoryCount:
    """Items filed under ``category_id``; an unknown category counts zero."""
    count = await repo.count_rows(db, FaqItem, [FaqItem.category_id == category_id])
    return FaqCategoryCount(category_id=category_id, count=count)


async def stats(db: AsyncSession) -> FaqStats:
    by_category = await db.execute(
        select(FaqItem.category_id, func.count())
        .group_by(FaqItem.category_id)
        .order_by(FaqItem.category_id)
    )
    return FaqStats(
        total_items=await repo.count_rows(db, FaqItem),
        total_categories=await repo.count_rows(db, FaqCategory),
        popular_items=await repo.count_rows(db, FaqItem, [FaqItem.popular.is_(True)]),
        items_by_category=[
            FaqCategoryCount(category_id=category_id, count=count)
            for category_id, count in by_category.all()
        ],
    )
