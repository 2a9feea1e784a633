"""Project category business logic.

Listings report ``projectCount`` computed from the projects table. The
stored ``count`` column is maintained by project writes and can be rebuilt
with ``recalculate_counts``.
"""

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cms_api.exceptions import ConflictError, DependencyInUseError, NotFoundError
from cms_api.listing import ListRules, RawListParams, SortOrder, SortSpec, resolve
from cms_api.logging import get_logger
from cms_api.models import Category, Project
from cms_api.repositories import base as repo
from cms_api.schemas.category import CategoryCreate, CategoryUpdate, RecalculateResult
from cms_api.schemas.pagination import Paginated

logger = get_logger(__name__)

CATEGORY_RULES = ListRules(
    sort_fields={"id": "id", "label": "label", "createdAt": "created_at"},
    default_sort=SortSpec("label", SortOrder.ASC),
    search_fields=("id", "label"),
)


async def project_counts(
    db: AsyncSession, category_ids: Sequence[str] | None = None
) -> dict[str, int]:
    stmt = select(Project.category_id, func.count()).group_by(Project.category_id)
    if category_ids is not None:
        stmt = stmt.where(Project.category_id.in_(category_ids))
    result = await db.execute(stmt)
    return {category_id: count for category_id, count in result.all()}


async def list_categories(db: AsyncSession, params: RawListParams) -> Paginated[Category]:
    query = resolve(params, CATEGORY_RULES)
    page = await repo.fetch_page(db, Category, query, search_fields=CATEGORY_RULES.search_fields)
    counts = await project_counts(db, [category.id for category in page.items])
    for category in page.items:
        category.project_count = counts.get(category.id, 0)  # type: ignore[attr-defined]
    return page


async def get_category(db: AsyncSession, category_id: str) -> Category:
    projects = selectinload(Category.projects)
    category = await repo.get_by_pk(
        db,
        Category,
        category_id,
        options=(
            projects.selectinload(Project.technologies),
            projects.selectinload(Project.features),
        ),
    )
    if category is None:
        raise NotFoundError("Category", category_id)
    return category


async def _require(db: AsyncSession, category_id: str) -> Category:
    category = await repo.get_by_pk(db, Category, category_id)
    if category is None:
        raise NotFoundError("Category", category_id)
    return category


async def create_category(db: AsyncSession, payload: CategoryCreate) -> Category:
    if await repo.get_by_pk(db, Category, payload.id) is not None:
        raise ConflictError("Category ID already exists")
    category = Category(id=payload.id, label=payload.label, count=0)
    await repo.add(db, category)
    logger.info("category_created", category_id=category.id)
    return await _refreshed(db, category.id)


async def update_category(
    db: AsyncSession, category_id: str, payload: CategoryUpdate
) -> Category:
    category = await _require(db, category_id)
    for field, value in payload.changes().items():
        setattr(category, field, value)
    await db.flush()
    logger.info("category_updated", category_id=category_id)
    return await _refreshed(db, category_id)


async def _refreshed(db: AsyncSession, category_id: str) -> Category:
    category = await repo.get_by_pk(db, Category, category_id, fresh=True)
    if category is None:
        raise NotFoundError("Category", category_id)
    return category


async def delete_category(db: AsyncSession, category_id: str) -> None:
    """Delete a category that no project references."""
    category = await _require(db, category_id)
    in_use = (await project_counts(db, [category_id])).get(category_id, 0)
    if in_use:
        message = "Cannot delete category with existing projects"
        raise DependencyInUseError(message, error=message, projectCount=in_use)
    await repo.delete(db, category)
    logger.info("category_deleted", category_id=category_id)


async def recalculate_counts(db: AsyncSession) -> RecalculateResult:
    """Rebuild every stored ``count`` from the projects table."""
    counts = await project_counts(db)
    categories = await repo.list_all(db, Category, order_by=(Category.id,))
    updated = 0
    for category in categories:
        actual = counts.get(category.id, 0)
        if category.count != actual:
            category.count = actual
            updated += 1
    await db.flush()
    logger.info("category_counts_recalculated", updated=updated)
    return RecalculateResult(
        updated=updated, counts={category.id: category.count for category in categories}
    )
