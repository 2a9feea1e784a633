"""Project business logic.

Listing and loading follow the generic resource rules. Writes are custom:
the category must exist, technologies and features are connect-or-create
by name, metrics and links are upserted, and the denormalized
``Category.count`` moves with every project in the same transaction.
"""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.exceptions import FieldError, InvalidReferenceError, NotFoundError
from cms_api.listing import FilterSpec, ListRules, RawListParams, SortOrder, SortSpec
from cms_api.logging import get_logger
from cms_api.models import (
    Category,
    Feature,
    Project,
    ProjectImage,
    ProjectLinks,
    ProjectMetrics,
    ProjectStatus,
    Technology,
    Testimonial,
)
from cms_api.repositories import base as repo
from cms_api.resource import NameRelation, Resource
from cms_api.schemas.pagination import Paginated
from cms_api.schemas.project import (
    CategoryCount,
    ImageIn,
    ProjectCreate,
    ProjectRead,
    ProjectStatistics,
    ProjectSummary,
    ProjectUpdate,
    ReviewIn,
    StatusCount,
)
from cms_api.services import crud

logger = get_logger(__name__)

PROJECTS = Resource(
    name="Project",
    model=Project,
    read=ProjectRead,
    create=ProjectCreate,
    update=ProjectUpdate,
    rules=ListRules(
        sort_fields={"createdAt": "created_at", "title": "title", "year": "year"},
        default_sort=SortSpec("created_at", SortOrder.DESC),
        filters={
            "category": FilterSpec("category_id"),
            "status": FilterSpec("status", cast=ProjectStatus),
        },
        search_fields=("title", "subtitle", "description"),
    ),
    relations=(
        NameRelation("technologies", Technology),
        NameRelation("features", Feature),
    ),
    loads=("category", "technologies", "features", "metrics", "links", "images", "reviews"),
)

# Nested one-to-one rows, keyed by relationship name
_NESTED: dict[str, type[ProjectMetrics] | type[ProjectLinks]] = {
    "metrics": ProjectMetrics,
    "links": ProjectLinks,
}
_NOT_COLUMNS = frozenset({*PROJECTS.relation_fields, *_NESTED})


async def list_projects(db: AsyncSession, params: RawListParams) -> Paginated[Project]:
    return await crud.list_rows(db, PROJECTS, params)


async def get_project(db: AsyncSession, project_id: int, fresh: bool = False) -> Project:
    return await crud.get_row(db, PROJECTS, project_id, fresh=fresh)  # type: ignore[no-any-return]


async def _require_category(db: AsyncSession, category_id: str) -> Category:
    category = await repo.get_by_pk(db, Category, category_id)
    if category is None:
        raise InvalidReferenceError(
            "Invalid category",
            [FieldError("categoryId", f"Category '{category_id}' does not exist")],
        )
    return category


def _adjust_count(category: Category | None, delta: int) -> None:
    if category is not None:
        category.count = max(category.count + delta, 0)


def _upsert_nested(project: Project, name: str, values: dict[str, Any] | None) -> None:
    """Replace, update or clear a one-to-one child. ``None`` removes it."""
    if values is None:
        setattr(project, name, None)
        return
    current = getattr(project, name)
    if current is None:
        setattr(project, name, _NESTED[name](**values))
        return
    for field, value in values.items():
        setattr(current, field, value)


async def create_project(db: AsyncSession, payload: ProjectCreate) -> Project:
    category = await _require_category(db, payload.category_id)
    project = Project(**payload.model_dump(exclude_none=True, exclude=_NOT_COLUMNS))
    await crud.apply_relations(
        db, PROJECTS, project, payload.model_dump(include=PROJECTS.relation_fields)
    )
    for name in _NESTED:
        nested = getattr(payload, name)
        if nested is not None:
            setattr(project, name, _NESTED[name](**nested.model_dump()))
    _adjust_count(category, 1)
    await repo.add(db, project)
    logger.info("project_created", project_id=project.id, category_id=project.category_id)
    return await get_project(db, project.id, fresh=True)


async def update_project(db: AsyncSession, project_id: int, payload: ProjectUpdate) -> Project:
    project = await get_project(db, project_id)
    changes = payload.changes()
    relations = {name: changes.pop(name) for name in PROJECTS.relation_fields if name in changes}
    nested = {name: changes.pop(name) for name in _NESTED if name in changes}

    new_category_id = changes.get("category_id")
    if new_category_id is not None and new_category_id != project.category_id:
        new_category = await _require_category(db, new_category_id)
        old_category = await repo.get_by_pk(db, Category, project.category_id)
        _adjust_count(old_category, -1)
        _adjust_count(new_category, 1)

    for field, value in changes.items():
        setattr(project, field, value)
    await crud.apply_relations(db, PROJECTS, project, relations)
    for name, values in nested.items():
        _upsert_nested(project, name, values)
    await db.flush()
    logger.info("project_updated", project_id=project_id, fields=sorted(payload.model_fields_set))
    return await get_project(db, project_id, fresh=True)


async def delete_project(db: AsyncSession, project_id: int) -> None:
    project = await get_project(db, project_id)
    category_id = project.category_id
    _adjust_count(await repo.get_by_pk(db, Category, category_id), -1)
    await repo.delete(db, project)
    logger.info("project_deleted", project_id=project_id, category_id=category_id)


async def list_categories(db: AsyncSession) -> list[Category]:
    return await repo.list_all(db, Category, order_by=(Category.label,))


async def get_statistics(db: AsyncSession) -> ProjectStatistics:
    total = await repo.count_rows(db, Project)
    by_status = await db.execute(
        select(Project.status, func.count()).group_by(Project.status).order_by(Project.status)
    )
    by_category = await db.execute(
        select(Project.category_id, func.count())
        .group_by(Project.category_id)
        .order_by(Project.category_id)
    )
    recent = await repo.list_all(
        db, Project, order_by=(Project.created_at.desc(), Project.id.desc()), limit=5
    )
    return ProjectStatistics(
        total_projects=total,
        projects_by_status=[StatusCount(status=s, count=n) for s, n in by_status.all()],
        projects_by_category=[CategoryCount(category_id=c, count=n) for c, n in by_category.all()],
        recent_projects=[ProjectSummary.model_validate(project) for project in recent],
    )


async def _require_project(db: AsyncSession, project_id: int) -> Project:
    project = await repo.get_by_pk(db, Project, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    return project


async def add_image(db: AsyncSession, project_id: int, payload: ImageIn) -> ProjectImage:
    """Attach an image; without an explicit order it goes after the last one."""
    await _require_project(db, project_id)
    order = payload.order
    if order is None:
        result = await db.execute(
            select(func.max(ProjectImage.order)).where(ProjectImage.project_id == project_id)
        )
        current = result.scalar_one_or_none()
        order = 0 if current is None else current + 1
    image = ProjectImage(
        project_id=project_id,
        url=payload.url,
        caption=payload.caption,
        order=order,
        type=payload.type,
    )
    await repo.add(db, image)
    logger.info("project_image_added", project_id=project_id, image_id=image.id)
    return image


async def delete_image(db: AsyncSession, image_id: int) -> None:
    image = await repo.get_by_pk(db, ProjectImage, image_id)
    if image is None:
        raise NotFoundError("Image", image_id)
    await repo.delete(db, image)
    logger.info("project_image_deleted", image_id=image_id)


async def add_review(db: AsyncSession, project_id: int, payload: ReviewIn) -> Testimonial:
    await _require_project(db, project_id)
    review = Testimonial(project_id=project_id, **payload.model_dump())
    await repo.add(db, review)
    logger.info("project_review_added", project_id=project_id, review_id=review.id)
    await db.refresh(review)
    return review


async def delete_review(db: AsyncSession, review_id: int) -> None:
    review = await repo.get_one(
        db, Testimonial, Testimonial.id == review_id, Testimonial.project_id.is_not(None)
    )
    if review is None:
        raise NotFoundError("Review", review_id)
    await repo.delete(db, review)
    logger.info("project_review_deleted", review_id=review_id)
