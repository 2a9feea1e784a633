"""Project category schemas."""

from pydantic import Field

from cms_api.models import ProjectStatus
from cms_api.schemas.common import (
    CamelModel,
    NameArray,
    ReadModel,
    ShortText,
    Slug,
    TimestampedRead,
    UpdateModel,
)


class CategoryCreate(CamelModel):
    id: Slug
    label: ShortText


class CategoryUpdate(UpdateModel):
    label: ShortText | None = None


class CategoryRead(TimestampedRead):
    id: str
    label: str
    count: int


class CategoryListItem(CategoryRead):
    """Listing row: ``projectCount`` is computed at read time."""

    project_count: int = Field(default=0)


class CategoryProject(ReadModel):
    id: int
    title: str
    subtitle: str
    type: str
    image: str | None
    status: ProjectStatus
    year: str | None
    technologies: NameArray
    features: NameArray


class CategoryDetail(CategoryRead):
    projects: list[CategoryProject]


class RecalculateResult(CamelModel):
    updated: int
    counts: dict[str, int]
