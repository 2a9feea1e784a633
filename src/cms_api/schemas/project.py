"""Project request/response schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import Field

from cms_api.models import ImageType, ProjectStatus
from cms_api.schemas.common import (
    CamelModel,
    LongText,
    NameArray,
    NameList,
    OptionalUrl,
    ReadModel,
    ShortText,
    Slug,
    Text,
    TimestampedRead,
    UpdateModel,
    Url,
    text,
)

Description = Annotated[str, text(1, 10_000)]
Rating = Annotated[int, Field(ge=1, le=5)]


class MetricsIn(CamelModel):
    users: ShortText | None = None
    performance: ShortText | None = None
    rating: ShortText | None = None
    downloads: ShortText | None = None
    revenue: ShortText | None = None
    uptime: ShortText | None = None


class LinksIn(CamelModel):
    live: OptionalUrl = None
    github: OptionalUrl = None
    case: Annotated[str, text(0, 500)] | None = None
    demo: OptionalUrl = None
    docs: OptionalUrl = None


class ImageIn(CamelModel):
    url: Url
    caption: Text | None = None
    order: int | None = Field(default=None, ge=0)
    type: ImageType = ImageType.SCREENSHOT


class ReviewIn(CamelModel):
    author: Text
    role: Text | None = None
    company: Text | None = None
    content: LongText
    rating: Rating | None = None


class ProjectCreate(CamelModel):
    title: Text
    subtitle: Text
    category_id: Slug
    type: ShortText
    description: Description
    image: OptionalUrl = None
    client: Text | None = None
    duration: ShortText | None = None
    year: Annotated[str, text(4, 10)] | None = None
    status: ProjectStatus = ProjectStatus.DEVELOPMENT
    icon: ShortText | None = None
    color: ShortText | None = None
    technologies: NameList = []
    features: NameList = []
    metrics: MetricsIn | None = None
    links: LinksIn | None = None


class ProjectUpdate(UpdateModel):
    nullable = frozenset(
        {"image", "client", "duration", "year", "icon", "color", "metrics", "links"}
    )

    title: Text | None = None
    subtitle: Text | None = None
    category_id: Slug | None = None
    type: ShortText | None = None
    description: Description | None = None
    image: OptionalUrl = None
    client: Text | None = None
    duration: ShortText | None = None
    year: Annotated[str, text(4, 10)] | None = None
    status: ProjectStatus | None = None
    icon: ShortText | None = None
    color: ShortText | None = None
    technologies: NameList | None = None
    features: NameList | None = None
    metrics: MetricsIn | None = None
    links: LinksIn | None = None


class MetricsRead(ReadModel):
    users: str | None
    performance: str | None
    rating: str | None
    downloads: str | None
    revenue: str | None
    uptime: str | None


class LinksRead(ReadModel):
    live: str | None
    github: str | None
    case: str | None
    demo: str | None
    docs: str | None


class ImageRead(ReadModel):
    id: int
    project_id: int
    url: str
    caption: str | None
    order: int
    type: ImageType


class ReviewRead(ReadModel):
    id: int
    author: str
    role: str | None
    company: str | None
    content: str
    rating: int | None
    avatar: str | None
    created_at: datetime


class CategoryBrief(ReadModel):
    id: str
    label: str


class ProjectRead(TimestampedRead):
    id: int
    title: str
    subtitle: str
    category_id: str
    category: CategoryBrief
    type: str
    description: str
    image: str | None
    client: str | None
    duration: str | None
    year: str | None
    status: ProjectStatus
    icon: str | None
    color: str | None
    technologies: NameArray
    features: NameArray
    metrics: MetricsRead | None
    links: LinksRead | None
    images: list[ImageRead]
    reviews: list[ReviewRead]


class ProjectSummary(ReadModel):
    id: int
    title: str
    status: ProjectStatus
    created_at: datetime


class StatusCount(CamelModel):
    status: ProjectStatus
    count: int


class CategoryCount(CamelModel):
    category_id: str
    count: int


class ProjectStatistics(CamelModel):
    total_projects: int
    projects_by_status: list[StatusCount]
    projects_by_category: list[CategoryCount]
    recent_projects: list[ProjectSummary]
