"""Technology schemas."""

from enum import StrEnum
from typing import Annotated

from cms_api.schemas.common import (
    CamelModel,
    OptionalUrl,
    ReadModel,
    TimestampedRead,
    UpdateModel,
    text,
)

TechnologyName = Annotated[str, text(2, 100)]
TechnologyDescription = Annotated[str, text(0, 1000)]


class TechnologyInclude(StrEnum):
    """Relations a technology read may expand."""

    PROJECTS = "projects"
    SERVICES = "services"


class TechnologyCreate(CamelModel):
    name: TechnologyName
    icon: OptionalUrl = None
    description: TechnologyDescription | None = None


class TechnologyUpdate(UpdateModel):
    nullable = frozenset({"icon", "description"})

    name: TechnologyName | None = None
    icon: OptionalUrl = None
    description: TechnologyDescription | None = None


class TechnologyRead(TimestampedRead):
    id: int
    name: str
    icon: str | None
    description: str | None


class TechnologyProject(ReadModel):
    id: int
    title: str
    category_id: str


class TechnologyService(ReadModel):
    id: int
    title: str


class TechnologyDetail(TechnologyRead):
    """Technology with the relations requested through ``include``."""

    projects: list[TechnologyProject] | None = None
    services: list[TechnologyService] | None = None
