"""Technology reads with optional relation expansion."""

from sqlalchemy import ColumnElement, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.base import ExecutableOption

from cms_api.exceptions import FieldError, NotFoundError, ValidationError
from cms_api.listing import Err, parse_include
from cms_api.models import Technology
from cms_api.repositories import base as repo
from cms_api.schemas.technology import (
    TechnologyDetail,
    TechnologyInclude,
    TechnologyProject,
    TechnologyRead,
    TechnologyService,
)


def parse_technology_include(raw: str | None) -> frozenset[TechnologyInclude]:
    parsed = parse_include(raw, TechnologyInclude)
    if isinstance(parsed, Err):
        raise ValidationError([FieldError("include", parsed.reason)])
    return parsed.value


def _options(include: frozenset[TechnologyInclude]) -> list[ExecutableOption]:
    return [selectinload(getattr(Technology, relation.value)) for relation in include]


def to_detail(
    technology: Technology, include: frozenset[TechnologyInclude]
) -> TechnologyDetail:
    """Serialize a technology; relations not requested are left out."""
    values = TechnologyRead.model_validate(technology).model_dump()
    if TechnologyInclude.PROJECTS in include:
        values["projects"] = [
            TechnologyProject.model_validate(project) for project in technology.projects
        ]
    if TechnologyInclude.SERVICES in include:
        values["services"] = [
            TechnologyService.model_validate(service) for service in technology.services
        ]
    return TechnologyDetail.model_validate(values)


async def _find(
    db: AsyncSession,
    predicate: ColumnElement[bool],
    identifier: object,
    include: frozenset[TechnologyInclude],
) -> TechnologyDetail:
    technology = await repo.get_one(db, Technology, predicate, options=_options(include))
    if technology is None:
        raise NotFoundError("Technology", identifier)
    return to_detail(technology, include)


async def get_technology(
    db: AsyncSession, technology_id: int, include: frozenset[TechnologyInclude]
) -> TechnologyDetail:
    return await _find(db, Technology.id == technology_id, technology_id, include)


async def get_technology_by_name(
    db: AsyncSession, name: str, include: frozenset[TechnologyInclude]
) -> TechnologyDetail:
    """Look a technology up by name, ignoring case."""
    predicate = func.lower(Technology.name) == name.strip().lower()
    return await _find(db, predicate, name, include)
