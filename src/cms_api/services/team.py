"""Team member lookups beyond generic CRUD."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.exceptions import NotFoundError
from cms_api.models import TeamMember
from cms_api.repositories import base as repo
from cms_api.schemas.team import MetaField

META_COLUMNS = {
    MetaField.DEPARTMENTS: TeamMember.department,
    MetaField.POSITIONS: TeamMember.position,
    MetaField.SPECIALITIES: TeamMember.speciality,
}


async def distinct_values(db: AsyncSession, field: MetaField) -> list[str]:
    """Sorted distinct values of one team member column."""
    target = META_COLUMNS[field]
    result = await db.execute(select(target).distinct().order_by(target))
    return list(result.scalars().all())


async def get_by_name(db: AsyncSession, name: str) -> TeamMember:
    """First member whose name matches exactly, after trimming."""
    members = await repo.list_all(
        db, TeamMember, TeamMember.name == name.strip(), order_by=(TeamMember.id,), limit=1
    )
    if not members:
        raise NotFoundError("Team member", name)
    return members[0]
