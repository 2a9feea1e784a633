"""Hero section and social link operations.

At most one hero section is active: activating a section (on create or
update) deactivates every other one in the same transaction.
"""

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.listing import FilterSpec, ListRules, SortOrder, SortSpec, parse_bool
from cms_api.logging import get_logger
from cms_api.models import HeroSection, SocialMedia
from cms_api.repositories import base as repo
from cms_api.resource import Resource
from cms_api.schemas.hero import (
    HeroData,
    HeroSectionCreate,
    HeroSectionRead,
    HeroSectionUpdate,
    SocialMediaCreate,
    SocialMediaRead,
    SocialMediaUpdate,
)
from cms_api.services import crud as crud_service

logger = get_logger(__name__)

HERO_SECTIONS = Resource(
    name="Hero section",
    model=HeroSection,
    read=HeroSectionRead,
    create=HeroSectionCreate,
    update=HeroSectionUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "mainTitle": "main_title", "createdAt": "created_at"},
        default_sort=SortSpec("created_at", SortOrder.DESC),
        filters={"isActive": FilterSpec("is_active", cast=parse_bool)},
        search_fields=("welcome_text", "main_title", "highlight_text", "description"),
    ),
)

SOCIAL_MEDIA = Resource(
    name="Social media",
    model=SocialMedia,
    read=SocialMediaRead,
    create=SocialMediaCreate,
    update=SocialMediaUpdate,
    rules=ListRules(
        sort_fields={"id": "id", "name": "name", "order": "order", "createdAt": "created_at"},
        default_sort=SortSpec("order", SortOrder.ASC),
        filters={"isActive": FilterSpec("is_active", cast=parse_bool)},
        search_fields=("name", "url"),
    ),
)


async def hero_data(db: AsyncSession) -> HeroData:
    """The newest active section with the active social links in display order."""
    sections = await repo.list_all(
        db,
        HeroSection,
        HeroSection.is_active.is_(True),
        order_by=(HeroSection.created_at.desc(), HeroSection.id.desc()),
        limit=1,
    )
    links = await repo.list_all(
        db,
        SocialMedia,
        SocialMedia.is_active.is_(True),
        order_by=(SocialMedia.order, SocialMedia.id),
    )
    return HeroData(
        hero=HeroSectionRead.model_validate(sections[0]) if sections else None,
        social_media=[SocialMediaRead.model_validate(link) for link in links],
    )


async def _deactivate_others(db: AsyncSession, keep_id: int) -> None:
    result = await db.execute(
        update(HeroSection)
        .where(HeroSection.is_active.is_(True), HeroSection.id != keep_id)
        .values(is_active=False)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        logger.info("hero_sections_deactivated", count=result.rowcount, active_id=keep_id)


async def create_section(db: AsyncSession, payload: HeroSectionCreate) -> HeroSection:
    section = await crud_service.create_row(db, HERO_SECTIONS, payload)
    if section.is_active:
        await _deactivate_others(db, section.id)
    return section


async def update_section(
    db: AsyncSession, section_id: int, payload: HeroSectionUpdate
) -> HeroSection:
    section = await crud_service.update_row(db, HERO_SECTIONS, section_id, payload)
    if payload.is_active:
        await _deactivate_others(db, section.id)
    return section
