"""Hero endpoints: the public landing payload, sections (admin) and social links."""

from fastapi import APIRouter, Depends

from cms_api.crud import READS, CrudRoute, mount_crud
from cms_api.dependencies import DB, ItemId, admin_guard
from cms_api.schemas.envelope import ApiResponse, single
from cms_api.schemas.hero import HeroData, HeroSectionCreate, HeroSectionRead, HeroSectionUpdate
from cms_api.services import hero as hero_service

router = APIRouter(prefix="/hero", tags=["hero"])


@router.get("", response_model=ApiResponse[HeroData])
async def get_hero(db: DB) -> ApiResponse[HeroData]:
    return ApiResponse(data=await hero_service.hero_data(db))


sections = APIRouter(prefix="/sections", dependencies=[Depends(admin_guard)])


@sections.post("", response_model=ApiResponse[HeroSectionRead], status_code=201)
async def create_section(db: DB, payload: HeroSectionCreate) -> ApiResponse[HeroSectionRead]:
    section = await hero_service.create_section(db, payload)
    return single(HeroSectionRead, section, "Hero section created successfully")


@sections.put("/{section_id}", response_model=ApiResponse[HeroSectionRead])
async def update_section(
    db: DB, section_id: ItemId, payload: HeroSectionUpdate
) -> ApiResponse[HeroSectionRead]:
    section = await hero_service.update_section(db, section_id, payload)
    return single(HeroSectionRead, section, "Hero section updated successfully")


mount_crud(
    sections,
    hero_service.HERO_SECTIONS,
    routes=READS | {CrudRoute.DELETE},
    protect_reads=True,
)

router.include_router(sections)
router.include_router(
    mount_crud(APIRouter(prefix="/social-media"), hero_service.SOCIAL_MEDIA)
)
