"""About-us endpoints."""

from fastapi import APIRouter

from cms_api.crud import mount_crud
from cms_api.dependencies import DB
from cms_api.schemas.about import AboutUsData, CompanyInfoRead
from cms_api.schemas.envelope import ApiResponse, single
from cms_api.services import about as about_service

router = APIRouter(prefix="/about", tags=["about"])


@router.get("/complete", response_model=ApiResponse[AboutUsData])
async def get_complete(db: DB) -> ApiResponse[AboutUsData]:
    """Main company info plus values, timeline and stats in display order."""
    return ApiResponse(data=await about_service.complete(db))


company_info = APIRouter(prefix="/company-info")


@company_info.get("/main", response_model=ApiResponse[CompanyInfoRead])
async def get_main_company_info(db: DB) -> ApiResponse[CompanyInfoRead]:
    return single(CompanyInfoRead, await about_service.require_main_company_info(db))


for prefix, resource in (
    ("/company-values", about_service.COMPANY_VALUES),
    ("/timeline-items", about_service.TIMELINE_ITEMS),
    ("/company-stats", about_service.COMPANY_STATS),
):
    router.include_router(mount_crud(APIRouter(prefix=prefix), resource))

router.include_router(mount_crud(company_info, about_service.COMPANY_INFO))
