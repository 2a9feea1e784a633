"""Admin dashboard endpoint."""

from fastapi import APIRouter

from cms_api.dependencies import DB, Admin
from cms_api.schemas.dashboard import DashboardStats
from cms_api.schemas.envelope import ApiResponse
from cms_api.services import dashboard as dashboard_service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=ApiResponse[DashboardStats])
async def get_stats(db: DB, _: Admin) -> ApiResponse[DashboardStats]:
    return ApiResponse(data=await dashboard_service.get_stats(db))
