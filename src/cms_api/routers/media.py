"""Media provider endpoints (admin)."""

from fastapi import APIRouter, Depends

from cms_api.dependencies import Storage, admin_guard
from cms_api.schemas.envelope import ApiResponse
from cms_api.schemas.media import BatchResult, DeletedImage, ImageBatch, ImageRef
from cms_api.services import media as media_service

router = APIRouter(prefix="/media", tags=["media"], dependencies=[Depends(admin_guard)])


@router.delete("/image", response_model=ApiResponse[DeletedImage])
async def delete_image(storage: Storage, payload: ImageRef) -> ApiResponse[DeletedImage]:
    deleted = await media_service.delete_image(storage, payload)
    message = "Image deleted successfully"
    if deleted.cache_invalidated:
        message += " and cache invalidated"
    return ApiResponse(data=deleted, message=message)


@router.delete("/images", response_model=ApiResponse[BatchResult])
async def delete_images(storage: Storage, payload: ImageBatch) -> ApiResponse[BatchResult]:
    """Per-image results; ``success`` is true when at least one image was deleted."""
    result = await media_service.delete_images(storage, payload)
    summary = result.summary
    return ApiResponse(
        success=summary.successful > 0,
        data=result,
        message=f"{summary.successful}/{summary.total} images deleted successfully",
    )
