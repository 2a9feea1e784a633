"""User administration endpoints. Every route requires an admin."""

from typing import Any

from fastapi import APIRouter, Depends

from cms_api.dependencies import DB, ItemId, ListParams, admin_guard
from cms_api.schemas.common import MessageResponse
from cms_api.schemas.envelope import ApiResponse, listing, single
from cms_api.schemas.pagination import PaginatedResponse
from cms_api.schemas.user import BulkDelete, BulkDeleteResult, UserCreate, UserRead, UserUpdate
from cms_api.services import user as user_service

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(admin_guard)])


@router.get("", response_model=PaginatedResponse[UserRead])
async def list_users(db: DB, params: ListParams) -> PaginatedResponse[Any]:
    """Paginated users; filter with ``role`` (``all`` for any), search with ``q``."""
    result = await user_service.list_users(db, params)
    return listing(UserRead, result)


@router.post("/bulk-delete", response_model=ApiResponse[BulkDeleteResult])
async def bulk_delete_users(db: DB, payload: BulkDelete) -> ApiResponse[BulkDeleteResult]:
    deleted = await user_service.bulk_delete(db, payload.ids)
    return ApiResponse(
        data=BulkDeleteResult(deleted_count=deleted),
        message=f"{deleted} user(s) deleted successfully",
    )


@router.get("/{user_id}", response_model=ApiResponse[UserRead])
async def get_user(db: DB, user_id: ItemId) -> ApiResponse[UserRead]:
    return single(UserRead, await user_service.get_user(db, user_id))


@router.post("", response_model=ApiResponse[UserRead], status_code=201)
async def create_user(db: DB, payload: UserCreate) -> ApiResponse[UserRead]:
    user = await user_service.create_from_payload(db, payload)
    return single(UserRead, user, "User created successfully")


@router.put("/{user_id}", response_model=ApiResponse[UserRead])
async def update_user(db: DB, user_id: ItemId, payload: UserUpdate) -> ApiResponse[UserRead]:
    user = await user_service.update_user(db, user_id, payload)
    return single(UserRead, user, "User updated successfully")


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(db: DB, user_id: ItemId) -> MessageResponse:
    await user_service.delete_user(db, user_id)
    return MessageResponse(message="User deleted successfully")
