"""Authentication endpoints."""

from fastapi import APIRouter

from cms_api.dependencies import DB, CurrentUser
from cms_api.schemas.common import MessageResponse
from cms_api.schemas.envelope import ApiResponse, single
from cms_api.schemas.user import (
    AuthPayload,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    TokenPayload,
    UserRead,
)
from cms_api.security import create_access_token
from cms_api.services import auth as auth_service
from cms_api.services import user as user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse[AuthPayload], status_code=201)
async def register(db: DB, payload: RegisterRequest) -> ApiResponse[AuthPayload]:
    user, token = await auth_service.register(db, payload)
    data = AuthPayload(user=UserRead.model_validate(user), token=token)
    return ApiResponse(data=data, message="User registered successfully")


@router.post("/login", response_model=ApiResponse[AuthPayload])
async def login(db: DB, payload: LoginRequest) -> ApiResponse[AuthPayload]:
    user, token = await auth_service.login(db, payload)
    data = AuthPayload(user=UserRead.model_validate(user), token=token)
    return ApiResponse(data=data, message="Login successful")


@router.get("/me", response_model=ApiResponse[UserRead])
async def me(db: DB, principal: CurrentUser) -> ApiResponse[UserRead]:
    user = await user_service.get_user(db, principal.id)
    return single(UserRead, user)


@router.post("/refresh", response_model=ApiResponse[TokenPayload])
async def refresh_token(principal: CurrentUser) -> ApiResponse[TokenPayload]:
    token = create_access_token(
        user_id=principal.id, email=principal.email, role=principal.role
    )
    return ApiResponse(data=TokenPayload(token=token), message="Token refreshed successfully")


@router.post("/logout", response_model=MessageResponse)
async def logout(_: CurrentUser) -> MessageResponse:
    """Tokens are stateless; the client discards its copy."""
    return MessageResponse(message="Logout successful")


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    db: DB, principal: CurrentUser, payload: ChangePasswordRequest
) -> MessageResponse:
    await auth_service.change_password(db, principal.id, payload)
    return MessageResponse(message="Password changed successfully")
