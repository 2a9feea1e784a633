"""Registration, login and password changes.

bcrypt is CPU-bound, so hashing and verification run in the threadpool.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from cms_api.exceptions import AuthenticationError
from cms_api.logging import get_logger
from cms_api.models import Role, User
from cms_api.schemas.user import ChangePasswordRequest, LoginRequest, RegisterRequest
from cms_api.security import create_access_token, verify_password
from cms_api.services import user as user_service

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def issue_token(user: User) -> str:
    return create_access_token(user_id=user.id, email=user.email, role=user.role)


async def register(db: AsyncSession, payload: RegisterRequest) -> tuple[User, str]:
    """Create a USER account; the role can only be raised by an admin."""
    user = await user_service.create_user(
        db, payload.name, payload.email, payload.password, Role.USER
    )
    logger.info("user_registered", user_id=user.id)
    return user, issue_token(user)


async def login(db: AsyncSession, payload: LoginRequest) -> tuple[User, str]:
    user = await user_service.find_by_email(db, payload.email)
    if user is None:
        logger.info("login_failed", reason="unknown_email")
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not await run_in_threadpool(verify_password, payload.password, user.password_hash):
        logger.info("login_failed", reason="bad_password", user_id=user.id)
        raise AuthenticationError(INVALID_CREDENTIALS)
    logger.info("login_succeeded", user_id=user.id)
    return user, issue_token(user)


async def change_password(
    db: AsyncSession, user_id: int, payload: ChangePasswordRequest
) -> None:
    user = await user_service.get_user(db, user_id)
    if not await run_in_threadpool(verify_password, payload.current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    await user_service.set_password(db, user, payload.new_password)
    logger.info("password_changed", user_id=user_id)
