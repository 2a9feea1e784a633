"""Shared FastAPI dependencies.

Reusable type aliases and dependency functions that routers import.
Defined here (not in main.py) to avoid circular imports when routers
are registered in main.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated

import structlog
from fastapi import Depends, Header, Path, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from cms_api.config import settings
from cms_api.db.session import get_db
from cms_api.exceptions import AuthenticationError, PermissionDeniedError
from cms_api.listing import RawListParams
from cms_api.media import MediaStorage
from cms_api.models import Role, User
from cms_api.rate_limit import RateLimiter
from cms_api.repositories.base import get_by_pk
from cms_api.security import decode_access_token

DB = Annotated[AsyncSession, Depends(get_db)]

# Path parameters: non-positive or non-numeric ids fail validation (400)
ItemId = Annotated[int, Path(gt=0)]
SlugId = Annotated[str, Path(min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")]


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as loaded from the users table."""

    id: int
    email: str
    role: Role


def bearer_token(authorization: Annotated[str | None, Header()] = None) -> str:
    scheme, _, token = (authorization or "").strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError(
            "Access token required", error="Please provide a valid Bearer token"
        )
    return token.strip()


async def get_current_user(
    db: DB, token: Annotated[str, Depends(bearer_token)]
) -> Principal:
    claims = decode_access_token(token)
    user = await get_by_pk(db, User, claims.user_id)
    if user is None:
        raise AuthenticationError("User no longer exists", error="Invalid token")
    structlog.contextvars.bind_contextvars(user_id=user.id)
    return Principal(id=user.id, email=user.email, role=user.role)


CurrentUser = Annotated[Principal, Depends(get_current_user)]


def require_roles(*roles: Role) -> Callable[[Principal], Awaitable[Principal]]:
    """Dependency factory: the caller must hold one of ``roles``."""

    async def check(principal: CurrentUser) -> Principal:
        if principal.role not in roles:
            raise PermissionDeniedError(
                f"This action requires one of the following roles: {', '.join(roles)}",
                userRole=principal.role,
            )
        return principal

    return check


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter  # type: ignore[no-any-return]


async def rate_limited(
    principal: CurrentUser, limiter: Annotated[RateLimiter, Depends(get_rate_limiter)]
) -> Principal:
    if settings.rate_limit_enabled:
        await limiter.check(f"user:{principal.id}")
    return principal


async def admin_guard(
    principal: Annotated[Principal, Depends(require_roles(Role.ADMIN))],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> Principal:
    """Admin role plus the per-principal rate limit; guards every write route."""
    return await rate_limited(principal, limiter)


Admin = Annotated[Principal, Depends(admin_guard)]


def list_params(
    request: Request,
    page: Annotated[int | None, Query()] = None,
    limit: Annotated[int | None, Query()] = None,
    sort: Annotated[str | None, Query()] = None,
    q: Annotated[str | None, Query()] = None,
) -> RawListParams:
    """Raw listing values; resource-specific filters ride along in ``extra``."""
    return RawListParams(
        page=page,
        limit=limit,
        sort=sort,
        search=q if q is not None else request.query_params.get("search"),
        extra=dict(request.query_params),
    )


ListParams = Annotated[RawListParams, Depends(list_params)]


def get_media_storage(request: Request) -> MediaStorage:
    return request.app.state.media_storage  # type: ignore[no-any-return]


Storage = Annotated[MediaStorage, Depends(get_media_storage)]
