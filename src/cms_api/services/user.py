"""User administration.

Passwords are hashed in the threadpool before they reach the model. E-mail
addresses are stored lowercased so uniqueness and login ignore case.
"""

from dataclasses import replace

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from cms_api.exceptions import ConflictError, NotFoundError
from cms_api.listing import FilterSpec, ListRules, RawListParams, SortOrder, SortSpec, resolve
from cms_api.logging import get_logger
from cms_api.models import Role, User
from cms_api.repositories import base as repo
from cms_api.schemas.pagination import Paginated
from cms_api.schemas.user import UserCreate, UserUpdate
from cms_api.security import hash_password

logger = get_logger(__name__)

USER_RULES = ListRules(
    sort_fields={
        "id": "id",
        "name": "name",
        "email": "email",
        "role": "role",
        "createdAt": "created_at",
    },
    default_sort=SortSpec("created_at", SortOrder.DESC),
    filters={"role": FilterSpec("role", cast=lambda value: Role(value.upper()))},
    search_fields=("name", "email"),
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def find_by_email(db: AsyncSession, email: str) -> User | None:
    return await repo.get_one(db, User, func.lower(User.email) == normalize_email(email))


async def ensure_email_free(db: AsyncSession, email: str, user_id: int | None = None) -> None:
    existing = await find_by_email(db, email)
    if existing is not None and existing.id != user_id:
        raise ConflictError("Email already registered")


async def list_users(db: AsyncSession, params: RawListParams) -> Paginated[User]:
    """Paginated users; ``role=all`` is the same as no role filter."""
    if params.extra.get("role", "").lower() == "all":
        extra = {key: value for key, value in params.extra.items() if key != "role"}
        params = replace(params, extra=extra)
    query = resolve(params, USER_RULES)
    return await repo.fetch_page(db, User, query, search_fields=USER_RULES.search_fields)


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await repo.get_by_pk(db, User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


async def create_user(
    db: AsyncSession, name: str, email: str, password: str, role: Role = Role.USER
) -> User:
    await ensure_email_free(db, email)
    password_hash = await run_in_threadpool(hash_password, password)
    user = User(name=name, email=normalize_email(email), password_hash=password_hash, role=role)
    await repo.add(db, user)
    logger.info("user_created", user_id=user.id, role=user.role)
    return await _refreshed(db, user.id)


async def create_from_payload(db: AsyncSession, payload: UserCreate) -> User:
    return await create_user(db, payload.name, payload.email, payload.password, payload.role)


async def update_user(db: AsyncSession, user_id: int, payload: UserUpdate) -> User:
    user = await get_user(db, user_id)
    changes = payload.changes()
    if "email" in changes:
        await ensure_email_free(db, changes["email"], user_id)
        changes["email"] = normalize_email(changes["email"])
    if "password" in changes:
        changes["password_hash"] = await run_in_threadpool(hash_password, changes.pop("password"))
    for field, value in changes.items():
        setattr(user, field, value)
    await db.flush()
    logger.info("user_updated", user_id=user_id, fields=sorted(payload.model_fields_set))
    return await _refreshed(db, user_id)


async def set_password(db: AsyncSession, user: User, password: str) -> None:
    user.password_hash = await run_in_threadpool(hash_password, password)
    await db.flush()


async def delete_user(db: AsyncSession, user_id: int) -> None:
    user = await get_user(db, user_id)
    await repo.delete(db, user)
    logger.info("user_deleted", user_id=user_id)


async def bulk_delete(db: AsyncSession, ids: list[int]) -> int:
    """Delete every user in ``ids``; raises when none of them exist."""
    wanted = list(dict.fromkeys(ids))
    found = await db.execute(select(User.id).where(User.id.in_(wanted)))
    existing = list(found.scalars().all())
    if not existing:
        raise NotFoundError("Users")
    await db.execute(
        delete(User).where(User.id.in_(existing)).execution_options(synchronize_session=False)
    )
    logger.info("users_bulk_deleted", count=len(existing))
    return len(existing)


async def _refreshed(db: AsyncSession, user_id: int) -> User:
    user = await repo.get_by_pk(db, User, user_id, fresh=True)
    if user is None:
        raise NotFoundError("User", user_id)
    return user
