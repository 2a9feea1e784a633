"""User and authentication schemas."""

from typing import Annotated

from pydantic import EmailStr, Field

from cms_api.models import Role
from cms_api.schemas.common import (
    CamelModel,
    PositiveId,
    ShortText,
    TimestampedRead,
    UpdateModel,
    text,
)

Password = Annotated[str, text(6, 128)]


class UserRead(TimestampedRead):
    """Public view of a user. The password hash never leaves the service."""

    id: int
    name: str
    email: str
    role: Role


class UserCreate(CamelModel):
    name: ShortText
    email: EmailStr
    password: Password
    role: Role = Role.USER


class UserUpdate(UpdateModel):
    name: ShortText | None = None
    email: EmailStr | None = None
    password: Password | None = None
    role: Role | None = None


class BulkDelete(CamelModel):
    ids: Annotated[list[PositiveId], Field(min_length=1, max_length=100)]


class BulkDeleteResult(CamelModel):
    deleted_count: int


class RegisterRequest(CamelModel):
    name: ShortText
    email: EmailStr
    password: Password


class LoginRequest(CamelModel):
    email: EmailStr
    password: Annotated[str, Field(min_length=1, max_length=128)]


class ChangePasswordRequest(CamelModel):
    current_password: Annotated[str, Field(min_length=1, max_length=128)]
    new_password: Password


class AuthPayload(CamelModel):
    user: UserRead
    token: str


class TokenPayload(CamelModel):
    token: str
