"""Password hashing and bearer-token helpers.

Tokens are HS256 JWTs carrying ``{sub, email, role, iat, exp}``. Decoding
failures are raised as ``AuthenticationError`` with a message that tells an
expired token apart from an otherwise invalid one.
"""

import time
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt

from cms_api.config import settings
from cms_api.exceptions import AuthenticationError
from cms_api.models import Role

TOKEN_EXPIRED = "Token expired"
TOKEN_INVALID = "Invalid token"


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    role: Role


def hash_password(plain_password: str) -> str:
    return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(
    *, user_id: int, email: str, role: Role, expires_in: int | None = None
) -> str:
    """Sign an access token. ``expires_in`` is in seconds and defaults to settings."""
    issued_at = int(time.time())
    lifetime = expires_in if expires_in is not None else settings.jwt_expires_minutes * 60
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "role": str(role),
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenClaims:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError(
            TOKEN_EXPIRED, error="Please login again to get a new token"
        ) from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError(TOKEN_INVALID, error="Token is malformed or invalid") from exc

    try:
        return TokenClaims(
            user_id=int(payload["sub"]), email=str(payload["email"]), role=Role(payload["role"])
        )
    except (KeyError, ValueError) as exc:
        raise AuthenticationError(TOKEN_INVALID, error="Token is malformed or invalid") from exc
