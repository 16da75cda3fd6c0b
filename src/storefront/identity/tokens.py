"""Bearer tokens: HS256 JWTs carrying the user's id, name, email and role."""

import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from storefront.config import get_settings
from storefront.identity.exceptions import AuthenticationFailed

_ALGORITHM = "HS256"


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires: datetime
    refresh_token: str


def issue_token(user) -> IssuedToken:
    settings = get_settings()
    expires = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    claims = {
        "sub": str(user.id),
        "name": user.full_name,
        "email": user.email,
        "role": user.role,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "exp": expires,
    }
    token = jwt.encode(claims, settings.jwt_secret_key, algorithm=_ALGORITHM)
    return IssuedToken(token=token, expires=expires, refresh_token=secrets.token_urlsafe(32))


def decode_token(token: str) -> dict:
    """Verify ``token`` and return its claims, or raise ``AuthenticationFailed``."""
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[_ALGORITHM],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationFailed("Token has expired") from exc
    except jwt.PyJWTError as exc:
        raise AuthenticationFailed("Invalid token") from exc
