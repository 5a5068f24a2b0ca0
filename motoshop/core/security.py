"""Bearer token signing and verification (HS256 JWT, shared secret)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt

from motoshop.core.config import get_settings


def create_access_token(claims: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    to_encode = claims.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Return the verified claims; raises ``jose.JWTError`` on a bad signature or expiry."""

    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def token_subject(claims: dict[str, Any]) -> str | None:
    """Subject of a verified token: the ``id`` claim, falling back to ``sub``."""

    subject = claims.get("id", claims.get("sub"))
    return None if subject is None else str(subject)
