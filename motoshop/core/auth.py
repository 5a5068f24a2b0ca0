"""Authentication dependencies.

Two schemes guard the same data:

- JSON endpoints accept the bearer token from the ``Authorization`` header
  only, like the rest of the workshop API.
- Export endpoints are opened through plain links, which cannot carry custom
  headers, so they also accept the token from the ``token`` query parameter.

Both verify tokens signed with the shared secret.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Header, HTTPException, Query, status
from jose import JWTError

from motoshop.core.config import get_settings
from motoshop.core.security import decode_access_token, token_subject

logger = logging.getLogger(__name__)

TOKEN_MISSING = "Token no proporcionado"
TOKEN_INVALID = "Token inválido o expirado"


@dataclass(frozen=True)
class RequestUserContext:
    """Authenticated actor resolved from token claims."""

    user_id: str
    email: str | None
    role: str | None


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def bearer_from_header(authorization: str | None) -> str | None:
    """Second word of an ``Authorization`` header value, if any."""

    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def _verified_claims(token: str) -> dict[str, object]:
    try:
        return decode_access_token(token)
    except JWTError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        raise _unauthorized(TOKEN_INVALID) from exc


def get_current_user_context(
    authorization: str | None = Header(default=None),
) -> RequestUserContext:
    """Resolve the caller of a JSON endpoint from the ``Authorization`` header.

    With ``auth_allow_dev_principal`` enabled, requests without a header run
    as a local development user.
    """

    token = bearer_from_header(authorization)
    if token is None:
        settings = get_settings()
        if settings.auth_allow_dev_principal:
            return RequestUserContext(user_id=settings.auth_dev_user_id, email=settings.auth_dev_email, role="admin")
        raise _unauthorized(TOKEN_MISSING)

    claims = _verified_claims(token)
    subject = token_subject(claims)
    if subject is None:
        logger.warning("Bearer token without subject claim.")
        raise _unauthorized(TOKEN_INVALID)

    email = claims.get("email")
    role = claims.get("role") or claims.get("rol")
    return RequestUserContext(
        user_id=subject,
        email=str(email) if email is not None else None,
        role=str(role) if role is not None else None,
    )


def require_export_token(
    authorization: str | None = Header(default=None),
    token: str | None = Query(default=None),
) -> str | None:
    """Gate export downloads; header token first, ``?token=`` as fallback.

    Rejects before any report data is fetched. The subject is returned for
    completeness; exports do not use it.
    """

    candidate = bearer_from_header(authorization) or token
    if not candidate:
        raise _unauthorized(TOKEN_MISSING)
    return token_subject(_verified_claims(candidate))
