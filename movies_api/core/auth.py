"""Bearer-token gate for mutating endpoints."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from movies_api.core.config import settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def ensure_auth_configured() -> None:
    """Refuse to run in production without a signing secret."""
    if settings.is_production and not settings.jwt_secret:
        raise RuntimeError("jwt_secret_not_configured")


def decode_token(token: str) -> Mapping[str, Any]:
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"verify_aud": False},
    )


def require_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Mapping[str, Any]:
    """Verify the bearer JWT and return its claims."""
    if credentials is None:
        raise _unauthorized("not_authenticated")

    if not settings.jwt_secret:
        # пустой ключ принял бы токен, подписанный пустой строкой
        logger.error("jwt_secret_not_configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="auth_not_configured",
        )

    try:
        return decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError as exc:
        logger.warning("jwt_expired")
        raise _unauthorized("token_expired") from exc
    except jwt.InvalidTokenError as exc:
        logger.warning("jwt_invalid", extra={"err": str(exc)})
        raise _unauthorized("invalid_token") from exc
