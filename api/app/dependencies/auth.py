"""API key gate for CMS (admin) routes."""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from app.config import settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def verify_api_key(
    request: Request,
    api_key: str | None = Depends(API_KEY_HEADER),
) -> str:
    """Validate the X-API-Key header for CMS routes.

    Uses constant-time comparison. When no API key is configured (local
    development) every request is let through with a warning; production
    startup refuses to run without one (see validate_env).

    Returns:
        The validated API key, or "" in dev mode.

    Raises:
        HTTPException: 401 if the key is missing or does not match.
    """
    if not settings.api_key:
        logger.warning("API_KEY not configured - allowing unauthenticated CMS request")
        return ""

    context = {
        "client_ip": request.client.host if request.client else "unknown",
        "path": request.url.path,
    }

    if not api_key:
        logger.warning("Missing API key", extra=context)
        raise _unauthorized("Missing API key")

    if not secrets.compare_digest(api_key, settings.api_key):
        logger.warning("Invalid API key attempt", extra=context)
        raise _unauthorized("Invalid API key")

    return api_key
