"""X-API-Key guard for the fleet endpoints."""

from __future__ import annotations

import secrets

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from fleetcmd.config import settings
from fleetcmd.utils.logging import get_logger

log = get_logger(__name__)

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def require_api_key(
    api_key: str | None = Security(_api_key_header),
) -> str:
    """Reject requests whose X-API-Key does not match FLEETCMD_API_KEY.

    The comparison is constant-time. A blank FLEETCMD_API_KEY turns the
    check off, so ``/push`` then relies on ``files_root`` alone.
    """
    if not settings.api_key:
        return "no-key-configured"
    if api_key is None or not secrets.compare_digest(
        api_key.encode("utf-8"), settings.api_key.encode("utf-8"),
    ):
        log.warning("auth.rejected", key_present=api_key is not None)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return api_key
