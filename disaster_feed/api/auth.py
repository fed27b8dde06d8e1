"""
API authentication using the X-API-KEY header.

With ``API_KEYS`` unset every request is allowed (dev mode).
"""

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from disaster_feed.config.settings import get_settings

api_key_header = APIKeyHeader(name="X-API-KEY", auto_error=False)


def _valid_keys() -> list[str] | None:
    """Configured keys, or None in dev mode."""
    settings = get_settings()
    if not settings.api_keys:
        return None
    return [k.strip() for k in settings.api_keys.split(",") if k.strip()]


async def verify_api_key(api_key: str | None = Security(api_key_header)) -> str:
    """
    Verify API key from X-API-KEY header.

    Raises:
        HTTPException: If API key is missing or invalid
    """
    valid_keys = _valid_keys()
    if valid_keys is None:
        return "dev-mode"

    if api_key is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key. Provide X-API-KEY header.",
        )

    if api_key not in valid_keys:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )

    return api_key


def validate_ws_api_key(api_key: str | None) -> bool:
    """Query-parameter variant for WebSocket upgrades, which cannot carry headers."""
    valid_keys = _valid_keys()
    if valid_keys is None:
        return True
    return api_key is not None and api_key in valid_keys
