"""Admin API key authentication dependency."""

import hmac

from fastapi import Header, HTTPException


async def require_api_key(
    x_tenantgate_api_key: str = Header(..., alias="X-TenantGate-Api-Key"),
) -> str:
    """FastAPI dependency that validates the admin API key from header."""
    from tenantgate.common.config import get_settings

    settings = get_settings()
    if not hmac.compare_digest(x_tenantgate_api_key, settings.admin_api_key):
        raise HTTPException(status_code=403, detail="Invalid API key")
    return x_tenantgate_api_key
