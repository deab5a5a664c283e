"""HTTP client for fetching users from a tenant's own API.

Requests are HMAC-signed with the tenant's API key (see
``tenantgate.keygen.signing``), sent once with no caching or retry, and
bounded by an explicit timeout.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError as PydanticValidationError

from tenantgate.common.exceptions import (
    FederationNotConfiguredError,
    TenantGateError,
    UpstreamError,
)
from tenantgate.federation.schemas import TenantUsersPage
from tenantgate.keygen.signing import create_hmac_signature, current_timestamp
from tenantgate.tenants.enums import ApiStatus, AuthType
from tenantgate.tenants.models import TenantModel

logger = logging.getLogger(__name__)

USERS_PATH = "/api/admin/users"


def _value(member) -> Optional[str]:
    return getattr(member, "value", member)


def ensure_api_eligible(tenant: TenantModel) -> None:
    """Raise ``FederationNotConfiguredError`` unless outbound calls are allowed."""
    api_status = _value(tenant.api_status)
    if api_status != ApiStatus.ACTIVE.value:
        raise FederationNotConfiguredError(f"Tenant API is {api_status or 'inactive'}")
    if not tenant.api_base_url:
        raise FederationNotConfiguredError("Tenant API base URL is not configured")
    if _value(tenant.auth_type) != AuthType.HMAC.value or not tenant.api_key:
        raise FederationNotConfiguredError(
            "Only HMAC authentication is currently supported and API key is required"
        )


def build_users_target(
    api_base_url: str,
    limit: Optional[int] = None,
    cursor: Optional[str] = None,
    q: Optional[str] = None,
    updated_since: Optional[str] = None,
) -> tuple[str, str, str]:
    """Return ``(url, path, query)`` for the users endpoint.

    ``query`` is the search string exactly as sent (``"?limit=10"`` or
    ``""``); it is part of the signed message, so it must not be re-encoded
    after signing.
    """
    try:
        endpoint = httpx.URL(api_base_url).join(USERS_PATH)
    except httpx.InvalidURL as e:
        raise FederationNotConfiguredError(
            f"Tenant API base URL is not a valid URL: {api_base_url}"
        ) from e
    if not endpoint.is_absolute_url:
        raise FederationNotConfiguredError(
            f"Tenant API base URL is not a valid URL: {api_base_url}"
        )

    params: list[tuple[str, str]] = []
    if limit:
        params.append(("limit", str(limit)))
    if cursor:
        params.append(("cursor", cursor))
    if q:
        params.append(("q", q))
    if updated_since:
        params.append(("updated_since", updated_since))
    query = f"?{urlencode(params)}" if params else ""

    return f"{endpoint}{query}", endpoint.path, query


class TenantApiClient:
    """Calls ``GET {api_base_url}/api/admin/users`` on tenant websites."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = "TenantGate-Admin/1.0",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    def _signed_headers(self, secret: str, path: str, query: str) -> dict[str, str]:
        timestamp = current_timestamp()
        return {
            "x-timestamp": timestamp,
            "x-signature": create_hmac_signature(secret, timestamp, path, query),
            "User-Agent": self.user_agent,
            "Cache-Control": "no-store",
        }

    async def fetch_users(
        self,
        tenant: TenantModel,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        q: Optional[str] = None,
        updated_since: Optional[str] = None,
    ) -> TenantUsersPage:
        """Fetch one page of users. The caller drives pagination via ``next_cursor``.

        Raises ``FederationNotConfiguredError`` before any network I/O when
        the tenant is not eligible, and ``UpstreamError`` on transport
        failures, non-2xx answers and unparseable bodies.
        """
        ensure_api_eligible(tenant)
        url, path, query = build_users_target(
            tenant.api_base_url, limit=limit, cursor=cursor, q=q,
            updated_since=updated_since,
        )
        headers = self._signed_headers(tenant.api_key, path, query)

        logger.info(
            "Fetching from tenant API",
            extra={"tenant_id": tenant.id, "url": url},
        )
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(
                "Tenant API timed out",
                extra={"tenant_id": tenant.id, "url": url, "timeout": self.timeout},
            )
            raise UpstreamError(
                f"Tenant API did not respond within {self.timeout:g}s"
            ) from e
        except httpx.HTTPError as e:
            logger.error(
                "Tenant API unreachable",
                extra={"tenant_id": tenant.id, "url": url, "error": str(e)},
            )
            raise UpstreamError(f"Tenant API unreachable: {e}") from e

        if not resp.is_success:
            logger.error(
                "Tenant API error",
                extra={
                    "tenant_id": tenant.id,
                    "url": url,
                    "status": resp.status_code,
                    "status_text": resp.reason_phrase,
                    "error": resp.text,
                },
            )
            raise UpstreamError(
                f"Tenant API error {resp.status_code}: {resp.reason_phrase}",
                upstream_status=resp.status_code,
                status_text=resp.reason_phrase,
            )

        try:
            page = TenantUsersPage.model_validate(resp.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(
                "Tenant API returned an unexpected payload",
                extra={"tenant_id": tenant.id, "url": url},
            )
            raise UpstreamError(
                "Tenant API returned an unexpected payload",
                upstream_status=resp.status_code,
            ) from e

        logger.info(
            "Tenant API response",
            extra={
                "tenant_id": tenant.id,
                "user_count": len(page.data),
                "has_more": page.pagination.has_more if page.pagination else None,
            },
        )
        return page

    async def test_connection(self, tenant: TenantModel) -> bool:
        """Try a one-user fetch; report success without raising."""
        try:
            await self.fetch_users(tenant, limit=1)
        except TenantGateError as e:
            logger.warning(
                "Tenant connection test failed",
                extra={"tenant_id": tenant.id, "error": e.message},
            )
            return False
        return True
