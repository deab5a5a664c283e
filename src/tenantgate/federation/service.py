"""Federation service: signed user fetches on behalf of the admin API."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tenantgate.common.config import TenantGateSettings
from tenantgate.federation.client import TenantApiClient
from tenantgate.federation.readiness import FederationReadiness, validate_federation_setup
from tenantgate.federation.schemas import TenantUsersPage
from tenantgate.tenants.models import TenantModel
from tenantgate.tenants.service import TenantService

logger = logging.getLogger(__name__)


class FederationService:
    """Resolves tenants, calls their API and records when they were last reached."""

    def __init__(
        self,
        settings: TenantGateSettings,
        tenant_service: TenantService,
        api_client: TenantApiClient | None = None,
    ):
        self.settings = settings
        self.tenants = tenant_service
        self.client = api_client or TenantApiClient(
            timeout=settings.federation_timeout,
            user_agent=settings.federation_user_agent,
        )

    def _page_size(self, limit: Optional[int]) -> int:
        if not limit:
            return self.settings.default_users_page_size
        return min(limit, self.settings.max_users_page_size)

    async def list_users(
        self,
        session: AsyncSession,
        tenant_id: str,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        q: Optional[str] = None,
        updated_since: Optional[str] = None,
    ) -> TenantUsersPage:
        tenant = await self.tenants.require(session, tenant_id)
        page = await self.client.fetch_users(
            tenant,
            limit=self._page_size(limit),
            cursor=cursor,
            q=q,
            updated_since=updated_since,
        )
        await self.tenants.mark_seen(session, tenant)
        return page

    async def test_connection(
        self, session: AsyncSession, tenant_id: str
    ) -> tuple[TenantModel, bool]:
        tenant = await self.tenants.require(session, tenant_id)
        ok = await self.client.test_connection(tenant)
        if ok:
            await self.tenants.mark_seen(session, tenant)
        return tenant, ok

    async def readiness(
        self, session: AsyncSession, tenant_id: str
    ) -> tuple[TenantModel, FederationReadiness]:
        tenant = await self.tenants.require(session, tenant_id)
        return tenant, validate_federation_setup(tenant)
