"""License verification service — runs the pipeline against the store."""

import logging
import time
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenantgate.common.config import TenantGateSettings
from tenantgate.common.domains import extract_domain
from tenantgate.common.exceptions import NotFoundError, ValidationError
from tenantgate.common.models import as_utc, utcnow
from tenantgate.keygen.generator import is_license_key_format, mask_secret
from tenantgate.licensing.models import UNKNOWN_TENANT, VerificationLogModel
from tenantgate.licensing.pipeline import VerificationOutcome, evaluate
from tenantgate.tenants.models import TenantModel
from tenantgate.tenants.service import TenantService

logger = logging.getLogger(__name__)


def _require(license_key: Optional[str], domain: Optional[str]) -> None:
    if not license_key or not domain:
        raise ValidationError("License key and domain are required")


class LicenseVerificationService:
    """Full (audited) and lightweight license verification."""

    def __init__(self, settings: TenantGateSettings, tenant_service: TenantService):
        self.settings = settings
        self.tenants = tenant_service

    async def _lookup(
        self, session: AsyncSession, license_key: str
    ) -> TenantModel | None:
        # Malformed keys cannot be in the store; skip the query.
        if not is_license_key_format(license_key):
            return None
        return await self.tenants.get_by_license_key(session, license_key)

    # ── Verification ──

    async def verify(
        self,
        session: AsyncSession,
        license_key: Optional[str],
        domain: Optional[str],
        request_ip: str = "unknown",
        user_agent: str = "unknown",
        started: float | None = None,
    ) -> VerificationOutcome:
        """Full verification: applies state changes and writes one log entry.

        ``started`` is a ``time.monotonic()`` reading taken when the request
        arrived; the logged response time is measured from it.
        """
        started = time.monotonic() if started is None else started
        _require(license_key, domain)

        request_domain = extract_domain(domain)
        tenant = await self._lookup(session, license_key)
        evaluation = evaluate(tenant, request_domain, utcnow())
        outcome = evaluation.outcome

        if tenant is not None:
            for attr, value in evaluation.patch.items():
                setattr(tenant, attr, value)

        elapsed_ms = int((time.monotonic() - started) * 1000)
        session.add(VerificationLogModel(
            tenant_id=outcome.tenant_id or UNKNOWN_TENANT,
            license_key=license_key,
            request_domain=request_domain,
            request_ip=request_ip,
            user_agent=user_agent,
            verification_status=outcome.status,
            error_message=outcome.log_message or outcome.error,
            response_time_ms=elapsed_ms,
        ))
        await session.flush()

        logger.info(
            "License verification",
            extra={
                "tenant_id": outcome.tenant_id or UNKNOWN_TENANT,
                "license_key": mask_secret(license_key),
                "request_domain": request_domain,
                "verification_status": outcome.status.value,
                "response_time_ms": elapsed_ms,
            },
        )
        return outcome

    async def check(
        self,
        session: AsyncSession,
        license_key: Optional[str],
        domain: Optional[str],
    ) -> VerificationOutcome:
        """Lightweight read-only check: same gates, no patch, no log entry."""
        _require(license_key, domain)
        tenant = await self._lookup(session, license_key)
        return evaluate(tenant, extract_domain(domain), utcnow()).outcome

    # ── Domain discovery ──

    async def check_by_domain(
        self, session: AsyncSession, domain: Optional[str]
    ) -> tuple[TenantModel, VerificationOutcome]:
        """Resolve the license bound to ``domain`` and run the account gates.

        Read-only. Raises ``NotFoundError`` when no tenant owns the domain.
        """
        if not domain:
            raise ValidationError("Domain is required")
        tenant = await self.tenants.get_by_domain(session, domain)
        if tenant is None:
            raise NotFoundError("No license found for this domain")
        # The tenant was found by its own domain, so the domain gate always passes.
        outcome = evaluate(tenant, tenant.website_domain, utcnow()).outcome
        return tenant, outcome

    async def lookup_domain(
        self, session: AsyncSession, domain: Optional[str]
    ) -> dict[str, Any]:
        """Diagnostic search: exact match preferred, partial matches counted."""
        if not domain:
            raise ValidationError("Domain is required")
        canonical = extract_domain(domain)
        matches = await self.tenants.search_by_domain(session, canonical)
        if not matches:
            return {
                "exists": False,
                "domain": canonical,
                "message": "Domain not found in SAAS clients database",
            }

        exact = next(
            (t for t in matches if extract_domain(t.website_domain) == canonical),
            None,
        )
        primary = exact or matches[0]
        return {
            "exists": True,
            "domain": canonical,
            "client": {
                "id": primary.id,
                "companyName": primary.company_name,
                "contactEmail": primary.contact_email,
                "websiteDomain": primary.website_domain,
                "websiteUrl": primary.website_url,
                "status": primary.status.value,
                "subscriptionStatus": primary.subscription_status.value,
                "subscriptionType": primary.subscription_type.value,
                "subscriptionEndDate": as_utc(primary.subscription_end_date),
                "licenseKey": mask_secret(primary.license_key, visible=10),
                "createdAt": as_utc(primary.created_at),
                "lastAccessDate": as_utc(primary.last_access_date),
                "lastVerificationDate": as_utc(primary.last_verification_date),
            },
            "allMatches": len(matches),
            "exactMatch": exact is not None,
        }

    # ── Log queries ──

    async def list_logs(
        self,
        session: AsyncSession,
        tenant_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> list[VerificationLogModel]:
        """Verification attempts for one tenant, newest first."""
        result = await session.execute(
            select(VerificationLogModel)
            .where(VerificationLogModel.tenant_id == tenant_id)
            .order_by(VerificationLogModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())
