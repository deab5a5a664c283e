"""Tenant store and lifecycle operations."""

import calendar
import logging
from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenantgate.common.config import TenantGateSettings, get_settings
from tenantgate.common.domains import extract_domain, normalize_base_url
from tenantgate.common.exceptions import (
    ConflictError,
    KeyGenerationExhausted,
    TenantNotFoundError,
    ValidationError,
)
from tenantgate.common.models import as_utc, utcnow
from tenantgate.keygen import generator
from tenantgate.tenants.enums import (
    AccountStatus,
    ApiStatus,
    AuthType,
    LifecycleAction,
    SubscriptionStatus,
    SubscriptionType,
)
from tenantgate.tenants.models import TenantModel

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "company_name",
    "contact_name",
    "contact_email",
    "contact_phone",
    "website_url",
    "website_domain",
    "status",
    "subscription_type",
    "subscription_status",
    "subscription_end_date",
    "license_verified",
    "api_base_url",
    "auth_type",
    "api_status",
    "notes",
)

# Columns that may be changed but never cleared.
_REQUIRED_FIELDS = frozenset({
    "company_name",
    "contact_name",
    "contact_email",
    "website_url",
    "website_domain",
    "status",
    "subscription_type",
    "subscription_status",
    "license_verified",
})


def _add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def default_end_date(
    subscription_type: SubscriptionType, start: datetime
) -> datetime | None:
    """End date used when none is supplied at issuance. Lifetime never ends."""
    if subscription_type == SubscriptionType.MONTHLY:
        return _add_months(start, 1)
    if subscription_type == SubscriptionType.YEARLY:
        return _add_months(start, 12)
    return None


def append_note(existing: str | None, line: str, now: datetime) -> str:
    """Append a timestamped line to the notes log; earlier lines are kept."""
    stamp = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"{existing or ''}\n[{stamp}] {line}".strip()


def apply_lifecycle_action(
    status: AccountStatus,
    subscription_status: SubscriptionStatus,
    action: LifecycleAction,
) -> tuple[AccountStatus, SubscriptionStatus]:
    """Return the (status, subscription_status) pair after an admin action.

    Enabling revives a cancelled subscription but leaves expired or
    suspended subscriptions alone. Disabling only touches the account;
    suspending touches both.
    """
    if action == LifecycleAction.ENABLE:
        if subscription_status == SubscriptionStatus.CANCELLED:
            subscription_status = SubscriptionStatus.ACTIVE
        return AccountStatus.ACTIVE, subscription_status
    if action == LifecycleAction.DISABLE:
        return AccountStatus.SUSPENDED, subscription_status
    if action == LifecycleAction.SUSPEND:
        return AccountStatus.SUSPENDED, SubscriptionStatus.SUSPENDED
    raise ValidationError(
        'Invalid action. Must be "enable", "disable", or "suspend"'
    )


class TenantService:
    """Tenant management operations."""

    def __init__(self, settings: TenantGateSettings | None = None):
        self.settings = settings or get_settings()

    # ── Key allocation ──

    async def allocate_license_key(self, session: AsyncSession) -> str:
        """Generate a license key not held by any tenant.

        Bounded by ``license_key_max_attempts``; raises
        ``KeyGenerationExhausted`` when every candidate collided.
        """
        attempts = self.settings.license_key_max_attempts
        for _ in range(attempts):
            candidate = generator.generate_license_key()
            if await self.get_by_license_key(session, candidate) is None:
                return candidate
        logger.error("License key allocation exhausted after %d attempts", attempts)
        raise KeyGenerationExhausted()

    # ── CRUD ──

    async def create_tenant(
        self,
        session: AsyncSession,
        company_name: str,
        contact_name: str,
        contact_email: str,
        website_url: str,
        website_domain: str,
        subscription_type: SubscriptionType = SubscriptionType.MONTHLY,
        subscription_end_date: datetime | None = None,
        contact_phone: str | None = None,
        notes: str | None = None,
    ) -> TenantModel:
        """Issue a license: create the tenant with fresh license and API keys."""
        await self._ensure_email_free(session, contact_email)

        now = utcnow()
        end_date = as_utc(subscription_end_date) or default_end_date(
            subscription_type, now
        )
        license_key = await self.allocate_license_key(session)

        tenant = TenantModel(
            company_name=company_name,
            contact_name=contact_name,
            contact_email=contact_email,
            contact_phone=contact_phone or None,
            website_url=website_url,
            website_domain=extract_domain(website_domain),
            license_key=license_key,
            license_verified=False,
            status=AccountStatus.ACTIVE,
            subscription_type=subscription_type,
            subscription_status=SubscriptionStatus.ACTIVE,
            subscription_start_date=now,
            subscription_end_date=end_date,
            api_base_url=normalize_base_url(website_url),
            auth_type=AuthType.HMAC,
            api_key=generator.generate_api_key(),
            api_status=ApiStatus.ACTIVE,
            notes=notes or None,
        )
        session.add(tenant)
        await session.flush()
        logger.info(
            "Tenant created",
            extra={"tenant_id": tenant.id, "website_domain": tenant.website_domain},
        )
        return tenant

    async def get_by_id(
        self, session: AsyncSession, tenant_id: str
    ) -> TenantModel | None:
        return await session.get(TenantModel, tenant_id)

    async def require(self, session: AsyncSession, tenant_id: str) -> TenantModel:
        tenant = await self.get_by_id(session, tenant_id)
        if tenant is None:
            raise TenantNotFoundError()
        return tenant

    async def get_by_license_key(
        self, session: AsyncSession, license_key: str
    ) -> TenantModel | None:
        result = await session.execute(
            select(TenantModel).where(TenantModel.license_key == license_key)
        )
        return result.scalar_one_or_none()

    async def get_by_domain(
        self, session: AsyncSession, domain: str
    ) -> TenantModel | None:
        """Exact canonical-domain lookup."""
        result = await session.execute(
            select(TenantModel)
            .where(TenantModel.website_domain == extract_domain(domain))
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def search_by_domain(
        self, session: AsyncSession, domain: str
    ) -> list[TenantModel]:
        """Exact or contains match on the stored domain or website URL."""
        canonical = extract_domain(domain)
        pattern = f"%{canonical}%"
        result = await session.execute(
            select(TenantModel).where(
                or_(
                    TenantModel.website_domain == canonical,
                    TenantModel.website_domain.like(pattern),
                    TenantModel.website_url.like(pattern),
                )
            )
        )
        return list(result.scalars().all())

    async def list_tenants(
        self,
        session: AsyncSession,
        status: AccountStatus | None = None,
        subscription_status: SubscriptionStatus | None = None,
    ) -> list[TenantModel]:
        query = select(TenantModel)
        if status is not None:
            query = query.where(TenantModel.status == status)
        if subscription_status is not None:
            query = query.where(TenantModel.subscription_status == subscription_status)
        query = query.order_by(TenantModel.created_at.desc())
        result = await session.execute(query)
        return list(result.scalars().all())

    async def update_tenant(
        self, session: AsyncSession, tenant_id: str, **updates
    ) -> TenantModel:
        """Apply a partial update. ``None`` clears nullable fields."""
        tenant = await self.require(session, tenant_id)

        cleared = sorted(f for f in _REQUIRED_FIELDS if f in updates and updates[f] is None)
        if cleared:
            raise ValidationError(f"Fields cannot be empty: {', '.join(cleared)}")

        email = updates.get("contact_email")
        if email and email != tenant.contact_email:
            await self._ensure_email_free(session, email)
        if updates.get("website_domain"):
            updates["website_domain"] = extract_domain(updates["website_domain"])
        if "subscription_end_date" in updates:
            updates["subscription_end_date"] = as_utc(updates["subscription_end_date"])

        for field in _UPDATABLE_FIELDS:
            if field in updates:
                setattr(tenant, field, updates[field])

        if (
            tenant.subscription_end_date is None
            and tenant.subscription_type != SubscriptionType.LIFETIME
        ):
            raise ValidationError(
                "subscription_end_date may only be empty for lifetime subscriptions"
            )

        await session.flush()
        return tenant

    async def delete_tenant(self, session: AsyncSession, tenant_id: str) -> None:
        tenant = await self.require(session, tenant_id)
        await session.delete(tenant)
        await session.flush()
        logger.info("Tenant deleted", extra={"tenant_id": tenant_id})

    # ── Lifecycle ──

    async def toggle_status(
        self,
        session: AsyncSession,
        tenant_id: str,
        action: LifecycleAction,
        reason: str | None = None,
    ) -> TenantModel:
        tenant = await self.require(session, tenant_id)
        tenant.status, tenant.subscription_status = apply_lifecycle_action(
            tenant.status, tenant.subscription_status, action
        )
        if reason:
            tenant.notes = append_note(
                tenant.notes, f"{action.value.upper()}: {reason}", utcnow()
            )
        await session.flush()
        logger.info(
            "Tenant status changed",
            extra={
                "tenant_id": tenant.id,
                "action": action.value,
                "status": tenant.status.value,
                "subscription_status": tenant.subscription_status.value,
            },
        )
        return tenant

    async def regenerate_license_key(
        self, session: AsyncSession, tenant_id: str
    ) -> tuple[TenantModel, str]:
        """Replace the license key. Returns (tenant, old_license_key).

        The old key stops verifying immediately and is recorded in notes.
        """
        tenant = await self.require(session, tenant_id)
        old_key = tenant.license_key
        tenant.license_key = await self.allocate_license_key(session)
        tenant.notes = append_note(
            tenant.notes, f"License key regenerated. Old key: {old_key}", utcnow()
        )
        await session.flush()
        logger.info("License key regenerated", extra={"tenant_id": tenant.id})
        return tenant, old_key

    async def regenerate_api_key(
        self, session: AsyncSession, tenant_id: str
    ) -> TenantModel:
        """Replace the API key and re-activate API access. No overlap period."""
        tenant = await self.require(session, tenant_id)
        tenant.api_key = generator.generate_api_key()
        tenant.api_status = ApiStatus.ACTIVE
        await session.flush()
        logger.info("API key regenerated", extra={"tenant_id": tenant.id})
        return tenant

    async def mark_seen(
        self, session: AsyncSession, tenant: TenantModel, when: datetime | None = None
    ) -> None:
        tenant.last_seen_at = when or utcnow()
        await session.flush()

    # ── Internal helpers ──

    async def _ensure_email_free(self, session: AsyncSession, email: str) -> None:
        result = await session.execute(
            select(TenantModel.id).where(TenantModel.contact_email == email).limit(1)
        )
        if result.scalar_one_or_none() is not None:
            raise ConflictError("Client with this email already exists")
