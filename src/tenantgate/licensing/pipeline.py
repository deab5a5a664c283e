"""
License verification decision pipeline.

``evaluate`` is a pure transition function over a tenant snapshot:

    (tenant | None, request_domain, now) -> Evaluation(outcome, patch)

Steps run in order and the first failing gate wins:

1. lookup            unknown key                  -> invalid   401
2. account gate      status != active             -> suspended 403
3. domain binding    canonical domains differ     -> invalid   403
4. subscription gate subscription_status != active -> expired  402
5. expiry check      end date strictly in the past -> expired  402
                     (patch: subscription_status=expired)
6. success                                         -> valid    200
                     (patch: last_access/last_verification = now)

The caller decides whether to persist ``patch`` (full verification) or
discard it (lightweight check).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from tenantgate.common.domains import extract_domain
from tenantgate.common.exceptions import (
    AuthorizationError,
    BillingError,
    InvalidLicenseKeyError,
)
from tenantgate.common.models import as_utc
from tenantgate.tenants.enums import (
    AccountStatus,
    SubscriptionStatus,
    VerificationStatus,
)
from tenantgate.tenants.models import TenantModel

HTTP_OK = 200


@dataclass(frozen=True)
class VerificationOutcome:
    """Result of one pass through the pipeline."""

    status: VerificationStatus
    http_status: int
    error: Optional[str] = None
    # Wording written to the verification log; defaults to ``error``.
    log_message: Optional[str] = None
    tenant_id: Optional[str] = None
    client: Optional[dict[str, Any]] = None
    expires_at: Optional[datetime] = None

    @property
    def valid(self) -> bool:
        return self.status == VerificationStatus.VALID


@dataclass(frozen=True)
class Evaluation:
    outcome: VerificationOutcome
    patch: dict[str, Any] = field(default_factory=dict)


def _value(member: Any) -> str:
    return getattr(member, "value", member)


def _project(tenant: TenantModel) -> dict[str, Any]:
    return {
        "id": tenant.id,
        "companyName": tenant.company_name,
        "subscriptionType": _value(tenant.subscription_type),
        "subscriptionEndDate": as_utc(tenant.subscription_end_date),
    }


def evaluate(
    tenant: TenantModel | None,
    request_domain: str,
    now: datetime,
) -> Evaluation:
    """Run the verification gates against ``tenant`` at time ``now``."""
    if tenant is None:
        return Evaluation(VerificationOutcome(
            status=VerificationStatus.INVALID,
            http_status=InvalidLicenseKeyError.status_code,
            error="Invalid license key",
            log_message="License key not found",
        ))

    status = _value(tenant.status)
    if status != AccountStatus.ACTIVE.value:
        return Evaluation(VerificationOutcome(
            status=VerificationStatus.SUSPENDED,
            http_status=AuthorizationError.status_code,
            error=f"License is {status}",
            log_message=f"Client status: {status}",
            tenant_id=tenant.id,
        ))

    received = extract_domain(request_domain)
    expected = extract_domain(tenant.website_domain)
    if received != expected:
        return Evaluation(VerificationOutcome(
            status=VerificationStatus.INVALID,
            http_status=AuthorizationError.status_code,
            error=(
                "Domain not authorized for this license. "
                f"Expected: {expected}, Got: {received}"
            ),
            log_message=f"Domain mismatch: {received} not authorized for {expected}",
            tenant_id=tenant.id,
        ))

    subscription_status = _value(tenant.subscription_status)
    if subscription_status != SubscriptionStatus.ACTIVE.value:
        return Evaluation(VerificationOutcome(
            status=VerificationStatus.EXPIRED,
            http_status=BillingError.status_code,
            error=f"Subscription is {subscription_status}",
            log_message=f"Subscription status: {subscription_status}",
            tenant_id=tenant.id,
        ))

    end_date = as_utc(tenant.subscription_end_date)
    if end_date is not None and end_date < now:
        return Evaluation(
            VerificationOutcome(
                status=VerificationStatus.EXPIRED,
                http_status=BillingError.status_code,
                error="Subscription has expired",
                log_message="Subscription expired",
                tenant_id=tenant.id,
            ),
            patch={"subscription_status": SubscriptionStatus.EXPIRED},
        )

    return Evaluation(
        VerificationOutcome(
            status=VerificationStatus.VALID,
            http_status=HTTP_OK,
            tenant_id=tenant.id,
            client=_project(tenant),
            expires_at=end_date,
        ),
        patch={"last_access_date": now, "last_verification_date": now},
    )
