"""Tests for license verification service — full verify, light check, domain lookups."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy import Text, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenantgate.common.config import TenantGateSettings
from tenantgate.common.database import DatabaseManager
from tenantgate.common.exceptions import NotFoundError, ValidationError
from tenantgate.common.models import as_utc, utcnow
from tenantgate.licensing.models import UNKNOWN_TENANT, VerificationLogModel
from tenantgate.licensing.service import LicenseVerificationService
from tenantgate.tenants.enums import (
    LifecycleAction,
    SubscriptionStatus,
    SubscriptionType,
    VerificationStatus,
)
from tenantgate.tenants.service import TenantService


def make_settings(**overrides) -> TenantGateSettings:
    defaults = {"db_url": "sqlite+aiosqlite://", "admin_api_key": "test-admin-api-key"}
    defaults.update(overrides)
    return TenantGateSettings(**defaults)


@pytest.fixture
async def db():
    manager = DatabaseManager(make_settings())
    await manager.init()
    await manager.create_all()
    yield manager
    await manager.close()


@pytest.fixture
def tenants():
    return TenantService(make_settings())


@pytest.fixture
def svc(tenants):
    return LicenseVerificationService(make_settings(), tenants)


@pytest.fixture
async def tenant(db, tenants):
    async with db.get_session() as session:
        return await tenants.create_tenant(
            session,
            company_name="Acme Corp",
            contact_name="Jane Doe",
            contact_email="jane@acmecorp.io",
            website_url="https://acmecorp.io",
            website_domain="acmecorp.io",
        )


async def _log_count(db) -> int:
    async with db.get_session() as session:
        result = await session.execute(select(func.count(VerificationLogModel.id)))
        return result.scalar_one()


class TestVerify:
    async def test_valid(self, db, svc, tenant):
        async with db.get_session() as session:
            outcome = await svc.verify(
                session, tenant.license_key, "https://acmecorp.io/",
                request_ip="203.0.113.9", user_agent="pytest",
            )
        assert outcome.valid
        assert outcome.client["companyName"] == "Acme Corp"

    async def test_valid_stamps_access_dates(self, db, svc, tenants, tenant):
        async with db.get_session() as session:
            await svc.verify(session, tenant.license_key, "acmecorp.io")
        async with db.get_session() as session:
            reloaded = await tenants.get_by_id(session, tenant.id)
            assert reloaded.last_access_date is not None
            assert reloaded.last_verification_date == reloaded.last_access_date

    async def test_writes_one_log_entry(self, db, svc, tenant):
        async with db.get_session() as session:
            await svc.verify(
                session, tenant.license_key, "acmecorp.io",
                request_ip="203.0.113.9", user_agent="pytest",
            )
        async with db.get_session() as session:
            logs = await svc.list_logs(session, tenant.id)
        assert len(logs) == 1
        log = logs[0]
        assert log.verification_status == VerificationStatus.VALID
        assert log.request_domain == "acmecorp.io"
        assert log.request_ip == "203.0.113.9"
        assert log.user_agent == "pytest"
        assert log.error_message is None
        assert log.response_time_ms >= 0

    async def test_unknown_key_logged_against_unknown(self, db, svc, tenant):
        async with db.get_session() as session:
            outcome = await svc.verify(
                session, "LIC-0000-0000-0000-0000-0000-0000", "acmecorp.io"
            )
        assert outcome.http_status == 401
        async with db.get_session() as session:
            logs = await svc.list_logs(session, UNKNOWN_TENANT)
        assert len(logs) == 1
        assert logs[0].error_message == "License key not found"

    async def test_domain_mismatch_logged(self, db, svc, tenant):
        async with db.get_session() as session:
            outcome = await svc.verify(session, tenant.license_key, "evil.io")
        assert outcome.http_status == 403
        async with db.get_session() as session:
            logs = await svc.list_logs(session, tenant.id)
        assert logs[0].verification_status == VerificationStatus.INVALID
        assert logs[0].request_domain == "evil.io"

    async def test_suspended_account(self, db, svc, tenants, tenant):
        async with db.get_session() as session:
            await tenants.toggle_status(session, tenant.id, LifecycleAction.DISABLE)
        async with db.get_session() as session:
            outcome = await svc.verify(session, tenant.license_key, "acmecorp.io")
        assert outcome.status == VerificationStatus.SUSPENDED
        assert outcome.error == "License is suspended"

    async def test_expiry_is_persisted_once(self, db, svc, tenants, tenant):
        async with db.get_session() as session:
            await tenants.update_tenant(
                session, tenant.id, subscription_end_date=utcnow() - timedelta(days=1)
            )

        async with db.get_session() as session:
            first = await svc.verify(session, tenant.license_key, "acmecorp.io")
        assert first.error == "Subscription has expired"
        async with db.get_session() as session:
            reloaded = await tenants.get_by_id(session, tenant.id)
            assert reloaded.subscription_status == SubscriptionStatus.EXPIRED
            first_updated = as_utc(reloaded.updated_at)

        async with db.get_session() as session:
            second = await svc.verify(session, tenant.license_key, "acmecorp.io")
        assert second.error == "Subscription is expired"
        assert second.http_status == 402
        async with db.get_session() as session:
            reloaded = await tenants.get_by_id(session, tenant.id)
            assert as_utc(reloaded.updated_at) == first_updated
        assert await _log_count(db) == 2

    async def test_missing_fields(self, db, svc):
        with pytest.raises(ValidationError, match="License key and domain are required"):
            async with db.get_session() as session:
                await svc.verify(session, None, "acmecorp.io")
        with pytest.raises(ValidationError):
            async with db.get_session() as session:
                await svc.verify(session, "LIC-X", "")
        assert await _log_count(db) == 0

    async def test_store_failure_rolls_back_log_and_patch(self, db, svc, tenants, tenant):
        with patch.object(AsyncSession, "flush", side_effect=RuntimeError("disk I/O error")):
            with pytest.raises(RuntimeError):
                async with db.get_session() as session:
                    await svc.verify(session, tenant.license_key, "acmecorp.io")
        assert await _log_count(db) == 0
        async with db.get_session() as session:
            reloaded = await tenants.get_by_id(session, tenant.id)
            assert reloaded.last_verification_date is None
            assert reloaded.last_access_date is None


class TestCheck:
    async def test_valid_returns_expiry(self, db, svc, tenant):
        async with db.get_session() as session:
            outcome = await svc.check(session, tenant.license_key, "acmecorp.io")
        assert outcome.valid
        assert outcome.expires_at == tenant.subscription_end_date

    async def test_no_log_and_no_state_change(self, db, svc, tenants, tenant):
        async with db.get_session() as session:
            await tenants.update_tenant(
                session, tenant.id, subscription_end_date=utcnow() - timedelta(days=1)
            )
        async with db.get_session() as session:
            outcome = await svc.check(session, tenant.license_key, "acmecorp.io")
        assert outcome.error == "Subscription has expired"
        async with db.get_session() as session:
            reloaded = await tenants.get_by_id(session, tenant.id)
            assert reloaded.subscription_status == SubscriptionStatus.ACTIVE
            assert reloaded.last_access_date is None
        assert await _log_count(db) == 0

    async def test_same_gate_order(self, db, svc, tenants, tenant):
        async with db.get_session() as session:
            await tenants.toggle_status(session, tenant.id, LifecycleAction.SUSPEND)
        async with db.get_session() as session:
            outcome = await svc.check(session, tenant.license_key, "evil.io")
        assert outcome.error == "License is suspended"


class TestCheckByDomain:
    async def test_found(self, db, svc, tenant):
        async with db.get_session() as session:
            found, outcome = await svc.check_by_domain(session, "https://AcmeCorp.io")
        assert found.id == tenant.id
        assert outcome.valid

    async def test_not_found(self, db, svc, tenant):
        with pytest.raises(NotFoundError, match="No license found for this domain"):
            async with db.get_session() as session:
                await svc.check_by_domain(session, "other.io")

    async def test_required(self, db, svc):
        with pytest.raises(ValidationError, match="Domain is required"):
            async with db.get_session() as session:
                await svc.check_by_domain(session, None)

    async def test_gates_applied_without_side_effects(self, db, svc, tenants, tenant):
        async with db.get_session() as session:
            await tenants.update_tenant(
                session, tenant.id, subscription_status=SubscriptionStatus.CANCELLED
            )
        async with db.get_session() as session:
            _, outcome = await svc.check_by_domain(session, "acmecorp.io")
        assert outcome.error == "Subscription is cancelled"
        assert await _log_count(db) == 0


class TestLookupDomain:
    async def test_exact_match(self, db, svc, tenant):
        async with db.get_session() as session:
            result = await svc.lookup_domain(session, "acmecorp.io")
        assert result["exists"] is True
        assert result["exactMatch"] is True
        assert result["allMatches"] == 1
        assert result["client"]["id"] == tenant.id
        assert result["client"]["licenseKey"] == tenant.license_key[:10] + "..."

    async def test_partial_match(self, db, svc, tenant):
        async with db.get_session() as session:
            result = await svc.lookup_domain(session, "acmecorp")
        assert result["exists"] is True
        assert result["exactMatch"] is False

    async def test_missing(self, db, svc, tenant):
        async with db.get_session() as session:
            result = await svc.lookup_domain(session, "nothing-here.io")
        assert result == {
            "exists": False,
            "domain": "nothing-here.io",
            "message": "Domain not found in SAAS clients database",
        }


class TestListLogs:
    async def test_newest_first_with_paging(self, db, svc, tenant):
        for domain in ("a.io", "b.io", "c.io"):
            async with db.get_session() as session:
                await svc.verify(session, tenant.license_key, domain)
        async with db.get_session() as session:
            logs = await svc.list_logs(session, tenant.id, limit=2)
            assert len(logs) == 2
            rest = await svc.list_logs(session, tenant.id, limit=2, offset=2)
            assert len(rest) == 1

    async def test_lifetime_tenant_verifies(self, db, svc, tenants):
        async with db.get_session() as session:
            lifetime = await tenants.create_tenant(
                session,
                company_name="Forever Ltd",
                contact_name="Sam",
                contact_email="sam@forever.io",
                website_url="https://forever.io",
                website_domain="forever.io",
                subscription_type=SubscriptionType.LIFETIME,
            )
        async with db.get_session() as session:
            outcome = await svc.verify(session, lifetime.license_key, "forever.io")
        assert outcome.valid
        assert outcome.client["subscriptionEndDate"] is None


class TestMalformedKey:
    async def test_malformed_key_is_invalid_and_logged(self, db, svc, tenant):
        async with db.get_session() as session:
            outcome = await svc.verify(session, "not-a-license", "acmecorp.io")
        assert outcome.http_status == 401
        assert outcome.error == "Invalid license key"
        assert await _log_count(db) == 1

    async def test_oversize_key_logged_verbatim(self, db, svc, tenant):
        key = "LIC-" + "X" * 1000
        async with db.get_session() as session:
            await svc.verify(session, key, "acmecorp.io")
        async with db.get_session() as session:
            logged = (await session.execute(select(VerificationLogModel))).scalar_one()
        assert logged.license_key == key

    def test_caller_supplied_columns_are_unbounded(self):
        columns = VerificationLogModel.__table__.c
        for name in ("license_key", "request_domain", "request_ip"):
            assert isinstance(columns[name].type, Text)
