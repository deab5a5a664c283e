"""Shared test fixtures for TenantGate."""

import os

import pytest
from httpx import ASGITransport, AsyncClient


ADMIN_API_KEY = "test-admin-api-key"


@pytest.fixture
def admin_api_key():
    return ADMIN_API_KEY


@pytest.fixture
def app():
    """Create a test app with in-memory DB."""
    os.environ["TENANTGATE_DB_URL"] = "sqlite+aiosqlite://"
    os.environ["TENANTGATE_ADMIN_API_KEY"] = ADMIN_API_KEY
    os.environ["TENANTGATE_ENVIRONMENT"] = "development"

    # Clear caches and singletons so new env vars take effect
    from tenantgate.common.config import get_settings
    get_settings.cache_clear()

    from tenantgate.deps import reset_singletons
    reset_singletons()

    from tenantgate.app import create_app
    return create_app()


@pytest.fixture
async def client(app):
    # Manually init DB since ASGITransport doesn't run lifespan
    from tenantgate.deps import get_db
    db = get_db()
    await db.init()
    await db.create_all()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await db.close()


@pytest.fixture
def admin_headers():
    return {"X-TenantGate-Api-Key": ADMIN_API_KEY}


@pytest.fixture
def client_payload():
    """Factory for admin create-client bodies with sensible defaults."""

    def _payload(**overrides) -> dict:
        payload = {
            "company_name": "Acme Corp",
            "contact_name": "Jane Doe",
            "contact_email": "jane@acmecorp.io",
            "website_url": "https://acmecorp.io",
            "website_domain": "acmecorp.io",
            "subscription_type": "monthly",
        }
        payload.update(overrides)
        return payload

    return _payload
