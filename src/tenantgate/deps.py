"""Dependency injection singletons for TenantGate."""

from tenantgate.common.config import get_settings
from tenantgate.common.database import DatabaseManager
from tenantgate.federation.client import TenantApiClient
from tenantgate.federation.service import FederationService
from tenantgate.licensing.service import LicenseVerificationService
from tenantgate.tenants.service import TenantService

_db: DatabaseManager | None = None
_tenants: TenantService | None = None
_verification: LicenseVerificationService | None = None
_api_client: TenantApiClient | None = None
_federation: FederationService | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_tenant_service() -> TenantService:
    global _tenants
    if _tenants is None:
        _tenants = TenantService(get_settings())
    return _tenants


def get_verification_service() -> LicenseVerificationService:
    global _verification
    if _verification is None:
        _verification = LicenseVerificationService(get_settings(), get_tenant_service())
    return _verification


def get_tenant_api_client() -> TenantApiClient:
    global _api_client
    if _api_client is None:
        settings = get_settings()
        _api_client = TenantApiClient(
            timeout=settings.federation_timeout,
            user_agent=settings.federation_user_agent,
        )
    return _api_client


def get_federation_service() -> FederationService:
    global _federation
    if _federation is None:
        _federation = FederationService(
            get_settings(), get_tenant_service(), api_client=get_tenant_api_client()
        )
    return _federation


def set_tenant_api_client(client: TenantApiClient) -> None:
    """Swap the outbound client (tests inject one backed by a mock transport)."""
    global _api_client, _federation
    _api_client = client
    _federation = None


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _tenants, _verification, _api_client, _federation
    _db = None
    _tenants = None
    _verification = None
    _api_client = None
    _federation = None
