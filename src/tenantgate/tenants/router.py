"""Tenant admin API — requires the admin API key."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from tenantgate.common.models import as_utc
from tenantgate.common.security import require_api_key
from tenantgate.federation.readiness import creation_instructions, rotation_instructions
from tenantgate.keygen.generator import mask_secret
from tenantgate.licensing.schemas import VerificationLogResponse
from tenantgate.tenants.enums import AccountStatus, SubscriptionStatus
from tenantgate.tenants.models import TenantModel
from tenantgate.tenants.schemas import (
    ApiKeyRegenerateResponse,
    LicenseRegenerateResponse,
    SetupInstructions,
    TenantCreate,
    TenantCreateResponse,
    TenantResponse,
    TenantUpdate,
    ToggleStatusRequest,
)

router = APIRouter(prefix="/clients", tags=["clients"])


def _get_service():
    from tenantgate.deps import get_tenant_service
    return get_tenant_service()


def _get_verification_service():
    from tenantgate.deps import get_verification_service
    return get_verification_service()


def _get_db():
    from tenantgate.deps import get_db
    return get_db()


def tenant_response(tenant: TenantModel, model=TenantResponse, **extra):
    """Build an admin view of a tenant. The API key is only ever shown masked."""
    return model(
        id=tenant.id,
        company_name=tenant.company_name,
        contact_name=tenant.contact_name,
        contact_email=tenant.contact_email,
        contact_phone=tenant.contact_phone,
        website_url=tenant.website_url,
        website_domain=tenant.website_domain,
        license_key=tenant.license_key,
        license_verified=tenant.license_verified,
        status=tenant.status,
        subscription_type=tenant.subscription_type,
        subscription_status=tenant.subscription_status,
        subscription_start_date=as_utc(tenant.subscription_start_date),
        subscription_end_date=as_utc(tenant.subscription_end_date),
        api_base_url=tenant.api_base_url,
        auth_type=tenant.auth_type,
        api_key_preview=mask_secret(tenant.api_key),
        api_status=tenant.api_status,
        last_seen_at=as_utc(tenant.last_seen_at),
        last_access_date=as_utc(tenant.last_access_date),
        last_verification_date=as_utc(tenant.last_verification_date),
        notes=tenant.notes,
        created_at=as_utc(tenant.created_at),
        updated_at=as_utc(tenant.updated_at),
        **extra,
    )


@router.post("", response_model=TenantCreateResponse, status_code=201)
async def create_tenant(body: TenantCreate, _=Depends(require_api_key)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        tenant = await svc.create_tenant(
            session,
            company_name=body.company_name,
            contact_name=body.contact_name,
            contact_email=body.contact_email,
            website_url=body.website_url,
            website_domain=body.website_domain,
            subscription_type=body.subscription_type,
            subscription_end_date=body.subscription_end_date,
            contact_phone=body.contact_phone,
            notes=body.notes,
        )
        return tenant_response(
            tenant,
            TenantCreateResponse,
            setup_instructions=SetupInstructions(
                license_key=tenant.license_key,
                api_key=tenant.api_key,
                api_base_url=tenant.api_base_url,
                auth_type=tenant.auth_type,
                instructions=creation_instructions(tenant),
            ),
        )


@router.get("", response_model=list[TenantResponse])
async def list_tenants(
    status: Optional[AccountStatus] = Query(None),
    subscription_status: Optional[SubscriptionStatus] = Query(None),
    _=Depends(require_api_key),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        tenants = await svc.list_tenants(
            session, status=status, subscription_status=subscription_status
        )
        return [tenant_response(t) for t in tenants]


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(tenant_id: str, _=Depends(require_api_key)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        tenant = await svc.require(session, tenant_id)
        return tenant_response(tenant)


@router.patch("/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: str, body: TenantUpdate, _=Depends(require_api_key)
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        tenant = await svc.update_tenant(
            session, tenant_id, **body.model_dump(exclude_unset=True)
        )
        return tenant_response(tenant)


@router.delete("/{tenant_id}", status_code=204)
async def delete_tenant(tenant_id: str, _=Depends(require_api_key)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        await svc.delete_tenant(session, tenant_id)


# ── Lifecycle ──

@router.post("/{tenant_id}/toggle-status", response_model=TenantResponse)
async def toggle_status(
    tenant_id: str, body: ToggleStatusRequest, _=Depends(require_api_key)
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        tenant = await svc.toggle_status(
            session, tenant_id, body.action, reason=body.reason
        )
        return tenant_response(tenant)


@router.post("/{tenant_id}/regenerate-license", response_model=LicenseRegenerateResponse)
async def regenerate_license(tenant_id: str, _=Depends(require_api_key)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        tenant, old_key = await svc.regenerate_license_key(session, tenant_id)
        return tenant_response(
            tenant, LicenseRegenerateResponse, old_license_key=old_key
        )


@router.post("/{tenant_id}/regenerate-api-key", response_model=ApiKeyRegenerateResponse)
async def regenerate_api_key(tenant_id: str, _=Depends(require_api_key)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        tenant = await svc.regenerate_api_key(session, tenant_id)
        return tenant_response(
            tenant,
            ApiKeyRegenerateResponse,
            setup_instructions=SetupInstructions(
                api_key=tenant.api_key,
                instructions=rotation_instructions(tenant.api_key),
            ),
        )


# ── Verification history ──

@router.get("/{tenant_id}/verification-logs", response_model=list[VerificationLogResponse])
async def list_verification_logs(
    tenant_id: str,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    _=Depends(require_api_key),
):
    tenants = _get_service()
    svc = _get_verification_service()
    db = _get_db()
    async with db.get_session() as session:
        await tenants.require(session, tenant_id)
        logs = await svc.list_logs(session, tenant_id, limit=limit, offset=offset)
        return [VerificationLogResponse.model_validate(log) for log in logs]
