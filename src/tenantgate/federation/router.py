"""Admin federation API: browse tenant users and check connectivity."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from tenantgate.common.models import as_utc
from tenantgate.common.security import require_api_key
from tenantgate.federation.readiness import (
    client_setup_instructions,
    format_readiness_report,
)
from tenantgate.federation.schemas import (
    ConnectionTestResponse,
    FederationStatusResponse,
)

router = APIRouter(prefix="/clients", tags=["federation"])


def _get_service():
    from tenantgate.deps import get_federation_service
    return get_federation_service()


def _get_db():
    from tenantgate.deps import get_db
    return get_db()


@router.get("/{tenant_id}/users")
async def list_tenant_users(
    tenant_id: str,
    limit: Optional[int] = Query(None, ge=1),
    cursor: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    updated_since: Optional[str] = Query(None),
    _=Depends(require_api_key),
):
    """One page of users fetched live from the tenant's own API."""
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        page = await svc.list_users(
            session, tenant_id, limit=limit, cursor=cursor, q=q,
            updated_since=updated_since,
        )
    return JSONResponse(page.model_dump(mode="json", by_alias=True))


@router.post("/{tenant_id}/test-connection", response_model=ConnectionTestResponse)
async def test_connection(tenant_id: str, _=Depends(require_api_key)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        tenant, ok = await svc.test_connection(session, tenant_id)
        return ConnectionTestResponse(
            tenant_id=tenant.id,
            success=ok,
            last_seen_at=as_utc(tenant.last_seen_at),
        )


@router.get("/{tenant_id}/federation-status", response_model=FederationStatusResponse)
async def federation_status(tenant_id: str, _=Depends(require_api_key)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        tenant, readiness = await svc.readiness(session, tenant_id)
        return FederationStatusResponse(
            tenant_id=tenant.id,
            is_valid=readiness.is_valid,
            ready_for_api=readiness.ready_for_api,
            issues=readiness.issues,
            setup_instructions=readiness.setup_instructions,
            client_setup=client_setup_instructions(tenant),
            report=format_readiness_report(readiness),
        )
