"""Public license verification API (called by tenant websites).

Every response carries permissive CORS headers because tenant sites call
these endpoints from arbitrary origins. Errors never escape as raw
exceptions: they are answered with ``{"valid": false, "error": ...}``.
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from tenantgate.common.exceptions import TenantGateError, ValidationError
from tenantgate.common.models import as_utc, utcnow
from tenantgate.licensing.schemas import (
    ClientProjection,
    DomainClient,
    DomainLicenseResponse,
    DomainRequest,
    LicenseCheckResponse,
    PingResponse,
    VerifyLicenseRequest,
    VerifyLicenseResponse,
    WireModel,
)

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def _get_service():
    from tenantgate.deps import get_verification_service
    return get_verification_service()


def _get_db():
    from tenantgate.deps import get_db
    return get_db()


def _respond(body: BaseModel | dict, status_code: int = 200) -> JSONResponse:
    if isinstance(body, BaseModel):
        content = body.model_dump(mode="json", by_alias=True, exclude_unset=True)
    else:
        content = jsonable_encoder(body)
    return JSONResponse(content, status_code=status_code, headers=CORS_HEADERS)


def _preflight() -> JSONResponse:
    return JSONResponse({}, status_code=200, headers=CORS_HEADERS)


async def _read_body(request: Request, model: type[WireModel]) -> WireModel:
    """Parse a JSON body by hand so bad input is answered in the wire format."""
    raw = await request.body()
    if not raw.strip():
        return model()
    try:
        return model.model_validate_json(raw)
    except PydanticValidationError as e:
        raise ValidationError("Invalid request body") from e


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    return request.client.host if request.client else "unknown"


# ── License verification ──

@router.options("/verify-license", include_in_schema=False)
async def verify_license_preflight():
    return _preflight()


@router.post("/verify-license")
async def verify_license(request: Request):
    """Full verification: updates tenant state and writes an audit log entry."""
    started = time.monotonic()
    svc = _get_service()
    db = _get_db()
    try:
        body = await _read_body(request, VerifyLicenseRequest)
        async with db.get_session() as session:
            outcome = await svc.verify(
                session,
                body.license_key,
                body.domain,
                request_ip=_client_ip(request),
                user_agent=request.headers.get("user-agent", "unknown"),
                started=started,
            )
    except TenantGateError as e:
        return _respond(VerifyLicenseResponse(valid=False, error=e.message), e.status_code)
    except Exception:
        logger.exception("License verification error")
        return _respond(
            VerifyLicenseResponse(
                valid=False,
                error="Internal server error during license verification",
            ),
            500,
        )

    if not outcome.valid:
        return _respond(
            VerifyLicenseResponse(valid=False, error=outcome.error),
            outcome.http_status,
        )
    return _respond(VerifyLicenseResponse(
        valid=True,
        client=ClientProjection(**outcome.client),
    ))


@router.get("/verify-license")
async def check_license(
    license: Optional[str] = Query(None),
    domain: Optional[str] = Query(None),
):
    """Lightweight status check for polling; no logging, no state changes."""
    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            outcome = await svc.check(session, license, domain)
    except TenantGateError as e:
        return _respond(LicenseCheckResponse(valid=False, error=e.message), e.status_code)
    except Exception:
        logger.exception("License check error")
        return _respond(
            LicenseCheckResponse(valid=False, error="Internal server error"), 500
        )

    if not outcome.valid:
        return _respond(
            LicenseCheckResponse(valid=False, error=outcome.error),
            outcome.http_status,
        )
    return _respond(LicenseCheckResponse(valid=True, expires_at=outcome.expires_at))


# ── Domain discovery ──

@router.options("/check-by-domain", include_in_schema=False)
async def check_by_domain_preflight():
    return _preflight()


@router.post("/check-by-domain")
async def check_by_domain(request: Request):
    """Find the license bound to a domain and report whether it is usable."""
    svc = _get_service()
    db = _get_db()
    try:
        body = await _read_body(request, DomainRequest)
        async with db.get_session() as session:
            tenant, outcome = await svc.check_by_domain(session, body.domain)
    except TenantGateError as e:
        return _respond(DomainLicenseResponse(valid=False, error=e.message), e.status_code)
    except Exception:
        logger.exception("Domain license check error")
        return _respond(
            DomainLicenseResponse(
                valid=False,
                error="Internal server error during license verification",
            ),
            500,
        )

    if not outcome.valid:
        return _respond(
            DomainLicenseResponse(valid=False, error=outcome.error),
            outcome.http_status,
        )
    return _respond(DomainLicenseResponse(
        valid=True,
        globally_verified=bool(tenant.license_verified),
        license_key=tenant.license_key,
        client=DomainClient(
            id=tenant.id,
            company_name=tenant.company_name,
            subscription_status=tenant.subscription_status,
            subscription_end_date=as_utc(tenant.subscription_end_date),
        ),
    ))


@router.options("/check-domain", include_in_schema=False)
async def check_domain_preflight():
    return _preflight()


@router.post("/check-domain")
async def check_domain(request: Request):
    """Diagnostic: does any tenant record mention this domain?"""
    svc = _get_service()
    db = _get_db()
    try:
        body = await _read_body(request, DomainRequest)
        async with db.get_session() as session:
            result = await svc.lookup_domain(session, body.domain)
    except TenantGateError as e:
        return _respond({"exists": False, "error": e.message}, e.status_code)
    except Exception:
        logger.exception("Domain check error")
        return _respond(
            {"exists": False, "error": "Internal server error during domain check"},
            500,
        )
    return _respond(result)


# ── Reachability ──

@router.options("/ping", include_in_schema=False)
async def ping_preflight():
    return _preflight()


@router.get("/ping")
async def ping():
    from tenantgate.common.config import get_settings

    settings = get_settings()
    return _respond(PingResponse(
        success=True,
        message="Admin panel is reachable",
        timestamp=utcnow(),
        server=settings.api_title,
        version=settings.api_version,
    ))
