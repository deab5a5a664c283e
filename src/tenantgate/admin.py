"""Admin sub-application: tenant management and API federation.

Mounted at ``/admin`` so its CORS policy (configured origins only) stays
separate from the public verification API, which accepts any origin.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tenantgate.common.config import get_settings
from tenantgate.common.exceptions import TenantGateError
from tenantgate.common.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def create_admin_app() -> FastAPI:
    """Create the admin FastAPI sub-application."""
    settings = get_settings()
    app = FastAPI(title=f"{settings.api_title} Admin", version=settings.api_version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TenantGateError)
    async def handle_tenantgate_error(request: Request, exc: TenantGateError):
        if exc.status_code >= 500:
            logger.error(
                "Admin request failed",
                extra={"path": request.url.path, "code": exc.code, "error": exc.message},
            )
        body = ErrorResponse(error=exc.message, code=exc.code)
        return JSONResponse(body.model_dump(), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled admin error", extra={"path": request.url.path})
        body = ErrorResponse(error="Internal server error", code="INTERNAL_ERROR")
        return JSONResponse(body.model_dump(), status_code=500)

    from tenantgate.tenants.router import router as tenant_router
    from tenantgate.federation.router import router as federation_router

    app.include_router(tenant_router)
    app.include_router(federation_router)

    return app
