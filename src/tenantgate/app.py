"""FastAPI application factory for TenantGate."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from tenantgate.common.config import get_settings
from tenantgate.common.logging import setup_logging
from tenantgate.common.schemas import HealthResponse


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from tenantgate.deps import get_db
        db = get_db()
        await db.init()
        await db.create_all()
        yield
        # Shutdown
        await db.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Public verification API carries its own permissive CORS headers.
    from tenantgate.licensing.router import router as licensing_router
    app.include_router(licensing_router, prefix=settings.api_prefix, tags=["licensing"])

    from tenantgate.admin import create_admin_app
    app.mount("/admin", create_admin_app())

    return app
