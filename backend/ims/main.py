"""FastAPI main application."""
import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ims.config import Settings, get_settings
from ims.context import build_context
from ims.database import init_db, make_engine, make_session_factory
from ims.routers import (
    health_router,
    auth_router,
    admin_router,
    inventory_router,
    sales_router,
    expenses_router,
    reports_router,
    banners_router,
    sync_router,
)
from ims.services.errors import DomainError
from ims.services.gateway import RemoteGateway

logger = logging.getLogger(__name__)

# Mount routers under /api/v1
API_PREFIX = "/api/v1"


def create_app(
    settings: Settings | None = None,
    gateway_factory: Callable[[str], RemoteGateway] | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        engine = make_engine(settings.database_url)
        init_db(engine)
        context = build_context(settings, make_session_factory(engine), gateway_factory)
        context.sync.initialize()
        context.sync.start()
        app.state.ims = context
        yield
        # Shutdown
        context.sync.shutdown()
        engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant inventory records with a synchronized sheet backend",
        version="1.0.0",
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure properly in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(admin_router, prefix=API_PREFIX)
    app.include_router(inventory_router, prefix=API_PREFIX)
    app.include_router(sales_router, prefix=API_PREFIX)
    app.include_router(expenses_router, prefix=API_PREFIX)
    app.include_router(reports_router, prefix=API_PREFIX)
    app.include_router(banners_router, prefix=API_PREFIX)
    app.include_router(sync_router, prefix=API_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "app": settings.app_name,
            "docs": "/docs",
            "health": f"{API_PREFIX}/health"
        }

    return app


app = create_app()
