"""
FastAPI Application Factory

Creates and configures the dashboard API application.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import structlog

from store_dashboard.config.settings import Settings, get_settings
from store_dashboard.exceptions import StoreDashboardError
from store_dashboard.serving.service import DashboardService
from .middleware import RequestLoggingMiddleware
from .routes import catalog_router, health_router, sales_router

logger = structlog.get_logger(__name__)


def create_api_app(
    service: Optional[DashboardService] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        service: Pre-built dashboard service; built from settings at
            start-up when omitted
        settings: Application settings

    Returns:
        Configured FastAPI app instance
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "dashboard", None) is None:
            app.state.dashboard = DashboardService.from_settings(settings)
        logger.info(
            "Dashboard API started",
            environment=settings.app_env,
            items=len(app.state.dashboard.catalog.items),
        )
        yield
        logger.info("Shutting down...")

    app = FastAPI(
        title="Store Sales Dashboard API",
        description="Synthetic retail sales by section, category and item",
        version=settings.version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.dashboard = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    @app.exception_handler(StoreDashboardError)
    async def dashboard_error_handler(request: Request, exc: StoreDashboardError) -> JSONResponse:
        logger.warning(
            "Rejected request",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(catalog_router, prefix="/api/v1/catalog", tags=["Catalog"])
    app.include_router(sales_router, prefix="/api/v1/sales", tags=["Sales"])

    return app
