"""
Health Check Endpoints
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from store_dashboard.serving.api.dependencies import get_service
from store_dashboard.serving.service import DashboardService

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
def health_check(service: DashboardService = Depends(get_service)) -> HealthResponse:
    """
    Health check endpoint.

    Reports catalog size and which cache backend is active.
    """
    checks: Dict[str, Any] = {
        "catalog": {
            "status": "healthy",
            "sections": len(service.catalog.sections),
            "categories": len(service.catalog.categories),
            "items": len(service.catalog.items),
        },
        "cache": {
            "status": "enabled" if service.cache is not None else "disabled",
            "backend": type(service.cache).__name__ if service.cache is not None else None,
        },
    }

    return HealthResponse(
        status="healthy",
        version=service.settings.version,
        environment=service.settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
def liveness_check() -> Dict[str, str]:
    """Liveness probe endpoint."""
    return {"status": "alive"}
