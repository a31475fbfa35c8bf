"""
API Dependencies
"""

from typing import Optional

from fastapi import Depends, Query, Request

from store_dashboard.data.models import DateTimeRange
from store_dashboard.serving.service import DashboardService


def get_service(request: Request) -> DashboardService:
    """Dashboard service created at application start-up"""
    return request.app.state.dashboard


def get_date_range(
    start: Optional[str] = Query(None, description="ISO-8601 start, e.g. 2025-01-01T00:00"),
    end: Optional[str] = Query(None, description="ISO-8601 end, inclusive"),
    interval: Optional[str] = Query(None, description="Bucket width: day or hour"),
    service: DashboardService = Depends(get_service),
) -> DateTimeRange:
    """Requested range, defaulting to the trailing window"""
    return service.resolve_range(start, end, interval)
