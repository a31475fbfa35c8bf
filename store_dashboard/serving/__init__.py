"""
Serving Module
"""
from .cache import InMemorySalesCache, RedisSalesCache, SalesCache, create_cache
from .service import DashboardService

__all__ = [
    "DashboardService",
    "InMemorySalesCache",
    "RedisSalesCache",
    "SalesCache",
    "create_cache",
]
