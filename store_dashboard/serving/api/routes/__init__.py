"""
API Routes Module
"""
from .health import router as health_router
from .catalog import router as catalog_router
from .sales import router as sales_router

__all__ = [
    "health_router",
    "catalog_router",
    "sales_router",
]
