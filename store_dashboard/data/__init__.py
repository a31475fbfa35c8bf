"""
Catalog and Sales Generation Module
"""
from .catalog import CatalogBuilder, build_catalog, get_category_name, get_section_name
from .generators import SalesGenerator, default_range, generate_sales_for_range
from .models import (
    Catalog,
    Category,
    DateTimeRange,
    Interval,
    Item,
    ItemSalesRecord,
    ItemWithMetrics,
    Section,
)
from .sampling import RandomSource, make_random_source

__all__ = [
    "Catalog",
    "CatalogBuilder",
    "Category",
    "DateTimeRange",
    "Interval",
    "Item",
    "ItemSalesRecord",
    "ItemWithMetrics",
    "RandomSource",
    "SalesGenerator",
    "Section",
    "build_catalog",
    "default_range",
    "generate_sales_for_range",
    "get_category_name",
    "get_section_name",
    "make_random_source",
]
