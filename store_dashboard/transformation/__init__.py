"""
Metrics Aggregation and Ranking Module
"""
from .aggregators import MetricsAggregator, aggregate_metrics
from .rankers import (
    DisplayMode,
    GroupBy,
    GroupedItems,
    Metric,
    RankedGroup,
    RankedItem,
    SectionTotals,
    rank_groups,
    section_totals,
    top_items,
    top_selling_by_category,
    top_selling_by_section,
    unprofitable_items,
)

__all__ = [
    "DisplayMode",
    "GroupBy",
    "GroupedItems",
    "Metric",
    "MetricsAggregator",
    "RankedGroup",
    "RankedItem",
    "SectionTotals",
    "aggregate_metrics",
    "rank_groups",
    "section_totals",
    "top_items",
    "top_selling_by_category",
    "top_selling_by_section",
    "unprofitable_items",
]
