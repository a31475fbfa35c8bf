"""
Ranking and Grouping Module

Turns per-item metrics into presentation-ready rankings:
- top-selling items per category or section
- unprofitable items
- group totals by a selectable metric, as values or percentage shares
- per-item rankings by a selectable metric

All sorts are stable, so ties keep catalog order. Percentage shares are
always taken against the full total of the input, before any top-N cut.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

import polars as pl
import structlog

from store_dashboard.data.models import Catalog, ItemWithMetrics
from .aggregators import metrics_to_frame

logger = structlog.get_logger(__name__)


class Metric(str, Enum):
    """Metric a ranking is ordered by"""
    QUANTITY = "quantity"
    REVENUE = "revenue"
    PROFIT = "profit"

    @property
    def column(self) -> str:
        return "units_sold" if self is Metric.QUANTITY else self.value


class DisplayMode(str, Enum):
    """How ranked values are expressed"""
    VALUES = "values"
    PERCENTAGES = "percentages"


class GroupBy(str, Enum):
    """Grouping dimension"""
    SECTION = "section"
    CATEGORY = "category"

    @property
    def column(self) -> str:
        return f"{self.value}_id"


@dataclass(frozen=True)
class GroupedItems:
    """Top items of a single category or section"""
    group_id: str
    items: List[ItemWithMetrics]


@dataclass(frozen=True)
class RankedGroup:
    """One group total, either absolute or a percentage share"""
    group_id: str
    name: str
    value: float


@dataclass(frozen=True)
class RankedItem:
    """One item with its ranked metric value"""
    item: ItemWithMetrics
    value: float


@dataclass(frozen=True)
class SectionTotals:
    """Per-section totals in catalog order plus the grand total"""
    sections: List[RankedGroup]
    total: float


def share(value: float, total: float) -> float:
    """Percentage of total, 0 when the total is 0"""
    if total == 0:
        return 0.0
    return 100 * value / total


def _group_items(metrics: Iterable[ItemWithMetrics], group_by: GroupBy) -> Dict[str, List[ItemWithMetrics]]:
    groups: Dict[str, List[ItemWithMetrics]] = {}
    key = group_by.column
    for m in metrics:
        groups.setdefault(getattr(m, key), []).append(m)
    return groups


def top_selling(
    metrics: Iterable[ItemWithMetrics],
    group_by: GroupBy,
    top_n: int = 5,
) -> List[GroupedItems]:
    """
    Best sellers by units per group.

    Groups appear in order of first occurrence; groups with no items
    are absent rather than empty.
    """
    group_by = GroupBy(group_by)
    return [
        GroupedItems(
            group_id=group_id,
            items=sorted(items, key=lambda m: m.units_sold, reverse=True)[:top_n],
        )
        for group_id, items in _group_items(metrics, group_by).items()
    ]


def top_selling_by_category(metrics: Iterable[ItemWithMetrics], top_n: int = 5) -> List[GroupedItems]:
    return top_selling(metrics, GroupBy.CATEGORY, top_n)


def top_selling_by_section(metrics: Iterable[ItemWithMetrics], top_n: int = 5) -> List[GroupedItems]:
    return top_selling(metrics, GroupBy.SECTION, top_n)


def unprofitable_items(
    metrics: Iterable[ItemWithMetrics],
    limit: Optional[int] = None,
) -> List[ItemWithMetrics]:
    """Items with profit <= 0, most negative first"""
    losers = sorted((m for m in metrics if m.profit <= 0), key=lambda m: m.profit)
    return losers if limit is None else losers[:limit]


def rank_groups(
    metrics: Iterable[ItemWithMetrics],
    group_by: GroupBy = GroupBy.SECTION,
    metric: Metric = Metric.QUANTITY,
    mode: DisplayMode = DisplayMode.VALUES,
    top_n: Optional[int] = None,
    catalog: Optional[Catalog] = None,
) -> List[RankedGroup]:
    """
    Rank category or section totals by a metric.

    Args:
        metrics: Per-item metrics
        group_by: Section or category
        metric: Quantity, revenue or profit
        mode: Absolute values or percentage of the sum over all groups
        top_n: Keep only the first N groups (shares still use the full sum)
        catalog: Used to resolve group names; ids are echoed without it

    Returns:
        Groups sorted by descending total
    """
    group_by, metric, mode = GroupBy(group_by), Metric(metric), DisplayMode(mode)
    key = group_by.column

    totals = (
        metrics_to_frame(metrics)
        .group_by(key, maintain_order=True)
        .agg(pl.col(metric.column).sum().cast(pl.Float64).alias("value"))
        .sort("value", descending=True, maintain_order=True)
    )
    grand_total = float(totals["value"].sum())

    ranked = []
    for row in totals.iter_rows(named=True):
        group_id = row[key]
        value = row["value"]
        if mode == DisplayMode.PERCENTAGES:
            value = share(value, grand_total)
        ranked.append(RankedGroup(
            group_id=group_id,
            name=_group_name(catalog, group_by, group_id),
            value=value,
        ))

    logger.debug(
        "Groups ranked",
        group_by=group_by.value,
        metric=metric.value,
        mode=mode.value,
        groups=len(ranked),
    )
    return ranked if top_n is None else ranked[:top_n]


def top_items(
    metrics: Iterable[ItemWithMetrics],
    metric: Metric = Metric.QUANTITY,
    top_n: Optional[int] = 5,
    mode: DisplayMode = DisplayMode.VALUES,
) -> List[RankedItem]:
    """
    Rank individual items by a metric.

    Percentages are relative to the metric total over all input items,
    not just the top N returned.
    """
    metric, mode = Metric(metric), DisplayMode(mode)
    metrics = list(metrics)
    column = metric.column
    total = sum(getattr(m, column) for m in metrics)

    ranked = sorted(metrics, key=lambda m: getattr(m, column), reverse=True)
    if top_n is not None:
        ranked = ranked[:top_n]

    return [
        RankedItem(
            item=m,
            value=share(getattr(m, column), total) if mode == DisplayMode.PERCENTAGES else getattr(m, column),
        )
        for m in ranked
    ]


def section_totals(
    metrics: Iterable[ItemWithMetrics],
    catalog: Catalog,
    metric: Metric = Metric.QUANTITY,
) -> SectionTotals:
    """Totals for every catalog section, zero-sales sections included"""
    column = Metric(metric).column
    sums: Dict[str, float] = {}
    for m in metrics:
        sums[m.section_id] = sums.get(m.section_id, 0) + getattr(m, column)

    sections = [
        RankedGroup(group_id=s.id, name=s.name, value=sums.get(s.id, 0))
        for s in catalog.sections
    ]
    return SectionTotals(sections=sections, total=sum(s.value for s in sections))


def _group_name(catalog: Optional[Catalog], group_by: GroupBy, group_id: str) -> str:
    if catalog is None:
        return group_id
    if group_by == GroupBy.SECTION:
        return catalog.get_section_name(group_id)
    return catalog.get_category_name(group_id)
