"""
Sales Analytics API Endpoints

REST API backing the dashboard panels: section overview, ranked
groups, top sellers and unprofitable items.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
import structlog

from store_dashboard.data.models import Catalog, DateTimeRange, ItemWithMetrics
from store_dashboard.serving.api.dependencies import get_date_range, get_service
from store_dashboard.serving.service import DashboardService
from store_dashboard.transformation.aggregators import MetricsAggregator
from store_dashboard.transformation.rankers import (
    DisplayMode,
    GroupBy,
    Metric,
    rank_groups,
    section_totals,
    top_items,
    top_selling,
    unprofitable_items,
)

router = APIRouter()
logger = structlog.get_logger(__name__)


class RangeInfo(BaseModel):
    """Resolved request range"""
    start: datetime
    end: datetime
    interval: str


class ItemMetrics(BaseModel):
    """Item with aggregated sales metrics"""
    id: str
    name: str
    category_id: str
    category_name: str
    section_id: str
    section_name: str
    unit_cost: float
    unit_price: float
    units_sold: int
    revenue: float
    cost: float
    profit: float


class GroupValue(BaseModel):
    """Group total or share"""
    group_id: str
    name: str
    value: float


class GroupRanking(BaseModel):
    """Ranked group totals"""
    range: RangeInfo
    group_by: GroupBy
    metric: Metric
    mode: DisplayMode
    groups: List[GroupValue]


class SectionOverview(BaseModel):
    """Per-section totals in catalog order"""
    range: RangeInfo
    metric: Metric
    total: float
    sections: List[GroupValue]


class TopSellingGroup(BaseModel):
    """Best sellers of one group"""
    group_id: str
    name: str
    items: List[ItemMetrics]


class RankedItemMetrics(BaseModel):
    """Item ranked by a metric"""
    value: float
    item: ItemMetrics


class CategoryTopItems(BaseModel):
    """Top items of one category"""
    range: RangeInfo
    category_id: str
    category_name: str
    metric: Metric
    mode: DisplayMode
    items: List[RankedItemMetrics]


def _range_info(date_range: DateTimeRange) -> RangeInfo:
    return RangeInfo(
        start=date_range.start,
        end=date_range.end,
        interval=date_range.interval.value,
    )


def _item_metrics(catalog: Catalog, m: ItemWithMetrics) -> ItemMetrics:
    return ItemMetrics(
        id=m.id,
        name=m.name,
        category_id=m.category_id,
        category_name=catalog.get_category_name(m.category_id),
        section_id=m.section_id,
        section_name=catalog.get_section_name(m.section_id),
        unit_cost=m.unit_cost,
        unit_price=m.unit_price,
        units_sold=m.units_sold,
        revenue=m.revenue,
        cost=m.cost,
        profit=m.profit,
    )


@router.get("/sections/overview", response_model=SectionOverview)
def get_section_overview(
    metric: Metric = Query(Metric.QUANTITY),
    date_range: DateTimeRange = Depends(get_date_range),
    service: DashboardService = Depends(get_service),
) -> SectionOverview:
    """Totals for every section, including sections with no sales."""
    metrics = service.metrics_for_range(date_range)
    totals = section_totals(metrics, service.catalog, metric)

    logger.info("Section overview computed", metric=metric.value, total=totals.total)

    return SectionOverview(
        range=_range_info(date_range),
        metric=metric,
        total=totals.total,
        sections=[GroupValue(group_id=s.group_id, name=s.name, value=s.value) for s in totals.sections],
    )


@router.get("/sections", response_model=GroupRanking)
def get_ranked_sections(
    metric: Metric = Query(Metric.QUANTITY),
    mode: DisplayMode = Query(DisplayMode.VALUES),
    top_n: Optional[int] = Query(None, ge=1),
    date_range: DateTimeRange = Depends(get_date_range),
    service: DashboardService = Depends(get_service),
) -> GroupRanking:
    """Sections ranked by the selected metric."""
    metrics = service.metrics_for_range(date_range)
    ranked = rank_groups(metrics, GroupBy.SECTION, metric, mode, top_n=top_n, catalog=service.catalog)

    return GroupRanking(
        range=_range_info(date_range),
        group_by=GroupBy.SECTION,
        metric=metric,
        mode=mode,
        groups=[GroupValue(group_id=g.group_id, name=g.name, value=g.value) for g in ranked],
    )


@router.get("/sections/{section_id}/categories", response_model=GroupRanking)
def get_ranked_categories(
    section_id: str,
    metric: Metric = Query(Metric.QUANTITY),
    mode: DisplayMode = Query(DisplayMode.VALUES),
    top_n: Optional[int] = Query(None, ge=1),
    date_range: DateTimeRange = Depends(get_date_range),
    service: DashboardService = Depends(get_service),
) -> GroupRanking:
    """Categories of one section ranked by the selected metric."""
    metrics = MetricsAggregator.filter_section(service.metrics_for_range(date_range), section_id)
    ranked = rank_groups(metrics, GroupBy.CATEGORY, metric, mode, top_n=top_n, catalog=service.catalog)

    return GroupRanking(
        range=_range_info(date_range),
        group_by=GroupBy.CATEGORY,
        metric=metric,
        mode=mode,
        groups=[GroupValue(group_id=g.group_id, name=g.name, value=g.value) for g in ranked],
    )


@router.get("/top-items", response_model=List[TopSellingGroup])
def get_top_selling(
    group_by: GroupBy = Query(GroupBy.SECTION),
    top_n: Optional[int] = Query(None, ge=1),
    date_range: DateTimeRange = Depends(get_date_range),
    service: DashboardService = Depends(get_service),
) -> List[TopSellingGroup]:
    """Best sellers by units for every section or category."""
    catalog = service.catalog
    top_n = top_n or service.settings.generator.default_top_n
    metrics = service.metrics_for_range(date_range)

    groups = []
    for group in top_selling(metrics, group_by, top_n):
        if group_by == GroupBy.SECTION:
            name = catalog.get_section_name(group.group_id)
        else:
            name = catalog.get_category_name(group.group_id)
        groups.append(TopSellingGroup(
            group_id=group.group_id,
            name=name,
            items=[_item_metrics(catalog, m) for m in group.items],
        ))
    return groups


@router.get("/categories/{category_id}/top-items", response_model=CategoryTopItems)
def get_category_top_items(
    category_id: str,
    metric: Metric = Query(Metric.QUANTITY),
    mode: DisplayMode = Query(DisplayMode.VALUES),
    top_n: Optional[int] = Query(None, ge=1),
    date_range: DateTimeRange = Depends(get_date_range),
    service: DashboardService = Depends(get_service),
) -> CategoryTopItems:
    """Top items of a category by units, revenue or profit."""
    catalog = service.catalog
    top_n = top_n or service.settings.generator.default_top_n
    metrics = MetricsAggregator.filter_category(service.metrics_for_range(date_range), category_id)

    return CategoryTopItems(
        range=_range_info(date_range),
        category_id=category_id,
        category_name=catalog.get_category_name(category_id),
        metric=metric,
        mode=mode,
        items=[
            RankedItemMetrics(value=r.value, item=_item_metrics(catalog, r.item))
            for r in top_items(metrics, metric, top_n, mode)
        ],
    )


@router.get("/unprofitable", response_model=List[ItemMetrics])
def get_unprofitable_items(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    date_range: DateTimeRange = Depends(get_date_range),
    service: DashboardService = Depends(get_service),
) -> List[ItemMetrics]:
    """Items with zero or negative profit, most negative first."""
    catalog = service.catalog
    limit = limit or service.settings.generator.unprofitable_limit
    metrics = service.metrics_for_range(date_range)
    return [_item_metrics(catalog, m) for m in unprofitable_items(metrics, limit)]
