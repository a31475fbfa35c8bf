"""
Dashboard Service

Holds the immutable catalog together with the sales generator,
metrics aggregator and optional cache, and answers range queries.
"""

from datetime import datetime
from typing import List, Optional

import structlog

from store_dashboard.config.settings import Settings, get_settings
from store_dashboard.data.catalog import build_catalog
from store_dashboard.data.generators import SalesGenerator, default_range
from store_dashboard.data.models import Catalog, DateTimeRange, Interval, ItemSalesRecord, ItemWithMetrics
from store_dashboard.data.sampling import RandomSource, make_random_source
from store_dashboard.exceptions import InvalidRangeError
from store_dashboard.transformation.aggregators import MetricsAggregator
from .cache import SalesCache, create_cache

logger = structlog.get_logger(__name__)


class DashboardService:
    """
    Entry point used by the API layer.

    Example:
        service = DashboardService.from_settings()
        metrics = service.metrics_for_range(service.resolve_range())
    """

    def __init__(
        self,
        catalog: Catalog,
        random_source: Optional[RandomSource] = None,
        cache: Optional[SalesCache] = None,
        settings: Optional[Settings] = None,
    ):
        self.catalog = catalog
        self.settings = settings or get_settings()
        self.generator = SalesGenerator(catalog, random_source)
        self.aggregator = MetricsAggregator(catalog)
        self.cache = cache

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DashboardService":
        """Build the catalog once and wire the configured cache"""
        settings = settings or get_settings()
        random_source = make_random_source(settings.generator.seed)
        catalog = build_catalog(random_source)
        return cls(
            catalog,
            random_source=random_source,
            cache=create_cache(settings),
            settings=settings,
        )

    def resolve_range(
        self,
        start: Optional[str] = None,
        end: Optional[str] = None,
        interval: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> DateTimeRange:
        """
        Parse request bounds, filling gaps from the default trailing window.

        Raises:
            InvalidRangeError: Unparseable bounds, or more buckets than GENERATOR_MAX_BUCKETS
            InvalidIntervalError: Unknown interval
        """
        fallback = default_range(self.settings.generator.default_range_days, now=now)
        date_range = DateTimeRange.parse(
            start if start is not None else fallback.start,
            end if end is not None else fallback.end,
            interval if interval is not None else Interval.DAY,
        )

        limit = self.settings.generator.max_buckets
        if date_range.bucket_count > limit:
            raise InvalidRangeError(
                f"Range spans {date_range.bucket_count} {date_range.interval.value} buckets, limit is {limit}"
            )
        return date_range

    def sales_for_range(self, date_range: DateTimeRange) -> List[ItemSalesRecord]:
        if self.cache is None:
            return self.generator.generate_for_range(date_range)

        key = date_range.cache_key
        records = self.cache.get(key)
        if records is not None:
            logger.debug("Sales cache hit", key=key)
            return records

        records = self.generator.generate_for_range(date_range)
        self.cache.put(key, records)
        return records

    def metrics_for_range(self, date_range: DateTimeRange) -> List[ItemWithMetrics]:
        return self.aggregator.aggregate(self.sales_for_range(date_range))
