"""
Synthetic Sales Generator

Generates per-item, per-bucket unit sales over a datetime range.
Demand is shaped by:
- a per-item base demand drawn once per call
- weekend and opening-hours boosts
- a per-category weighting derived from the category name
- uniform multiplicative noise
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import structlog

from store_dashboard.exceptions import InvalidRangeError
from .models import Catalog, DateTimeRange, Interval, ItemSalesRecord
from .sampling import RandomSource, make_random_source, random_int, round_half_up, uniform

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

BASE_DEMAND_RANGE = (2, 40)
NOISE_RANGE = (0.6, 1.4)
SHRINKAGE_RANGE = (0, 4)

WEEKEND_BOOST = 1.4
OPEN_HOURS = (10, 20)
OPEN_HOURS_BOOST = 1.2
CLOSED_HOURS_BOOST = 0.6

DEFAULT_CATEGORY_NAME_LENGTH = 8

@dataclass(frozen=True)
class Bucket:
    """One time slot and its range-wide demand multipliers"""
    label: str
    weekend_boost: float
    hour_boost: float


def _bucket_label(ts: datetime, interval: Interval) -> str:
    if interval == Interval.HOUR:
        return ts.replace(minute=0, second=0, microsecond=0).isoformat()
    return ts.date().isoformat()


def iter_buckets(date_range: DateTimeRange) -> List[Bucket]:
    """Expand a range into its buckets, start and end inclusive"""
    step = date_range.interval.step
    buckets = []
    ts = date_range.start
    while ts <= date_range.end:
        weekend_boost = WEEKEND_BOOST if ts.weekday() >= 5 else 1.0
        if date_range.interval == Interval.HOUR:
            open_from, open_to = OPEN_HOURS
            hour_boost = OPEN_HOURS_BOOST if open_from <= ts.hour <= open_to else CLOSED_HOURS_BOOST
        else:
            hour_boost = 1.0
        buckets.append(Bucket(
            label=_bucket_label(ts, date_range.interval),
            weekend_boost=weekend_boost,
            hour_boost=hour_boost,
        ))
        try:
            ts += step
        except OverflowError:
            # stepped past datetime.max, nothing later can be in range
            break
    return buckets


def default_range(days: int = 30, now: Optional[datetime] = None) -> DateTimeRange:
    """Dashboard default: the trailing ``days`` up to now, daily buckets"""
    end = (now or datetime.now()).replace(second=0, microsecond=0)
    return DateTimeRange(start=end - timedelta(days=days), end=end, interval=Interval.DAY)


# =============================================================================
# GENERATOR
# =============================================================================

class SalesGenerator:
    """
    Generate unit sales for every catalog item.

    Example:
        generator = SalesGenerator(catalog)
        records = generator.generate_for_range(
            DateTimeRange.parse("2025-01-01T00:00", "2025-01-31T23:59", "day")
        )
    """

    def __init__(self, catalog: Catalog, random_source: Optional[RandomSource] = None):
        self.catalog = catalog
        self.rand = random_source or make_random_source()
        self._category_factors = self._build_category_factors()

    def _build_category_factors(self) -> Dict[str, float]:
        return {c.id: 1 + len(c.name) / 50 for c in self.catalog.categories}

    def category_factor(self, category_id: str) -> float:
        """Popularity weight for a category, derived from its name length"""
        factor = self._category_factors.get(category_id)
        if factor is None:
            return 1 + DEFAULT_CATEGORY_NAME_LENGTH / 50
        return factor

    def generate_for_range(self, date_range: DateTimeRange) -> List[ItemSalesRecord]:
        """
        Generate one record per (item, bucket) pair.

        Args:
            date_range: Requested window; inverted ranges produce no records

        Returns:
            Records grouped by item in catalog order, then by bucket
        """
        buckets = iter_buckets(date_range)
        records: List[ItemSalesRecord] = []

        for item in self.catalog.items:
            base = random_int(self.rand, *BASE_DEMAND_RANGE)
            category_factor = self.category_factor(item.category_id)

            for bucket in buckets:
                noise = uniform(self.rand, *NOISE_RANGE)
                demand = base * bucket.weekend_boost * bucket.hour_boost * category_factor * noise
                units = round_half_up(demand - random_int(self.rand, *SHRINKAGE_RANGE))
                records.append(ItemSalesRecord(
                    item_id=item.id,
                    date=bucket.label,
                    units_sold=max(0, units),
                ))

        logger.debug(
            "Sales generated",
            start=date_range.start.isoformat(),
            end=date_range.end.isoformat(),
            interval=date_range.interval.value,
            buckets=len(buckets),
            records=len(records),
        )
        return records

    def generate_for_days(self, days: int, now: Optional[datetime] = None) -> List[ItemSalesRecord]:
        """
        Generate daily sales for the last ``days`` calendar days ending today.

        Raises:
            InvalidRangeError: If days is not positive
        """
        if days < 1:
            raise InvalidRangeError(f"Day window must be positive, got {days}")
        end = (now or datetime.now()).replace(hour=0, minute=0, second=0, microsecond=0)
        start = end - timedelta(days=days - 1)
        return self.generate_for_range(DateTimeRange(start=start, end=end, interval=Interval.DAY))


def generate_sales_for_range(
    catalog: Catalog,
    date_range: DateTimeRange,
    random_source: Optional[RandomSource] = None,
) -> List[ItemSalesRecord]:
    """Convenience wrapper around SalesGenerator.generate_for_range"""
    return SalesGenerator(catalog, random_source).generate_for_range(date_range)
