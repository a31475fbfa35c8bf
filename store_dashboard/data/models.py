"""
Catalog and Sales Data Models

Immutable value types for the section → category → item hierarchy,
requested datetime ranges, raw sales records and per-item metrics.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from store_dashboard.exceptions import InvalidIntervalError, InvalidRangeError


class Interval(str, Enum):
    """Sales bucket width"""
    DAY = "day"
    HOUR = "hour"

    @property
    def step(self) -> timedelta:
        return timedelta(hours=1) if self is Interval.HOUR else timedelta(days=1)


@dataclass(frozen=True)
class Section:
    """Top-level store department"""
    id: str
    name: str


@dataclass(frozen=True)
class Category:
    """Grouping of items within a section"""
    id: str
    name: str
    section_id: str


@dataclass(frozen=True)
class Item:
    """Sellable product with unit cost and price"""
    id: str
    name: str
    category_id: str
    section_id: str  # denormalized from the owning category
    unit_cost: float
    unit_price: float

    @property
    def unit_margin(self) -> float:
        return self.unit_price - self.unit_cost


@dataclass(frozen=True)
class ItemSalesRecord:
    """Units sold for one item in one time bucket"""
    item_id: str
    date: str
    units_sold: int


@dataclass(frozen=True)
class ItemWithMetrics(Item):
    """Item joined with its aggregated sales metrics"""
    units_sold: int = 0
    revenue: float = 0.0
    cost: float = 0.0
    profit: float = 0.0


@dataclass(frozen=True)
class Catalog:
    """
    Immutable catalog of sections, categories and items.

    Built once by ``build_catalog`` and passed explicitly to every
    consumer. Tuples preserve generation order (section → category → item),
    which is the ordering contract for aggregation output.
    """
    sections: Tuple[Section, ...]
    categories: Tuple[Category, ...]
    items: Tuple[Item, ...]
    _sections_by_id: Mapping[str, Section] = field(init=False, repr=False, compare=False)
    _categories_by_id: Mapping[str, Category] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(
            self, "_sections_by_id", MappingProxyType({s.id: s for s in self.sections})
        )
        object.__setattr__(
            self, "_categories_by_id", MappingProxyType({c.id: c for c in self.categories})
        )

    def get_section(self, section_id: str) -> Optional[Section]:
        return self._sections_by_id.get(section_id)

    def get_category(self, category_id: str) -> Optional[Category]:
        return self._categories_by_id.get(category_id)

    def get_section_name(self, section_id: str) -> str:
        """Section name, or the id itself when unknown"""
        section = self.get_section(section_id)
        return section.name if section else section_id

    def get_category_name(self, category_id: str) -> str:
        """Category name, or the id itself when unknown"""
        category = self.get_category(category_id)
        return category.name if category else category_id

    def categories_in_section(self, section_id: str, query: str = "") -> Tuple[Category, ...]:
        """
        Categories of a section in catalog order.

        Args:
            section_id: Owning section
            query: Optional case-insensitive substring filter on the name
        """
        q = query.strip().lower()
        return tuple(
            c for c in self.categories
            if c.section_id == section_id and (not q or q in c.name.lower())
        )

    def items_in_category(self, category_id: str) -> Tuple[Item, ...]:
        return tuple(i for i in self.items if i.category_id == category_id)


def _parse_bound(value: Union[str, datetime], label: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise InvalidRangeError(f"Range {label} must be an ISO-8601 string, got {type(value).__name__}")
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise InvalidRangeError(f"Range {label} is not a valid ISO-8601 datetime: {value!r}") from e


def parse_interval(value: Union[str, Interval]) -> Interval:
    """Parse an interval name, raising InvalidIntervalError for unknown values"""
    try:
        return Interval(value)
    except ValueError as e:
        allowed = [i.value for i in Interval]
        raise InvalidIntervalError(f"Interval must be one of: {allowed}, got {value!r}") from e


@dataclass(frozen=True)
class DateTimeRange:
    """
    Requested sales window.

    ``start`` and ``end`` are both inclusive. An inverted range is valid
    and simply contains no buckets.
    """
    start: datetime
    end: datetime
    interval: Interval = Interval.DAY

    @classmethod
    def parse(
        cls,
        start: Union[str, datetime],
        end: Union[str, datetime],
        interval: Union[str, Interval] = Interval.DAY,
    ) -> "DateTimeRange":
        """
        Build a range from ISO-8601 strings (or datetimes).

        Raises:
            InvalidRangeError: Unparseable bounds, or naive mixed with aware
            InvalidIntervalError: Interval other than day or hour
        """
        start_dt = _parse_bound(start, "start")
        end_dt = _parse_bound(end, "end")
        if (start_dt.tzinfo is None) != (end_dt.tzinfo is None):
            raise InvalidRangeError("Range start and end must both be naive or both carry a UTC offset")
        return cls(start=start_dt, end=end_dt, interval=parse_interval(interval))

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    @property
    def bucket_count(self) -> int:
        """Number of buckets the range expands to, computed without iterating"""
        if self.is_empty:
            return 0
        return (self.end - self.start) // self.interval.step + 1

    @property
    def cache_key(self) -> str:
        return f"{self.start.isoformat()}|{self.end.isoformat()}|{self.interval.value}"
