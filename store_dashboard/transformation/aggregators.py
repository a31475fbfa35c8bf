"""
Metrics Aggregation Module

Folds raw sales records into per-item totals and joins them against
the catalog to derive revenue, cost and profit.
"""

from typing import Iterable, List

import polars as pl
import structlog

from store_dashboard.data.models import Catalog, ItemSalesRecord, ItemWithMetrics

logger = structlog.get_logger(__name__)

SALES_SCHEMA = {
    "item_id": pl.Utf8,
    "units_sold": pl.Int64,
}

ITEM_SCHEMA = {
    "id": pl.Utf8,
    "name": pl.Utf8,
    "category_id": pl.Utf8,
    "section_id": pl.Utf8,
    "unit_cost": pl.Float64,
    "unit_price": pl.Float64,
}

METRICS_SCHEMA = {
    **ITEM_SCHEMA,
    "units_sold": pl.Int64,
    "revenue": pl.Float64,
    "cost": pl.Float64,
    "profit": pl.Float64,
}


class MetricsAggregator:
    """
    Per-item metrics over a set of sales records.

    Output always holds one row per catalog item, in catalog order.
    Items without sales get zero metrics; records for unknown items
    are dropped by the join.

    Example:
        aggregator = MetricsAggregator(catalog)
        metrics = aggregator.aggregate(records)
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self._items_df = pl.DataFrame(
            {
                "id": [i.id for i in catalog.items],
                "name": [i.name for i in catalog.items],
                "category_id": [i.category_id for i in catalog.items],
                "section_id": [i.section_id for i in catalog.items],
                "unit_cost": [i.unit_cost for i in catalog.items],
                "unit_price": [i.unit_price for i in catalog.items],
            },
            schema=ITEM_SCHEMA,
        ).with_row_index("_position")

    def aggregate_frame(self, records: Iterable[ItemSalesRecord]) -> pl.DataFrame:
        """
        Aggregate records into a metrics DataFrame.

        Args:
            records: Sales records, any order

        Returns:
            DataFrame with METRICS_SCHEMA columns, one row per catalog item
        """
        records = list(records)
        sales_df = pl.DataFrame(
            {
                "item_id": [r.item_id for r in records],
                "units_sold": [r.units_sold for r in records],
            },
            schema=SALES_SCHEMA,
        )

        totals = sales_df.group_by("item_id").agg(
            pl.col("units_sold").sum().alias("units_sold")
        )

        df = (
            self._items_df
            .join(totals, left_on="id", right_on="item_id", how="left")
            .sort("_position")
            .drop("_position")
            .with_columns(pl.col("units_sold").fill_null(0).cast(pl.Int64))
            .with_columns([
                (pl.col("units_sold") * pl.col("unit_price")).alias("revenue"),
                (pl.col("units_sold") * pl.col("unit_cost")).alias("cost"),
            ])
            .with_columns(
                (pl.col("revenue") - pl.col("cost")).alias("profit")
            )
        )

        logger.debug(
            "Metrics aggregated",
            records=len(records),
            items=len(df),
            total_units=int(df["units_sold"].sum()),
        )
        return df.select(list(METRICS_SCHEMA))

    def aggregate(self, records: Iterable[ItemSalesRecord]) -> List[ItemWithMetrics]:
        """Aggregate records into ItemWithMetrics values"""
        return frame_to_metrics(self.aggregate_frame(records))

    @staticmethod
    def to_frame(metrics: Iterable[ItemWithMetrics]) -> pl.DataFrame:
        """Metrics values as a DataFrame, preserving order"""
        return metrics_to_frame(metrics)

    @staticmethod
    def filter_section(metrics: Iterable[ItemWithMetrics], section_id: str) -> List[ItemWithMetrics]:
        return [m for m in metrics if m.section_id == section_id]

    @staticmethod
    def filter_category(metrics: Iterable[ItemWithMetrics], category_id: str) -> List[ItemWithMetrics]:
        return [m for m in metrics if m.category_id == category_id]


def metrics_to_frame(metrics: Iterable[ItemWithMetrics]) -> pl.DataFrame:
    metrics = list(metrics)
    return pl.DataFrame(
        {column: [getattr(m, column) for m in metrics] for column in METRICS_SCHEMA},
        schema=METRICS_SCHEMA,
    )


def frame_to_metrics(df: pl.DataFrame) -> List[ItemWithMetrics]:
    return [ItemWithMetrics(**row) for row in df.iter_rows(named=True)]


def aggregate_metrics(catalog: Catalog, records: Iterable[ItemSalesRecord]) -> List[ItemWithMetrics]:
    """Convenience wrapper around MetricsAggregator.aggregate"""
    return MetricsAggregator(catalog).aggregate(records)
