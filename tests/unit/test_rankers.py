"""
Unit Tests - Ranking and Grouping
"""
import pytest

from store_dashboard.data.generators import generate_sales_for_range
from store_dashboard.data.models import DateTimeRange
from store_dashboard.data.sampling import make_random_source
from store_dashboard.transformation.aggregators import aggregate_metrics
from store_dashboard.transformation.rankers import (
    DisplayMode,
    GroupBy,
    Metric,
    rank_groups,
    section_totals,
    share,
    top_items,
    top_selling_by_category,
    top_selling_by_section,
    unprofitable_items,
)


class TestTopSelling:
    """Tests for per-group best sellers"""

    def test_by_category_truncates_and_sorts(self, sample_metrics):
        groups = top_selling_by_category(sample_metrics, top_n=2)

        assert [g.group_id for g in groups] == ["cat-a", "cat-b", "cat-c"]
        assert [m.id for m in groups[0].items] == ["a2", "a3"]
        assert [m.id for m in groups[1].items] == ["b1", "b2"]
        assert [m.id for m in groups[2].items] == ["c1"]

    def test_by_section_default_top_five(self, sample_metrics):
        groups = top_selling_by_section(sample_metrics)

        assert [g.group_id for g in groups] == ["sec-grocery", "sec-produce"]
        assert [m.id for m in groups[0].items] == ["a2", "a3", "a1", "b1", "b2"]

    def test_empty_metrics_no_groups(self):
        assert top_selling_by_category([]) == []

    def test_ties_keep_input_order(self, metrics_factory):
        metrics = [metrics_factory(f"x{n}", 5) for n in range(1, 4)]

        groups = top_selling_by_category(metrics, top_n=5)

        assert [m.id for m in groups[0].items] == ["x1", "x2", "x3"]


class TestUnprofitableItems:
    """Tests for unprofitable item listing"""

    def test_sorted_most_negative_first(self, sample_metrics):
        losers = unprofitable_items(sample_metrics)

        assert [m.id for m in losers] == ["a3", "c1", "b2"]
        assert all(m.profit <= 0 for m in losers)
        assert [m.profit for m in losers] == sorted(m.profit for m in losers)

    def test_limit(self, sample_metrics):
        assert [m.id for m in unprofitable_items(sample_metrics, limit=2)] == ["a3", "c1"]

    def test_zero_sales_count_as_break_even(self, small_catalog):
        losers = unprofitable_items(aggregate_metrics(small_catalog, []))
        assert len(losers) == len(small_catalog.items)


class TestRankGroups:
    """Tests for metric-selectable group ranking"""

    def test_sections_by_quantity(self, sample_metrics, small_catalog):
        ranked = rank_groups(sample_metrics, GroupBy.SECTION, Metric.QUANTITY, catalog=small_catalog)

        assert [(g.group_id, g.name, g.value) for g in ranked] == [
            ("sec-grocery", "Grocery", 65.0),
            ("sec-produce", "Produce", 40.0),
        ]

    def test_categories_by_quantity(self, sample_metrics):
        ranked = rank_groups(sample_metrics, GroupBy.CATEGORY, Metric.QUANTITY)

        assert [(g.group_id, g.value) for g in ranked] == [("cat-a", 60.0), ("cat-c", 40.0), ("cat-b", 5.0)]

    def test_names_echo_without_catalog(self, sample_metrics):
        ranked = rank_groups(sample_metrics, GroupBy.CATEGORY)
        assert all(g.name == g.group_id for g in ranked)

    def test_revenue_and_profit(self, sample_metrics):
        revenue = rank_groups(sample_metrics, GroupBy.SECTION, Metric.REVENUE)
        profit = rank_groups(sample_metrics, GroupBy.SECTION, Metric.PROFIT)

        assert [(g.group_id, g.value) for g in revenue] == [("sec-grocery", 110.0), ("sec-produce", 60.0)]
        assert [(g.group_id, g.value) for g in profit] == [("sec-grocery", 5.0), ("sec-produce", -20.0)]

    def test_percentages_sum_to_hundred(self, sample_metrics):
        ranked = rank_groups(sample_metrics, GroupBy.CATEGORY, Metric.REVENUE, DisplayMode.PERCENTAGES)

        assert sum(g.value for g in ranked) == pytest.approx(100.0)
        assert ranked[0].value == pytest.approx(100 * 100 / 170)

    def test_percentages_zero_total(self, small_catalog):
        metrics = aggregate_metrics(small_catalog, [])

        ranked = rank_groups(metrics, GroupBy.CATEGORY, Metric.QUANTITY, DisplayMode.PERCENTAGES)

        assert len(ranked) == 3
        assert all(g.value == 0 for g in ranked)

    def test_top_n_shares_use_full_total(self, sample_metrics):
        ranked = rank_groups(sample_metrics, GroupBy.CATEGORY, Metric.QUANTITY, DisplayMode.PERCENTAGES, top_n=1)

        assert len(ranked) == 1
        assert ranked[0].value == pytest.approx(100 * 60 / 105)

    def test_accepts_plain_strings(self, sample_metrics):
        ranked = rank_groups(sample_metrics, "section", "revenue", "percentages")
        assert ranked[0].group_id == "sec-grocery"

    def test_ties_keep_catalog_order(self, metrics_factory):
        metrics = [
            metrics_factory("x1", 5, category_id="cat-x"),
            metrics_factory("y1", 5, category_id="cat-y"),
            metrics_factory("z1", 9, category_id="cat-z"),
        ]

        ranked = rank_groups(metrics, GroupBy.CATEGORY)

        assert [g.group_id for g in ranked] == ["cat-z", "cat-x", "cat-y"]


class TestTopItems:
    """Tests for per-item metric ranking"""

    def test_by_revenue(self, sample_metrics):
        ranked = top_items(sample_metrics, Metric.REVENUE, top_n=3)

        assert [r.item.id for r in ranked] == ["a2", "c1", "a1"]
        assert [r.value for r in ranked] == [60.0, 60.0, 20.0]

    def test_percentages_relative_to_all_items(self, sample_metrics):
        ranked = top_items(sample_metrics, Metric.REVENUE, top_n=2, mode=DisplayMode.PERCENTAGES)

        assert [r.value for r in ranked] == pytest.approx([100 * 60 / 170, 100 * 60 / 170])

    def test_unbounded(self, sample_metrics):
        assert len(top_items(sample_metrics, Metric.PROFIT, top_n=None)) == len(sample_metrics)


class TestSectionTotals:
    """Tests for the catalog-ordered section overview"""

    def test_includes_sections_without_sales(self, sample_metrics, catalog_factory):
        catalog = catalog_factory({
            "sec-grocery": ["Staples 1"],
            "sec-produce": ["Fresh 1"],
            "sec-dairy": ["Cheese 1"],
        })

        totals = section_totals(sample_metrics, catalog)

        assert [(s.group_id, s.name, s.value) for s in totals.sections] == [
            ("sec-grocery", "Grocery", 65),
            ("sec-produce", "Produce", 40),
            ("sec-dairy", "Dairy", 0),
        ]
        assert totals.total == 105


class TestShare:
    """Tests for percentage helper"""

    def test_zero_total(self):
        assert share(5, 0) == 0.0

    def test_share(self):
        assert share(25, 200) == 12.5


class TestPipeline:
    """End-to-end generate, aggregate, rank"""

    def test_single_day_produce_section(self, produce_catalog):
        """Test a one-bucket day over 60 produce items"""
        date_range = DateTimeRange.parse("2025-01-01T00:00", "2025-01-01T00:00", "day")
        records = generate_sales_for_range(produce_catalog, date_range, make_random_source(12))

        assert len(records) == 60
        assert all(r.units_sold >= 0 for r in records)

        losers = unprofitable_items(aggregate_metrics(produce_catalog, records))

        assert [m.profit for m in losers] == sorted(m.profit for m in losers)
        for m in losers:
            assert m.profit <= 0
            if m.units_sold > 0:
                assert m.unit_price <= m.unit_cost

    def test_percentage_grouping_over_generated_sales(self, seeded_catalog):
        date_range = DateTimeRange.parse("2025-01-01T00:00", "2025-01-07T00:00", "day")
        metrics = aggregate_metrics(
            seeded_catalog,
            generate_sales_for_range(seeded_catalog, date_range, make_random_source(2)),
        )

        for group_by in GroupBy:
            for metric in (Metric.QUANTITY, Metric.REVENUE):
                ranked = rank_groups(metrics, group_by, metric, DisplayMode.PERCENTAGES)
                assert sum(g.value for g in ranked) == pytest.approx(100.0)
