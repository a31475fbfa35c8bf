"""
Test Suite Configuration
"""
from itertools import cycle
from typing import Dict, List, Sequence

import pytest

from store_dashboard.config import Settings
from store_dashboard.config.settings import CacheSettings, GeneratorSettings
from store_dashboard.data.catalog import build_catalog
from store_dashboard.data.models import Catalog, Category, Item, ItemWithMetrics, Section
from store_dashboard.data.sampling import RandomSource, make_random_source


def constant_source(value: float) -> RandomSource:
    """Random source that always returns the same draw"""
    return lambda: value


def sequence_source(values: Sequence[float]) -> RandomSource:
    """Random source cycling through fixed draws"""
    draws = cycle(values)
    return lambda: next(draws)


def make_catalog(
    layout: Dict[str, List[str]],
    prices: Sequence[tuple] = ((2.0, 5.0), (2.0, 4.0), (2.0, 3.0), (3.0, 3.0), (4.0, 2.0)),
) -> Catalog:
    """
    Build a hand-made catalog.

    Args:
        layout: section id -> category names
        prices: (unit_cost, unit_price) per item position
    """
    sections = [Section(id=section_id, name=section_id.replace("sec-", "").title()) for section_id in layout]
    categories = []
    items = []
    for section in sections:
        for n, name in enumerate(layout[section.id], start=1):
            category = Category(id=f"cat-{section.id}-{n}", name=name, section_id=section.id)
            categories.append(category)
            for position, (unit_cost, unit_price) in enumerate(prices, start=1):
                items.append(Item(
                    id=f"{category.id}-item-{position}",
                    name=f"Classic Blend {position}",
                    category_id=category.id,
                    section_id=section.id,
                    unit_cost=unit_cost,
                    unit_price=unit_price,
                ))
    return Catalog(sections=tuple(sections), categories=tuple(categories), items=tuple(items))


def make_metrics(
    item_id: str,
    units: int,
    unit_cost: float = 1.0,
    unit_price: float = 2.0,
    category_id: str = "cat-a",
    section_id: str = "sec-a",
) -> ItemWithMetrics:
    revenue = units * unit_price
    cost = units * unit_cost
    return ItemWithMetrics(
        id=item_id,
        name=item_id,
        category_id=category_id,
        section_id=section_id,
        unit_cost=unit_cost,
        unit_price=unit_price,
        units_sold=units,
        revenue=revenue,
        cost=cost,
        profit=revenue - cost,
    )


@pytest.fixture
def seeded_catalog() -> Catalog:
    """Full-size catalog from a fixed seed"""
    return build_catalog(make_random_source(7))


@pytest.fixture
def small_catalog() -> Catalog:
    """Two sections, three categories, fifteen items"""
    return make_catalog({
        "sec-grocery": ["Staples 1", "Fresh 2"],
        "sec-produce": ["Organic 1"],
    })


@pytest.fixture
def produce_catalog() -> Catalog:
    """Produce section with 12 categories (60 items)"""
    return make_catalog({"sec-produce": [f"Fresh {n}" for n in range(1, 13)]})


@pytest.fixture
def sample_metrics() -> List[ItemWithMetrics]:
    """Metrics across two sections and three categories"""
    return [
        make_metrics("a1", 10, category_id="cat-a", section_id="sec-grocery"),
        make_metrics("a2", 30, category_id="cat-a", section_id="sec-grocery"),
        make_metrics("a3", 20, unit_cost=3.0, unit_price=1.0, category_id="cat-a", section_id="sec-grocery"),
        make_metrics("b1", 5, category_id="cat-b", section_id="sec-grocery"),
        make_metrics("b2", 0, unit_cost=4.0, unit_price=2.0, category_id="cat-b", section_id="sec-grocery"),
        make_metrics("c1", 40, unit_cost=2.0, unit_price=1.5, category_id="cat-c", section_id="sec-produce"),
    ]


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
        generator=GeneratorSettings(seed=11),
        cache=CacheSettings(max_entries=4),
    )


@pytest.fixture
def catalog_factory():
    """Hand-made catalog builder"""
    return make_catalog


@pytest.fixture
def metrics_factory():
    """Single ItemWithMetrics builder"""
    return make_metrics


@pytest.fixture
def constant_random():
    """Random source factory returning a fixed draw"""
    return constant_source


@pytest.fixture
def sequence_random():
    """Random source factory cycling through fixed draws"""
    return sequence_source
