"""
Catalog Builder

Builds the static store catalog:
- 5 fixed sections
- 10-30 categories per section
- exactly 5 items per category, priced along a fixed margin ladder
"""

from typing import List, Optional, Tuple

import structlog

from .models import Catalog, Category, Item, Section
from .sampling import RandomSource, make_random_source, pick, random_int

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

SECTIONS: Tuple[Section, ...] = (
    Section(id="sec-grocery", name="Grocery"),
    Section(id="sec-produce", name="Produce"),
    Section(id="sec-dairy", name="Dairy"),
    Section(id="sec-bakery", name="Bakery"),
    Section(id="sec-beverages", name="Beverages"),
)

CATEGORIES_PER_SECTION = (10, 30)
ITEMS_PER_CATEGORY = 5

CATEGORY_BASE_WORDS = [
    "Staples", "Snacks", "Fresh", "Deli", "Frozen", "Pantry",
    "Beverages", "Baking", "Cereal", "Condiments", "Household", "Health",
    "Beauty", "Pets", "Baby", "International", "Organic", "Seasonal",
    "Specialty", "Gourmet", "Cans", "Dairy", "Cheese", "Yogurt",
    "Bread", "Pastry", "Produce", "Meat", "Seafood", "Prepared",
    "Grains", "Sauces", "Spreads", "Nuts", "Sweets", "Cleaners",
]

ITEM_STYLE_WORDS = [
    "Classic", "Premium", "Family Pack", "Mini", "Large", "Zero Sugar",
    "Light", "Original", "Spicy", "Fresh", "Whole", "Sliced",
    "Organic", "Gluten Free", "Low Fat", "Extra",
]

PRODUCT_WORDS = [
    "Blend", "Mix", "Snack", "Bites", "Delight",
    "Pack", "Selection", "Treat", "Variety", "Special",
]

UNIT_COST_RANGE = (1, 15)

# Markup over unit cost by item position: high, moderate, low,
# break-even, loss. Keeps loss-making items present in every category.
MARGIN_TIERS = [
    (8, 15),
    (3, 8),
    (1, 4),
    (-2, 2),
    (-5, 0),
]

MIN_UNIT_COST = 0.5
MIN_UNIT_PRICE = 0.2


# =============================================================================
# BUILDERS
# =============================================================================

class CatalogBuilder:
    """Generate the section/category/item hierarchy"""

    def __init__(self, random_source: Optional[RandomSource] = None):
        self.rand = random_source or make_random_source()

    def build_categories(self, section: Section) -> List[Category]:
        count = random_int(self.rand, *CATEGORIES_PER_SECTION)
        categories = []
        for i in range(1, count + 1):
            base = pick(self.rand, CATEGORY_BASE_WORDS)
            categories.append(Category(
                id=f"cat-{section.id}-{i}",
                name=f"{base} {i}",
                section_id=section.id,
            ))
        return categories

    def build_items(self, category: Category) -> List[Item]:
        items = []
        for position in range(ITEMS_PER_CATEGORY):
            descriptor = pick(self.rand, ITEM_STYLE_WORDS)
            product = pick(self.rand, PRODUCT_WORDS)
            unit_cost = random_int(self.rand, *UNIT_COST_RANGE)
            unit_price = unit_cost + random_int(self.rand, *MARGIN_TIERS[position])

            items.append(Item(
                id=f"{category.id}-item-{position + 1}",
                name=f"{descriptor} {product}",
                category_id=category.id,
                section_id=category.section_id,
                unit_cost=float(max(MIN_UNIT_COST, unit_cost)),
                unit_price=float(max(MIN_UNIT_PRICE, unit_price)),
            ))
        return items

    def build(self) -> Catalog:
        """Generate the full catalog"""
        categories: List[Category] = []
        for section in SECTIONS:
            categories.extend(self.build_categories(section))

        items: List[Item] = []
        for category in categories:
            items.extend(self.build_items(category))

        catalog = Catalog(
            sections=SECTIONS,
            categories=tuple(categories),
            items=tuple(items),
        )
        logger.info(
            "Catalog built",
            sections=len(catalog.sections),
            categories=len(catalog.categories),
            items=len(catalog.items),
        )
        return catalog


def build_catalog(random_source: Optional[RandomSource] = None) -> Catalog:
    """Build a new catalog. Call once at start-up and share the result."""
    return CatalogBuilder(random_source).build()


def get_section_name(catalog: Catalog, section_id: str) -> str:
    return catalog.get_section_name(section_id)


def get_category_name(catalog: Catalog, category_id: str) -> str:
    return catalog.get_category_name(category_id)
