"""
Catalog API Endpoints

Read-only views over the section/category hierarchy.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from store_dashboard.serving.api.dependencies import get_service
from store_dashboard.serving.service import DashboardService

router = APIRouter()


class SectionSummary(BaseModel):
    """Section with hierarchy counts"""
    id: str
    name: str
    category_count: int
    item_count: int


class CategorySummary(BaseModel):
    """Category within a section"""
    id: str
    name: str
    section_id: str


class SectionCategories(BaseModel):
    """Category search result for one section"""
    section_id: str
    section_name: str
    total: int
    categories: List[CategorySummary]


@router.get("/sections", response_model=List[SectionSummary])
def list_sections(service: DashboardService = Depends(get_service)) -> List[SectionSummary]:
    """List all sections with their category and item counts."""
    catalog = service.catalog
    return [
        SectionSummary(
            id=section.id,
            name=section.name,
            category_count=len(catalog.categories_in_section(section.id)),
            item_count=sum(1 for i in catalog.items if i.section_id == section.id),
        )
        for section in catalog.sections
    ]


@router.get("/sections/{section_id}/categories", response_model=SectionCategories)
def list_section_categories(
    section_id: str,
    q: str = Query("", description="Case-insensitive category name filter"),
    service: DashboardService = Depends(get_service),
) -> SectionCategories:
    """
    Categories of a section, optionally filtered by name.

    Unknown sections return an empty list with the id echoed as the name.
    """
    catalog = service.catalog
    matches = catalog.categories_in_section(section_id, q)
    return SectionCategories(
        section_id=section_id,
        section_name=catalog.get_section_name(section_id),
        total=len(catalog.categories_in_section(section_id)),
        categories=[
            CategorySummary(id=c.id, name=c.name, section_id=c.section_id)
            for c in matches
        ],
    )
