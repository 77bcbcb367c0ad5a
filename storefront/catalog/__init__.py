"""
Module 'catalog' (feature-first): listing et CRUD des shirts et shoes.
"""

from .models import (
    Pagination,
    build_pagination,
    Shirt,
    ShirtCreate,
    ShirtUpdate,
    ShirtQuery,
    Shoe,
    ShoeCreate,
    ShoeUpdate,
    ShoeQuery,
)
from .repository import CatalogRepository

__all__ = [
    "Pagination",
    "build_pagination",
    "Shirt",
    "ShirtCreate",
    "ShirtUpdate",
    "ShirtQuery",
    "Shoe",
    "ShoeCreate",
    "ShoeUpdate",
    "ShoeQuery",
    "CatalogRepository",
]
