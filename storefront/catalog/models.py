"""
Modèles du catalogue (shirts, shoes) et requêtes de listing typées.
- Les colonnes Supabase sont en snake_case, l'API expose du camelCase (alias pydantic).
- ShirtQuery / ShoeQuery s'appliquent elles-mêmes à un query builder PostgREST.
"""
import math
from typing import Any, Dict, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


class Pagination(BaseModel):
    page: int
    limit: int
    totalPages: int
    isLastPage: bool


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    """
    totalPages = ceil(total / limit); isLastPage vrai sur la dernière page,
    ou quand il n'y a aucune page.
    """
    total_pages = math.ceil(total / limit) if total > 0 else 0
    is_last_page = max(1, page) == total_pages if total_pages != 0 else True
    return Pagination(page=page, limit=limit, totalPages=total_pages, isLastPage=is_last_page)


# --- Shirts ---
class ShirtCreate(BaseModel):
    title: str = Field(min_length=1)
    price: int = Field(ge=0)
    image: str
    material: str
    color: str
    stock: Optional[int] = Field(default=None, ge=0)


class ShirtUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    price: Optional[int] = Field(default=None, ge=0)
    image: Optional[str] = None
    material: Optional[str] = None
    color: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)


class Shirt(ShirtCreate):
    id: str


# --- Shoes ---
class ShoeFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    price: int = Field(ge=0)
    image: str
    brand: str
    outer_material: str = Field(alias="outerMaterial")
    inner_material: str = Field(alias="innerMaterial")


class ShoeCreate(ShoeFields):
    # Identifiant fourni par la source (ASIN)
    id: str = Field(min_length=1)


class Shoe(ShoeCreate):
    pass


class ShoeUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=1)
    price: Optional[int] = Field(default=None, ge=0)
    image: Optional[str] = None
    brand: Optional[str] = None
    outer_material: Optional[str] = Field(default=None, alias="outerMaterial")
    inner_material: Optional[str] = Field(default=None, alias="innerMaterial")


# --- Requêtes de listing ---
class CatalogQuery(BaseModel):
    """Filtres communs: pagination, fourchette de prix, recherche sur le titre."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    min_price: Optional[int] = Field(default=None, alias="minPrice", ge=0)
    max_price: Optional[int] = Field(default=None, alias="maxPrice", ge=0)
    search: Optional[str] = None

    def equality_filters(self) -> Dict[str, Optional[str]]:
        return {}

    def ordering(self) -> Tuple[str, bool]:
        """(colonne, desc)"""
        return ("id", False)

    def apply_filters(self, builder: Any) -> Any:
        for column, value in self.equality_filters().items():
            if value:
                builder = builder.eq(column, value)
        if self.min_price is not None:
            builder = builder.gte("price", self.min_price)
        if self.max_price is not None:
            builder = builder.lte("price", self.max_price)
        if self.search:
            builder = builder.ilike("title", f"%{self.search}%")
        return builder

    def apply(self, builder: Any) -> Any:
        """Filtres + tri + fenêtre de pagination (range inclusif)."""
        column, desc = self.ordering()
        start = (self.page - 1) * self.limit
        return (
            self.apply_filters(builder)
            .order(column, desc=desc)
            .range(start, start + self.limit - 1)
        )


class ShirtQuery(CatalogQuery):
    color: Optional[str] = None
    material: Optional[str] = None
    sort_by: Literal["title", "price", "stock", "id"] = Field(default="title", alias="sortBy")
    sort_order: Literal["asc", "desc"] = Field(default="asc", alias="sortOrder")

    def equality_filters(self) -> Dict[str, Optional[str]]:
        return {"color": self.color, "material": self.material}

    def ordering(self) -> Tuple[str, bool]:
        return (self.sort_by, self.sort_order == "desc")


class ShoeQuery(CatalogQuery):
    brand: Optional[str] = None
    outer_material: Optional[str] = Field(default=None, alias="outerMaterial")
    inner_material: Optional[str] = Field(default=None, alias="innerMaterial")

    def equality_filters(self) -> Dict[str, Optional[str]]:
        return {
            "brand": self.brand,
            "outer_material": self.outer_material,
            "inner_material": self.inner_material,
        }
