# module storefront.catalog.views

"""Endpoints du catalogue (shirts, shoes).
- GET ""         : listing paginé et filtrable -> {<entité>: [...], pagination}
- GET /filters   : valeurs distinctes pour les filtres du front
- POST ""        : création (corps validé, prix en centimes)
- PUT /{id}      : mise à jour partielle (404 si introuvable)
- DELETE /{id}   : suppression
"""
from typing import Any, Dict, Type
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from storefront.utils.validators import field_errors
from .models import (
    CatalogQuery,
    ShirtCreate,
    ShirtQuery,
    ShirtUpdate,
    ShoeCreate,
    ShoeQuery,
    ShoeUpdate,
    build_pagination,
)
from .repository import (
    CatalogRepository,
    get_shirts_reader,
    get_shirts_writer,
    get_shoes_reader,
    get_shoes_writer,
)

logger = logging.getLogger(__name__)
shirts_router = APIRouter(prefix="/shirts", tags=["Shirts"])
shoes_router = APIRouter(prefix="/shoes", tags=["Shoes"])

def _parse_query(query_cls: Type[CatalogQuery], request: Request) -> CatalogQuery:
    # Les paramètres vides (?minPrice=) sont ignorés comme s'ils étaient absents
    params = {k: v for k, v in request.query_params.items() if v != ""}
    try:
        return query_cls.model_validate(params)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=field_errors(exc))

def _list_page(key: str, repo: CatalogRepository, query: CatalogQuery) -> Dict[str, Any]:
    try:
        items, total = repo.list(query)
    except Exception:
        raise HTTPException(status_code=500, detail=f"Failed to fetch {key}")
    return {key: items, "pagination": build_pagination(query.page, query.limit, total).model_dump()}

def _filters(repo: CatalogRepository, columns: Dict[str, str]) -> Dict[str, Any]:
    try:
        return {key: repo.distinct(column) for key, column in columns.items()}
    except Exception:
        raise HTTPException(status_code=500, detail="Failed to fetch filter options")

def _delete(repo: CatalogRepository, item_id: str, label: str) -> Dict[str, str]:
    if not repo.delete(item_id):
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return {"message": f"{label} deleted successfully"}


# --- Shirts ---
@shirts_router.get("")
def list_shirts(request: Request, repo: CatalogRepository = Depends(get_shirts_reader)):
    """
    Listing des shirts.
    Query: page, limit, minPrice, maxPrice, search, color, material, sortBy, sortOrder
    """
    return _list_page("shirts", repo, _parse_query(ShirtQuery, request))

@shirts_router.get("/filters")
def shirt_filters(repo: CatalogRepository = Depends(get_shirts_reader)):
    return _filters(repo, {"colors": "color", "materials": "material"})

@shirts_router.post("")
def create_shirt(payload: ShirtCreate, repo: CatalogRepository = Depends(get_shirts_writer)):
    return repo.create(payload.model_dump())

@shirts_router.put("/{shirt_id}")
def update_shirt(shirt_id: str, payload: ShirtUpdate, repo: CatalogRepository = Depends(get_shirts_writer)):
    data = payload.model_dump(exclude_none=True)
    if not data:
        raise HTTPException(status_code=400, detail="Aucun champ à mettre à jour")
    updated = repo.update(shirt_id, data)
    if updated is None:
        raise HTTPException(status_code=404, detail="Shirt not found")
    return updated

@shirts_router.delete("/{shirt_id}")
def delete_shirt(shirt_id: str, repo: CatalogRepository = Depends(get_shirts_writer)):
    return _delete(repo, shirt_id, "Shirt")


# --- Shoes ---
@shoes_router.get("")
def list_shoes(request: Request, repo: CatalogRepository = Depends(get_shoes_reader)):
    """
    Listing des shoes (tri par id croissant).
    Query: page, limit, brand, outerMaterial, innerMaterial, minPrice, maxPrice, search
    """
    return _list_page("shoes", repo, _parse_query(ShoeQuery, request))

@shoes_router.get("/filters")
def shoe_filters(repo: CatalogRepository = Depends(get_shoes_reader)):
    return _filters(repo, {
        "brands": "brand",
        "outerMaterials": "outer_material",
        "innerMaterials": "inner_material",
    })

@shoes_router.post("")
def create_shoe(payload: ShoeCreate, repo: CatalogRepository = Depends(get_shoes_writer)):
    return repo.create(payload.model_dump())

@shoes_router.put("/{shoe_id}")
def update_shoe(shoe_id: str, payload: ShoeUpdate, repo: CatalogRepository = Depends(get_shoes_writer)):
    data = payload.model_dump(exclude_none=True)
    if not data:
        raise HTTPException(status_code=400, detail="Aucun champ à mettre à jour")
    updated = repo.update(shoe_id, data)
    if updated is None:
        raise HTTPException(status_code=404, detail="Shoe not found")
    return updated

@shoes_router.delete("/{shoe_id}")
def delete_shoe(shoe_id: str, repo: CatalogRepository = Depends(get_shoes_writer)):
    return _delete(repo, shoe_id, "Shoe")
