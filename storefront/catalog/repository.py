"""
Accès aux données du catalogue (tables shirts, shoes).
Un repository par table; le client Supabase est injecté (anon pour les lectures, service-role pour les écritures).
"""
from typing import Any, Dict, List, Optional, Tuple, Type
import logging

from pydantic import BaseModel
from supabase import Client

from storefront.config import SHIRTS_TABLE, SHOES_TABLE
import storefront.infra.supabase_client as supabase_client
from .models import CatalogQuery, Shirt, Shoe

logger = logging.getLogger(__name__)

# module storefront.catalog.repository
class CatalogRepository:
    def __init__(self, client: Client, table: str, model: Type[BaseModel]):
        self.client = client
        self.table = table
        self.model = model

    def _serialize(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return self.model.model_validate(row).model_dump(by_alias=True)

    def list(self, query: CatalogQuery) -> Tuple[List[Dict[str, Any]], int]:
        """
        Une page d'éléments filtrés + le total (count exact PostgREST, même filtre).
        """
        try:
            builder = self.client.table(self.table).select("*", count="exact")
            res = query.apply(builder).execute()
        except Exception:
            logger.exception("catalog.repository.list failed table=%s query=%s", self.table, query)
            raise
        rows = res.data or []
        total = res.count if res.count is not None else len(rows)
        return [self._serialize(row) for row in rows], total

    def distinct(self, column: str) -> List[Any]:
        """Valeurs distinctes (non nulles) d'une colonne, triées."""
        try:
            res = self.client.table(self.table).select(column).execute()
        except Exception:
            logger.exception("catalog.repository.distinct failed table=%s column=%s", self.table, column)
            raise
        values = {row.get(column) for row in (res.data or []) if row.get(column) is not None}
        return sorted(values, key=str)

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            res = self.client.table(self.table).insert(data).execute()
        except Exception:
            logger.exception("catalog.repository.create failed table=%s data=%s", self.table, data)
            raise
        rows = res.data or []
        return self._serialize(rows[0]) if rows else data

    def update(self, item_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Mise à jour partielle; None si aucune ligne ne correspond à l'id."""
        try:
            res = self.client.table(self.table).update(data).eq("id", item_id).execute()
        except Exception:
            logger.exception("catalog.repository.update failed table=%s id=%s data=%s", self.table, item_id, data)
            raise
        rows = res.data or []
        return self._serialize(rows[0]) if rows else None

    def delete(self, item_id: str) -> bool:
        """True si une ligne a été supprimée."""
        try:
            res = self.client.table(self.table).delete().eq("id", item_id).execute()
        except Exception:
            logger.exception("catalog.repository.delete failed table=%s id=%s", self.table, item_id)
            raise
        return bool(res.data)


def get_shirts_reader() -> CatalogRepository:
    return CatalogRepository(supabase_client.get_supabase(), SHIRTS_TABLE, Shirt)

def get_shirts_writer() -> CatalogRepository:
    return CatalogRepository(supabase_client.get_service_supabase(), SHIRTS_TABLE, Shirt)

def get_shoes_reader() -> CatalogRepository:
    return CatalogRepository(supabase_client.get_supabase(), SHOES_TABLE, Shoe)

def get_shoes_writer() -> CatalogRepository:
    return CatalogRepository(supabase_client.get_service_supabase(), SHOES_TABLE, Shoe)
