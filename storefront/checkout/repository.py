"""
Accès aux données pour la feature 'checkout'.
- Lectures groupées (une requête par appel) du stock et des prix.
- Règlement atomique du panier via la fonction SQL settle_cart (voir sql/settle_cart.sql).
"""
from typing import Any, Dict, Iterable, List, Optional
import logging

from postgrest.exceptions import APIError
from supabase import Client

from storefront.config import CHECKOUT_PRODUCTS_TABLE, CHECKOUT_SETTLE_RPC
import storefront.infra.supabase_client as supabase_client
from .cart import to_cart_lines

logger = logging.getLogger(__name__)

# Erreur levée par settle_cart quand un décrément conditionnel ne touche aucune ligne
OUT_OF_STOCK_SQLSTATE = "P0001"
OUT_OF_STOCK_MESSAGE = "out_of_stock"

# module storefront.checkout.repository
class ProductStore:
    """
    Adaptateur Supabase pour la table produits du checkout.
    Le client est injecté: les tests le remplacent par un MagicMock ou un faux store.
    """

    def __init__(self, client: Client, table: str = CHECKOUT_PRODUCTS_TABLE, settle_rpc: str = CHECKOUT_SETTLE_RPC):
        self.client = client
        self.table = table
        self.settle_rpc = settle_rpc

    def _select_by_ids(self, columns: str, ids: Iterable[str]) -> List[Dict[str, Any]]:
        id_list = [str(i) for i in ids]
        if not id_list:
            return []
        try:
            res = (
                self.client
                .table(self.table)
                .select(columns)
                .in_("id", id_list)
                .execute()
            )
            return res.data or []
        except Exception:
            logger.exception("checkout.repository select failed table=%s ids=%s", self.table, id_list)
            raise

    def fetch_stock(self, ids: Iterable[str]) -> Dict[str, Optional[int]]:
        """
        Retourne {id: stock} pour les produits trouvés.
        - stock None = stock illimité
        - un id absent du dict = produit inconnu
        """
        rows = self._select_by_ids("id, stock", ids)
        return {
            str(row.get("id")): (int(row["stock"]) if row.get("stock") is not None else None)
            for row in rows
        }

    def fetch_prices(self, ids: Iterable[str]) -> Dict[str, int]:
        """Retourne {id: prix unitaire en centimes} pour les produits trouvés."""
        rows = self._select_by_ids("id, price", ids)
        return {str(row.get("id")): int(row.get("price") or 0) for row in rows}

    def settle(self, quantities: Dict[str, int]) -> Optional[str]:
        """
        Décrémente le stock de tout le panier en une seule transaction.
        - Retourne None si toutes les lignes ont été décrémentées.
        - Retourne l'id du premier produit au stock insuffisant (ou inconnu);
          dans ce cas aucune ligne n'est modifiée (rollback côté Postgres).
        - Toute autre erreur du store est propagée.
        """
        if not quantities:
            return None
        try:
            self.client.rpc(self.settle_rpc, {
                "products_table": self.table,
                "items": to_cart_lines(quantities),
            }).execute()
            return None
        except APIError as e:
            if getattr(e, "code", None) == OUT_OF_STOCK_SQLSTATE and getattr(e, "message", None) == OUT_OF_STOCK_MESSAGE:
                product_id = str(getattr(e, "details", "") or "")
                logger.info("checkout.repository.settle rejected product_id=%s", product_id)
                return product_id
            logger.exception("checkout.repository.settle failed items=%s", quantities)
            raise


def get_product_store() -> ProductStore:
    """Dépendance FastAPI: store produits sur le client service-role."""
    return ProductStore(supabase_client.get_service_supabase())
