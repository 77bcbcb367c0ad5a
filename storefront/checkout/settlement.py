"""
Règlement du stock après confirmation du paiement.
"""
import logging
from typing import Dict

from .errors import CheckoutResult, CheckoutState, out_of_stock
from .repository import ProductStore

logger = logging.getLogger(__name__)

# module storefront.checkout.settlement
def settle_cart(store: ProductStore, quantities: Dict[str, int]) -> CheckoutResult[Dict[str, int]]:
    """
    Décrémente le stock de tout le panier, en tout-ou-rien.
    - Décrément conditionnel par produit (stock illimité ou suffisant), dans une seule transaction.
    - Si une ligne échoue, rien n'est décrémenté et l'erreur OUT_OF_STOCK nomme le produit.
    - Aucun jeton d'idempotence: deux appels pour le même panier décrémentent deux fois.
    """
    rejected = store.settle(quantities)
    if rejected is not None:
        logger.warning("checkout.settlement rejected product_id=%s items=%s", rejected, quantities)
        return CheckoutResult.failure(out_of_stock(rejected), CheckoutState.REJECTED_OUT_OF_STOCK)
    return CheckoutResult.success(quantities, CheckoutState.SETTLED)
