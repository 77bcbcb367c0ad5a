"""
Contrôle de stock (lecture seule) avant la création du paiement.
"""
from typing import Dict

from .errors import CheckoutResult, CheckoutState, out_of_stock
from .repository import ProductStore

# module storefront.checkout.validator
def check_stock(store: ProductStore, quantities: Dict[str, int]) -> CheckoutResult[Dict[str, int]]:
    """
    Vérifie que chaque produit du panier couvre la quantité demandée.
    - Une seule lecture groupée (id, stock).
    - stock None: illimité, la ligne passe.
    - produit absent du store: stock 0, la ligne échoue.
    - S'arrête sur la première ligne en défaut (ordre du panier).
    """
    stock_by_id = store.fetch_stock(list(quantities.keys()))
    for product_id, qty in quantities.items():
        if product_id not in stock_by_id:
            return CheckoutResult.failure(out_of_stock(product_id), CheckoutState.REJECTED_OUT_OF_STOCK)
        stock = stock_by_id[product_id]
        if stock is not None and stock < qty:
            return CheckoutResult.failure(out_of_stock(product_id), CheckoutState.REJECTED_OUT_OF_STOCK)
    return CheckoutResult.success(quantities, CheckoutState.VALIDATED)
