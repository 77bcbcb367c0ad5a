"""
Calcul du montant à débiter, uniquement à partir des prix du store.
"""
from typing import Dict

from .repository import ProductStore

# module storefront.checkout.pricing
def compute_total(store: ProductStore, quantities: Dict[str, int]) -> int:
    """
    Somme prix_unitaire (centimes) x quantité sur tout le panier.
    - Lecture groupée indépendante de celle du contrôle de stock.
    - Un produit introuvable contribue 0.
    """
    prices = store.fetch_prices(list(quantities.keys()))
    return sum(prices.get(product_id, 0) * qty for product_id, qty in quantities.items())
