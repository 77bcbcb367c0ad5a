"""
Logique panier pure (pas de Stripe, pas de DB).
- Validation du corps {products: [{id, quantity}]}
- Fusion des lignes en doublon (somme des quantités par produit)
"""
from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from storefront.utils.validators import field_errors
from .errors import CheckoutResult, validation_error

# Les quantités sont des integer Postgres dans settle_cart
MAX_QUANTITY = 2_147_483_647


class CartLine(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(min_length=1)
    quantity: int = Field(gt=0, le=MAX_QUANTITY)


class CheckoutRequest(BaseModel):
    products: List[CartLine] = Field(min_length=1)


# module storefront.checkout.cart
def aggregate_quantities(lines: List[CartLine]) -> Dict[str, int]:
    """
    Agrège des lignes validées en {product_id: total_quantity}.
    L'ordre d'insertion suit la première apparition de chaque produit dans le panier.
    """
    quantities: Dict[str, int] = {}
    for line in lines:
        quantities[line.id] = quantities.get(line.id, 0) + line.quantity
    return quantities

def parse_cart(body: Any) -> CheckoutResult[Dict[str, int]]:
    """
    Valide le corps brut et renvoie le panier agrégé.
    Les champs non déclarés (ex: un prix envoyé par le client) sont ignorés.
    La borne de quantité s'applique aussi après fusion des doublons.
    """
    try:
        request = CheckoutRequest.model_validate(body)
    except ValidationError as exc:
        return CheckoutResult.failure(validation_error(field_errors(exc)))
    quantities = aggregate_quantities(request.products)
    too_large = [pid for pid, qty in quantities.items() if qty > MAX_QUANTITY]
    if too_large:
        return CheckoutResult.failure(validation_error({
            "products": [f"Quantité totale trop grande pour {pid}" for pid in too_large],
        }))
    return CheckoutResult.success(quantities)

def to_cart_lines(quantities: Dict[str, int]) -> List[Dict[str, Any]]:
    """Sérialise un panier agrégé en [{id, quantity}, ...] (metadata, RPC)."""
    return [{"id": product_id, "quantity": qty} for product_id, qty in quantities.items()]
