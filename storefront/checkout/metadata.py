"""
Sérialisation/désérialisation du panier dans les metadata Stripe (PaymentIntent).
"""
import json
import logging
from typing import Any, Dict, Optional

from .cart import parse_cart, to_cart_lines

logger = logging.getLogger(__name__)

# Limite Stripe: 500 caractères par valeur de metadata
METADATA_VALUE_LIMIT = 500

# module storefront.checkout.metadata
def make_metadata(quantities: Dict[str, int]) -> Dict[str, str]:
    """
    Metadata du PaymentIntent: {"cart": "[{id, quantity}, ...]"}.
    Un panier trop long pour la limite Stripe n'est pas tronqué mais omis
    (un JSON tronqué serait illisible côté webhook).
    """
    cart_json = json.dumps(to_cart_lines(quantities), separators=(",", ":"))
    if len(cart_json) > METADATA_VALUE_LIMIT:
        logger.warning("checkout.metadata cart too long for Stripe metadata (%s chars), omitted", len(cart_json))
        return {}
    return {"cart": cart_json}

def extract_cart(event: Dict[str, Any]) -> Optional[Dict[str, int]]:
    """
    Extrait le panier agrégé depuis un event Stripe (payment_intent.*).
    - Attend event.data.object.metadata.cart (JSON [{id, quantity}])
    - Retourne None si absent ou illisible.
    """
    data_obj = ((event or {}).get("data") or {}).get("object") or {}
    meta = data_obj.get("metadata") or {}
    cart_json = meta.get("cart")
    if not cart_json:
        return None
    try:
        products = json.loads(cart_json)
    except (TypeError, ValueError):
        logger.warning("checkout.metadata unreadable cart metadata intent=%s", data_obj.get("id"))
        return None
    result = parse_cart({"products": products})
    return result.value if result.ok else None
