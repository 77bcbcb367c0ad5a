"""
Cas d'usage 'checkout': orchestre cart, validator, pricing, session, settlement.
Cycle d'une tentative:
  INITIATED -> VALIDATED -> PRICED -> SESSION_CREATED -> (paiement) -> SETTLED
Échecs terminaux: REJECTED_OUT_OF_STOCK, GATEWAY_FAILED.
Le store et la passerelle sont injectés par l'appelant (vues FastAPI ou tests).
"""
import logging
from typing import Any, Dict

from . import cart as cart_logic
from . import metadata as meta
from . import pricing
from . import session
from . import settlement
from . import validator
from .errors import CheckoutResult, CheckoutState
from .gateway import StripeGateway
from .repository import ProductStore
from .session import PaymentSheet

logger = logging.getLogger(__name__)

PAYMENT_SUCCEEDED_EVENT = "payment_intent.succeeded"

def _log_state(state: CheckoutState, **context: Any) -> None:
    logger.info("checkout.state=%s %s", state.value, " ".join(f"{k}={v}" for k, v in context.items()))

# module storefront.checkout.service
def prepare_payment_sheet(store: ProductStore, gateway: StripeGateway, body: Any) -> CheckoutResult[PaymentSheet]:
    """
    Prépare le payment sheet pour un panier brut {products: [{id, quantity}]}.
    Étapes strictement séquentielles:
      1) Valider et agréger le panier (doublons fusionnés)
      2) Contrôler le stock (lecture groupée)
      3) Calculer le montant depuis les prix du store
      4) Créer Customer, EphemeralKey et PaymentIntent
    """
    parsed = cart_logic.parse_cart(body)
    if not parsed.ok:
        return parsed
    quantities = parsed.value
    _log_state(CheckoutState.INITIATED, items=quantities)

    checked = validator.check_stock(store, quantities)
    if not checked.ok:
        _log_state(checked.state, product_id=checked.error.product_id)
        return checked
    _log_state(CheckoutState.VALIDATED)

    amount = pricing.compute_total(store, quantities)
    _log_state(CheckoutState.PRICED, amount=amount)

    result = session.open_payment_session(gateway, amount, meta.make_metadata(quantities))
    _log_state(result.state, amount=amount)
    return result

def confirm_checkout(store: ProductStore, body: Any) -> CheckoutResult[Dict[str, int]]:
    """
    Règle le stock d'un panier payé (appelé par le client après confirmation Stripe).
    Aucune vérification du paiement ici: l'appelant ne doit l'invoquer qu'après succès.
    """
    parsed = cart_logic.parse_cart(body)
    if not parsed.ok:
        return parsed
    result = settlement.settle_cart(store, parsed.value)
    _log_state(result.state, items=parsed.value)
    return result

def handle_gateway_event(store: ProductStore, event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Traite un événement Stripe vérifié.
    - payment_intent.succeeded: règle le panier stocké dans les metadata du PaymentIntent.
    - Autres types, ou metadata sans panier: {"status": "ignored"}.
    - Stock insuffisant au règlement: {"status": "rejected", "productId": ...}.
    """
    if (event or {}).get("type") != PAYMENT_SUCCEEDED_EVENT:
        return {"status": "ignored"}
    quantities = meta.extract_cart(event)
    if not quantities:
        return {"status": "ignored"}
    result = settlement.settle_cart(store, quantities)
    _log_state(result.state, event=event.get("id"), items=quantities)
    if not result.ok:
        return {"status": "rejected", "productId": result.error.product_id}
    return {"status": "ok", "settled": len(quantities)}
