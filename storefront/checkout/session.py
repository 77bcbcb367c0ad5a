"""
Ouverture de la session de paiement côté Stripe (payment sheet mobile).
"""
from typing import Dict, Optional

from pydantic import BaseModel

from .errors import CheckoutResult, CheckoutState, gateway_failure
from .gateway import PaymentGatewayError, StripeGateway


class PaymentSheet(BaseModel):
    """Secrets renvoyés au client mobile (noms de champs attendus par le SDK)."""
    paymentIntent: str
    ephemeralKey: str
    customer: str
    publishableKey: str


# module storefront.checkout.session
def open_payment_session(
    gateway: StripeGateway,
    amount: int,
    metadata: Optional[Dict[str, str]] = None,
) -> CheckoutResult[PaymentSheet]:
    """
    Enchaîne Customer -> EphemeralKey -> PaymentIntent.
    - Le montant est un instantané calculé avant l'appel, jamais recalculé ensuite.
    - Le premier appel Stripe en échec interrompt la séquence (GATEWAY_FAILED).
    """
    try:
        customer = gateway.create_customer()
        ephemeral_key = gateway.create_ephemeral_key(customer["id"])
        intent = gateway.create_payment_intent(amount, customer["id"], metadata)
    except PaymentGatewayError as e:
        return CheckoutResult.failure(gateway_failure(e.detail), CheckoutState.GATEWAY_FAILED)

    sheet = PaymentSheet(
        paymentIntent=intent["client_secret"],
        ephemeralKey=ephemeral_key["secret"],
        customer=customer["id"],
        publishableKey=gateway.publishable_key,
    )
    return CheckoutResult.success(sheet, CheckoutState.SESSION_CREATED)
