"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
- Clé API passée à chaque appel (pas de stripe.api_key global), pour l'injection en tests.
- Toute erreur Stripe est convertie en PaymentGatewayError avec un détail sérialisable.
"""
import json
import logging
from typing import Any, Dict, Optional

import stripe

from storefront.config import (
    CHECKOUT_CURRENCY,
    GATEWAY_ERROR_DETAILS,
    STRIPE_API_VERSION,
    STRIPE_PUBLIC_KEY,
    STRIPE_SECRET_KEY,
    STRIPE_WEBHOOK_SECRET,
)

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    def __init__(self, detail: Dict[str, Any]):
        super().__init__(detail.get("message") or "Erreur Stripe")
        self.detail = detail


def serialize_stripe_error(exc: Exception, expose: bool = GATEWAY_ERROR_DETAILS) -> Dict[str, Any]:
    """
    Sérialise une erreur Stripe pour la réponse 500.
    - expose=True: type, code, message et statut HTTP bruts (diagnostic).
    - expose=False: type seul, message générique.
    """
    if not expose:
        return {"type": type(exc).__name__, "message": "Erreur du prestataire de paiement"}
    return {
        "type": type(exc).__name__,
        "code": getattr(exc, "code", None),
        "message": getattr(exc, "user_message", None) or str(exc),
        "http_status": getattr(exc, "http_status", None),
    }

# module storefront.checkout.gateway
class StripeGateway:
    """
    Client des ressources Stripe utilisées par le payment sheet mobile:
    Customer, EphemeralKey, PaymentIntent, et vérification des webhooks.
    """

    def __init__(
        self,
        api_key: str = STRIPE_SECRET_KEY,
        publishable_key: str = STRIPE_PUBLIC_KEY,
        api_version: str = STRIPE_API_VERSION,
        currency: str = CHECKOUT_CURRENCY,
        webhook_secret: str = STRIPE_WEBHOOK_SECRET,
    ):
        self.api_key = api_key
        self.publishable_key = publishable_key
        self.api_version = api_version
        self.currency = currency
        self.webhook_secret = webhook_secret

    def create_customer(self) -> Dict[str, Any]:
        """Nouveau client Stripe à chaque checkout (pas de déduplication)."""
        try:
            customer = stripe.Customer.create(api_key=self.api_key)
            return {"id": customer.id}
        except stripe.StripeError as e:
            logger.error("Stripe error creating customer: %s", e)
            raise PaymentGatewayError(serialize_stripe_error(e)) from e

    def create_ephemeral_key(self, customer_id: str) -> Dict[str, Any]:
        """Clé éphémère limitée au client, liée à la version d'API du SDK mobile."""
        try:
            key = stripe.EphemeralKey.create(
                customer=customer_id,
                stripe_version=self.api_version,
                api_key=self.api_key,
            )
            return {"id": key.id, "secret": key.secret}
        except stripe.StripeError as e:
            logger.error("Stripe error creating ephemeral key customer=%s: %s", customer_id, e)
            raise PaymentGatewayError(serialize_stripe_error(e)) from e

    def create_payment_intent(
        self,
        amount: int,
        customer_id: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        PaymentIntent pour le montant (centimes) dans la devise fixe.
        - automatic_payment_methods activé
        - metadata: panier sérialisé pour le webhook (voir checkout.metadata)
        """
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=self.currency,
                customer=customer_id,
                automatic_payment_methods={"enabled": True},
                metadata=metadata or {},
                api_key=self.api_key,
            )
            return {"id": intent.id, "amount": intent.amount, "client_secret": intent.client_secret}
        except stripe.StripeError as e:
            logger.error("Stripe error creating payment intent amount=%s: %s", amount, e)
            raise PaymentGatewayError(serialize_stripe_error(e)) from e

    def parse_event(self, payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
        """
        Valide la signature d'un événement Stripe (webhook) et renvoie le payload en dict.
        Lève ValueError si le payload ou la signature est invalide.
        """
        try:
            stripe.Webhook.construct_event(payload, sig_header or "", self.webhook_secret or "")
        except stripe.StripeError as e:
            raise ValueError(f"Signature Stripe invalide: {e}") from e
        # Signature vérifiée: le payload brut est l'événement
        return json.loads(payload)


def get_gateway() -> StripeGateway:
    """Dépendance FastAPI: passerelle Stripe configurée depuis l'environnement."""
    return StripeGateway()
