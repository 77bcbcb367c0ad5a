"""
Module 'checkout' (feature-first): point d'entrée public.
Réunit logique panier, contrôle de stock, calcul du montant, session Stripe et règlement du stock.
"""

from .cart import CartLine, CheckoutRequest, aggregate_quantities, parse_cart
from .errors import CheckoutError, CheckoutErrorKind, CheckoutResult, CheckoutState
from .gateway import PaymentGatewayError, StripeGateway, get_gateway
from .repository import ProductStore, get_product_store
from .validator import check_stock
from .pricing import compute_total
from .session import PaymentSheet, open_payment_session
from .settlement import settle_cart
from .service import prepare_payment_sheet, confirm_checkout, handle_gateway_event

__all__ = [
    # cart
    "CartLine",
    "CheckoutRequest",
    "aggregate_quantities",
    "parse_cart",
    # résultats
    "CheckoutError",
    "CheckoutErrorKind",
    "CheckoutResult",
    "CheckoutState",
    # collaborateurs
    "PaymentGatewayError",
    "StripeGateway",
    "get_gateway",
    "ProductStore",
    "get_product_store",
    # composants
    "check_stock",
    "compute_total",
    "PaymentSheet",
    "open_payment_session",
    "settle_cart",
    # services
    "prepare_payment_sheet",
    "confirm_checkout",
    "handle_gateway_event",
]
