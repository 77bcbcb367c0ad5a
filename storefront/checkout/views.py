import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from storefront.utils.rate_limit import optional_rate_limit
from storefront.checkout import service as checkout_service
from storefront.checkout.errors import CheckoutErrorKind, CheckoutResult
from storefront.checkout.gateway import StripeGateway, get_gateway
from storefront.checkout.repository import ProductStore, get_product_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/checkout", tags=["Checkout API"])

async def _read_json(request: Request) -> Any:
    # Un corps illisible est traité comme absent: la validation du panier renverra 400
    try:
        return await request.json()
    except ValueError:
        return None

def _error_response(result: CheckoutResult) -> JSONResponse:
    error = result.error
    if error.kind is CheckoutErrorKind.GATEWAY_FAILURE:
        logger.error("checkout gateway failure detail=%s", error.detail)
    return JSONResponse(status_code=error.status_code, content=error.to_response())

# module storefront.checkout.views
# Clients Supabase et Stripe synchrones: les services tournent dans le threadpool
@router.post("/payment-sheet", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_payment_sheet(
    request: Request,
    store: ProductStore = Depends(get_product_store),
    gateway: StripeGateway = Depends(get_gateway),
):
    """
    Prépare le payment sheet Stripe pour le panier du client mobile.
    - Entrée JSON: { "products": [ { "id": "<product_id>", "quantity": <int> }, ... ] }
    - Étapes: panier -> contrôle de stock -> montant serveur -> Customer/EphemeralKey/PaymentIntent
    - Réponse: {paymentIntent, ephemeralKey, customer, publishableKey}
    - Erreurs: 400 si panier invalide ou rupture de stock, 500 si Stripe échoue
    """
    body = await _read_json(request)
    result = await run_in_threadpool(checkout_service.prepare_payment_sheet, store, gateway, body)
    if not result.ok:
        return _error_response(result)
    return JSONResponse(result.value.model_dump())

@router.post("/success")
async def checkout_success(request: Request, store: ProductStore = Depends(get_product_store)):
    """
    Décrémente le stock après un paiement confirmé côté client.
    - Même corps que /payment-sheet.
    - Tout-ou-rien: 400 (rupture) sans aucune modification si une ligne ne peut pas être réglée.
    """
    body = await _read_json(request)
    result = await run_in_threadpool(checkout_service.confirm_checkout, store, body)
    if not result.ok:
        return _error_response(result)
    return {"success": True}

@router.post("/webhook", include_in_schema=False)
async def checkout_webhook(
    request: Request,
    store: ProductStore = Depends(get_product_store),
    gateway: StripeGateway = Depends(get_gateway),
):
    """
    Webhook Stripe: règle le stock sur payment_intent.succeeded.
    - Signature: validée via gateway.parse_event (Stripe-Signature + STRIPE_WEBHOOK_SECRET)
    - Panier: lu dans les metadata du PaymentIntent
    - Réponses: {"status": "ok"|"ignored"|"rejected", ...}; 400 si signature/payload invalide
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    try:
        event = gateway.parse_event(payload, sig_header)
    except ValueError:
        logger.warning("checkout.webhook invalid signature or payload")
        raise HTTPException(status_code=400, detail="Invalid Stripe webhook payload")
    return await run_in_threadpool(checkout_service.handle_gateway_event, store, event)
