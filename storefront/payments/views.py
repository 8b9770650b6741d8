import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from storefront.cart import service as cart_service
from storefront.cart.views import SESSION_CART_KEY
from storefront.config import CHECKOUT_PATH, STRIPE_PUBLISHABLE_KEY
from storefront.errors import InternalError, StorefrontError
from storefront.orders import service as orders_service
from storefront.orders.views import remember_order
from storefront.payments import service as payments_service
from storefront.payments import stripe_client
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.validators import read_json_object

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])

# module storefront.payments.views
def _finalize(request: Request, payment_intent_id: Optional[str]) -> Dict[str, Any]:
    """
    Confirme le paiement. Seul l'appel qui complète la commande la rattache à la session
    et vide le panier: une confirmation rejouée (rafraîchissement, return_url revisité)
    ne touche ni au panier courant ni aux commandes visibles de la session.
    Le vidage est best-effort: la commande est déjà écrite.
    """
    result = payments_service.confirm_payment(payment_intent_id)
    order = result["order"]
    if result["created"]:
        remember_order(request, order.get("id"))
        cart_id = request.session.get(SESSION_CART_KEY)
        if cart_id:
            try:
                cart_service.clear_cart(cart_id)
            except InternalError:
                logger.warning("payments.finalize cart not cleared cart_id=%s order_id=%s", cart_id, order.get("id"))

    return {"success": True, "orderId": order.get("id"), "order": orders_service.serialize_order(order)}

@router.get("/config")
def payments_config():
    """Clé publique Stripe pour initialiser le Payment Element côté client."""
    if not STRIPE_PUBLISHABLE_KEY:
        raise InternalError("Payments are not configured")
    return {"publishableKey": STRIPE_PUBLISHABLE_KEY}

@router.post("/create-payment-intent", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_payment_intent(request: Request):
    """
    Crée un PaymentIntent pour le panier.
    - Entrée JSON: {"amount": 27.0, "currency": "usd", "customerEmail": "a@b.com", "cartItems": [...]}
    - Sortie: {"client_secret", "payment_intent_id"}
    - Erreurs: 400 montant/infos de commande invalides, 500 erreur Stripe
    """
    body = await read_json_object(request)
    result = payments_service.create_payment_intent(
        amount=body.get("amount"),
        currency=body.get("currency"),
        customer_email=body.get("customerEmail"),
        cart_items=body.get("cartItems"),
    )
    return JSONResponse(result)

@router.post("/confirm-payment", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def confirm_payment(request: Request):
    """
    Confirme un paiement réussi et crée la commande.
    - Entrée JSON: {"paymentIntentId": "pi_..."}
    - Sortie: {"success": true, "orderId", "order": {id, total, status, customerEmail, createdAt}}
    - Un second appel pour le même PaymentIntent renvoie la commande existante.
    - Erreurs: 400 id manquant / paiement non abouti / metadata absente, 500 persistance
    """
    body = await read_json_object(request)
    return JSONResponse(_finalize(request, body.get("paymentIntentId")))

@router.get("/return")
async def payment_return(request: Request, payment_intent: Optional[str] = None):
    """
    Cible du return_url Stripe après confirmation côté client.
    - Les paramètres redirect_status / client_secret ajoutés par Stripe sont ignorés:
      seul le statut relu chez Stripe fait foi.
    - En cas d'échec, renvoie un chemin de retour vers le checkout (retryUrl).
    """
    try:
        return JSONResponse(_finalize(request, payment_intent))
    except StorefrontError as e:
        if e.status_code >= 500:
            logger.error("payments.return failed payment_intent=%s error=%s", payment_intent, e.message)
        return JSONResponse(
            status_code=e.status_code,
            content={"success": False, "error": e.message, "retryUrl": CHECKOUT_PATH},
        )

@router.post("/webhook", include_in_schema=False)
async def webhook_stripe(request: Request):
    """
    Webhook Stripe.
    - charge.refunded: passe la commande du PaymentIntent à 'cancelled' si la machine d'états le permet.
    - Autres événements: {"status": "ignored"}.
    - Erreurs: 400 si signature/payload invalide.
    """
    event = await stripe_client.parse_event(request)
    if (event or {}).get("type") != "charge.refunded":
        return JSONResponse({"status": "ignored"})

    charge = ((event.get("data") or {}).get("object")) or {}
    payment_intent_id = charge.get("payment_intent") or ""
    order = orders_service.find_order_for_payment(payment_intent_id)
    if not order or not orders_service.can_transition(order.get("status") or "", "cancelled"):
        logger.info("payments.webhook refund ignored payment_intent_id=%s", payment_intent_id)
        return JSONResponse({"status": "ignored"})

    orders_service.update_order_status(payment_intent_id, "cancelled")
    logger.info("payments.webhook order cancelled payment_intent_id=%s order_id=%s", payment_intent_id, order.get("id"))
    return JSONResponse({"status": "ok"})
