"""
Cas d'usage 'payments': orchestre stripe_client, metadata et orders.
- create_payment_intent: valide la demande puis crée le PaymentIntent.
- confirm_payment: relit le PaymentIntent chez Stripe (seule source de vérité du paiement)
  et écrit la commande.
"""
import logging
from typing import Any, Dict, Optional

import stripe

from storefront.config import DEFAULT_CURRENCY
from storefront.errors import InternalError, PaymentNotSucceededError, ValidationError
from storefront.orders import service as orders_service
from storefront.utils.validators import validate_payload
from . import amounts
from . import metadata as meta
from . import stripe_client
from .schemas import CREATE_INTENT_MESSAGES, CreatePaymentIntentRequest

logger = logging.getLogger(__name__)

def create_payment_intent(
    *,
    amount: Any,
    customer_email: Any,
    cart_items: Any,
    currency: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Prépare un paiement pour le panier.
    - Validation pydantic (ValidationError, aucun appel Stripe): amount > 0 et sous le plafond
      Stripe, customerEmail avec "@", cartItems liste non vide.
    - Montant converti en unités mineures; metadata = email + snapshot JSON du panier.
    - Échec Stripe: InternalError (pas de retry, la création n'étant pas idempotente).
    Retour: {"client_secret", "payment_intent_id"}
    """
    req = validate_payload(
        CreatePaymentIntentRequest,
        {"amount": amount, "customerEmail": customer_email, "cartItems": cart_items, "currency": currency},
        CREATE_INTENT_MESSAGES,
    )
    value, cur = req.amount, req.currency
    minor_amount = amounts.format_amount_for_stripe(value, cur)
    if not 1 <= minor_amount <= amounts.STRIPE_MAX_AMOUNT:
        raise ValidationError("Invalid amount")
    items = [item.model_dump() for item in req.cart_items]
    metadata = meta.make_intent_metadata(req.customer_email, items)

    try:
        intent = stripe_client.create_payment_intent(
            amount=minor_amount,
            currency=cur,
            metadata=metadata,
        )
    except stripe.StripeError:
        logger.exception("payments.create_payment_intent failed amount=%s currency=%s", value, cur)
        raise InternalError("Internal server error")

    logger.info("payments.create_payment_intent id=%s items=%s", intent.get("id"), len(items))
    return {"client_secret": intent.get("client_secret"), "payment_intent_id": intent.get("id")}

def confirm_payment(payment_intent_id: Any) -> Dict[str, Any]:
    """
    Finalise la commande d'un PaymentIntent.
    1) paymentIntentId requis (ValidationError).
    2) Relecture Stripe: status doit valoir "succeeded" (PaymentNotSucceededError).
    3) customerEmail + cartItems extraits de la metadata (MissingOrderDataError).
    4) Si une commande existe déjà pour ce PaymentIntent, elle est renvoyée; ses lignes sont
       écrites si une confirmation précédente a échoué entre la commande et ses lignes.
       Lecture Supabase en échec: InternalError (jamais de seconde commande).
    5) Sinon: total = amount / 100, adresse de livraison, commande 'pending' + lignes.
    Retour: {"order": <ligne orders>, "created": bool}; created vaut True quand cet appel a
    complété la commande, False pour une confirmation rejouée.
    """
    pid = payment_intent_id.strip() if isinstance(payment_intent_id, str) else ""
    if not pid:
        raise ValidationError("Payment Intent ID is required")

    try:
        intent = stripe_client.retrieve_payment_intent(pid)
    except stripe.StripeError:
        logger.exception("payments.confirm_payment retrieve failed payment_intent_id=%s", pid)
        raise InternalError("Failed to process order")

    status = intent.get("status") or ""
    if status != "succeeded":
        raise PaymentNotSucceededError(status)

    customer_email, cart_items = meta.extract_order_data(intent)

    existing = orders_service.find_order_for_payment(pid)
    if existing:
        completed = orders_service.complete_order_items(existing, cart_items)
        logger.info(
            "payments.confirm_payment existing order payment_intent_id=%s order_id=%s items_restored=%s",
            pid, existing.get("id"), completed,
        )
        return {"order": existing, "created": completed}

    order = orders_service.create_order(
        items=cart_items,
        total=amounts.format_amount_from_stripe(intent.get("amount"), intent.get("currency") or DEFAULT_CURRENCY),
        customer_email=customer_email,
        shipping_address=meta.shipping_address_from_intent(intent),
        payment_intent_id=pid,
    )
    return {"order": order, "created": True}
