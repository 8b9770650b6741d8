"""
Adaptateur Stripe: centralise les appels et la configuration Stripe (PaymentIntents).
Les objets Stripe sont convertis en dict pour que le reste du code (et les tests)
ne manipulent que des structures simples.
"""
from typing import Any, Dict

import stripe
from fastapi import Request

from storefront.config import STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET
from storefront.errors import InternalError, ValidationError

# module storefront.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Sans STRIPE_SECRET_KEY, aucune requête n'est tentée: InternalError.
    """
    if not STRIPE_SECRET_KEY:
        raise InternalError("Payments are not configured")
    stripe.api_key = STRIPE_SECRET_KEY
    return stripe

def _to_dict(obj: Any) -> Dict[str, Any]:
    to_dict = getattr(obj, "to_dict", None)
    return to_dict() if callable(to_dict) else dict(obj)

def create_payment_intent(*, amount: int, currency: str, metadata: Dict[str, str]) -> Dict[str, Any]:
    """
    Crée un PaymentIntent Stripe.
    - amount: montant en unités mineures (ex: centimes)
    - automatic_payment_methods activé (Payment Element côté client)
    - metadata: {"customerEmail": "...", "cartItems": "[...]"}
    Retour: dict incluant "id" et "client_secret".
    """
    require_stripe()
    intent = stripe.PaymentIntent.create(
        amount=amount,
        currency=currency,
        automatic_payment_methods={"enabled": True},
        metadata=metadata,
    )
    return _to_dict(intent)

def retrieve_payment_intent(payment_intent_id: str) -> Dict[str, Any]:
    """
    Relit un PaymentIntent par identifiant.
    Retour: dict incluant "status", "amount", "currency", "metadata", "shipping".
    """
    require_stripe()
    intent = stripe.PaymentIntent.retrieve(payment_intent_id)
    return _to_dict(intent)

async def parse_event(request: Request) -> Dict[str, Any]:
    """
    Parse et valide un événement Stripe signé (webhook).
    - Lit le body brut + en-tête Stripe-Signature
    - Valide la signature via Webhook.construct_event (STRIPE_WEBHOOK_SECRET)
    - Signature/payload invalide: ValidationError (400)
    """
    if not STRIPE_WEBHOOK_SECRET:
        raise InternalError("Webhook is not configured")
    require_stripe()
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature") or ""
    try:
        event = stripe.Webhook.construct_event(payload, sig_header, STRIPE_WEBHOOK_SECRET)
    except (ValueError, stripe.SignatureVerificationError):
        raise ValidationError("Invalid Stripe webhook payload")
    return _to_dict(event)
