"""
Module 'payments' (feature-first): point d'entrée public.
Réunit conversion des montants, metadata Stripe, client Stripe et cas d'usage checkout.
"""

from .amounts import format_amount_for_stripe, format_amount_from_stripe
from .metadata import make_intent_metadata, extract_order_data, shipping_address_from_intent
from .stripe_client import require_stripe, create_payment_intent as create_stripe_payment_intent, retrieve_payment_intent, parse_event
from .service import create_payment_intent, confirm_payment

__all__ = [
    # amounts
    "format_amount_for_stripe",
    "format_amount_from_stripe",
    # metadata
    "make_intent_metadata",
    "extract_order_data",
    "shipping_address_from_intent",
    # stripe
    "require_stripe",
    "create_stripe_payment_intent",
    "retrieve_payment_intent",
    "parse_event",
    # services
    "create_payment_intent",
    "confirm_payment",
]
