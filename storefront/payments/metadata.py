"""
Sérialisation/désérialisation des métadonnées de commande portées par le PaymentIntent
(customerEmail, cartItems), seul canal entre la création du paiement et sa confirmation.
"""
import json
from typing import Any, Dict, List, Tuple

from storefront.errors import MissingOrderDataError, ValidationError

# Limite Stripe par valeur de metadata
METADATA_VALUE_LIMIT = 500

CART_ITEM_FIELDS = ("id", "name", "price", "image", "quantity", "selectedVariants")

# module storefront.payments.metadata
def make_intent_metadata(customer_email: str, cart_items: List[Dict[str, Any]]) -> Dict[str, str]:
    """
    Construit la metadata {customerEmail, cartItems(JSON)} d'un PaymentIntent.
    - Ne conserve que les champs d'une ligne de panier.
    - JSON compact; au-delà de METADATA_VALUE_LIMIT le panier est refusé (400)
      plutôt que tronqué, une troncature rendant la commande illisible à la confirmation.
    """
    snapshot = [{k: item[k] for k in CART_ITEM_FIELDS if k in item} for item in cart_items]
    cart_json = json.dumps(snapshot, separators=(",", ":"))
    if len(cart_json) > METADATA_VALUE_LIMIT:
        raise ValidationError("Cart is too large to be checked out in a single payment")
    return {"customerEmail": customer_email, "cartItems": cart_json}

def extract_order_data(intent: Dict[str, Any]) -> Tuple[str, List[Dict[str, Any]]]:
    """
    Extrait (customer_email, cart_items) d'un PaymentIntent relu chez Stripe.
    - customerEmail ou cartItems absent: MissingOrderDataError.
    - cartItems illisible (JSON invalide / non-liste): MissingOrderDataError.
    """
    meta = (intent or {}).get("metadata") or {}
    customer_email = meta.get("customerEmail")
    cart_json = meta.get("cartItems")
    if not customer_email or not cart_json:
        raise MissingOrderDataError()
    try:
        cart_items = json.loads(cart_json)
    except ValueError:
        raise MissingOrderDataError("Unreadable cart items in payment intent")
    if not isinstance(cart_items, list):
        raise MissingOrderDataError("Unreadable cart items in payment intent")
    return customer_email, cart_items

def shipping_address_from_intent(intent: Dict[str, Any]) -> Dict[str, Any]:
    """
    Adresse de livraison à partir de intent.shipping.
    - "N/A" pour chaque champ absent (name, line1, city, state, postal_code), pays "US" par défaut.
    - line2 et phone ne sont renseignés que s'ils existent.
    """
    shipping = (intent or {}).get("shipping") or {}
    address = shipping.get("address") or {}
    result: Dict[str, Any] = {
        "name": shipping.get("name") or "N/A",
        "address": {
            "line1": address.get("line1") or "N/A",
            "city": address.get("city") or "N/A",
            "state": address.get("state") or "N/A",
            "postal_code": address.get("postal_code") or "N/A",
            "country": address.get("country") or "US",
        },
    }
    if address.get("line2"):
        result["address"]["line2"] = address["line2"]
    if shipping.get("phone"):
        result["phone"] = shipping["phone"]
    return result
