"""Couche service des commandes.
Rôles:
- Créer une commande « pending » et ses lignes (snapshot nom/image au moment de l'achat).
- Faire évoluer le statut selon la machine d'états:
  pending -> processing -> shipped -> delivered, ou pending -> cancelled.
- Sérialiser une commande pour l'API (camelCase).
"""
from typing import Any, Dict, List, Optional
import logging

from storefront.errors import InternalError, ValidationError
from storefront.orders import repository

logger = logging.getLogger(__name__)

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
ORDER_TRANSITIONS = {
    "pending": ("processing", "cancelled"),
    "processing": ("shipped",),
    "shipped": ("delivered",),
    "delivered": (),
    "cancelled": (),
}

def can_transition(current: str, new: str) -> bool:
    return new in ORDER_TRANSITIONS.get(current, ())

def build_order_items(order_id: str, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Une ligne order_items par ligne de panier, avec un snapshot produit figé."""
    return [
        {
            "order_id": order_id,
            "product_id": item.get("id"),
            "quantity": int(item.get("quantity") or 0),
            "price": float(item.get("price") or 0),
            "product_snapshot": {
                "name": item.get("name") or "",
                "image": item.get("image") or "",
            },
        }
        for item in items
    ]

def create_order(
    *,
    items: List[Dict[str, Any]],
    total: float,
    customer_email: str,
    shipping_address: Dict[str, Any],
    payment_intent_id: str,
) -> Dict[str, Any]:
    """
    Écrit la commande (statut 'pending') puis ses lignes.
    - Échec d'écriture Supabase: InternalError.
    """
    order = repository.insert_order({
        "total": total,
        "customer_email": customer_email,
        "shipping_address": shipping_address,
        "payment_intent_id": payment_intent_id,
        "status": "pending",
    })
    if not order:
        raise InternalError("Failed to process order")

    if not repository.insert_order_items(build_order_items(order["id"], items)):
        raise InternalError("Failed to process order")

    logger.info("orders.create_order id=%s items=%s payment_intent_id=%s", order["id"], len(items), payment_intent_id)
    return order

def find_order_for_payment(payment_intent_id: str) -> Optional[Dict[str, Any]]:
    """Commande du PaymentIntent, None si aucune; lecture Supabase en échec: InternalError."""
    try:
        return repository.get_order_by_payment_intent(payment_intent_id)
    except Exception:
        logger.exception("orders.find_order_for_payment failed payment_intent_id=%s", payment_intent_id)
        raise InternalError("Failed to process order")

def complete_order_items(order: Dict[str, Any], items: List[Dict[str, Any]]) -> bool:
    """
    Écrit les lignes d'une commande qui n'en a aucune (écriture précédente interrompue).
    Retourne True si des lignes ont été écrites, False si elles existaient déjà.
    """
    try:
        existing_items = repository.get_order_items(order["id"])
    except Exception:
        logger.exception("orders.complete_order_items lookup failed order_id=%s", order.get("id"))
        raise InternalError("Failed to process order")
    if existing_items or not items:
        return False
    if not repository.insert_order_items(build_order_items(order["id"], items)):
        raise InternalError("Failed to process order")
    logger.warning("orders.complete_order_items restored items order_id=%s items=%s", order["id"], len(items))
    return True

def get_order_details(order_id: str) -> Optional[Dict[str, Any]]:
    return repository.get_order_with_items(order_id)

def update_order_status(payment_intent_id: str, status: str) -> Dict[str, Any]:
    """
    Applique une transition de statut sur la commande d'un PaymentIntent.
    - Statut inconnu, commande absente ou transition interdite: ValidationError.
    """
    if status not in ORDER_STATUSES:
        raise ValidationError(f"Unknown order status: {status}")
    order = find_order_for_payment(payment_intent_id)
    if not order:
        raise ValidationError("No order for this payment intent")
    current = order.get("status") or "pending"
    if not can_transition(current, status):
        raise ValidationError(f"Invalid status transition {current} -> {status}")
    if not repository.update_order_status(payment_intent_id, status):
        raise InternalError("Failed to update order")
    return {**order, "status": status}

def serialize_order(order: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": order.get("id"),
        "total": order.get("total"),
        "status": order.get("status"),
        "customerEmail": order.get("customer_email"),
        "createdAt": order.get("created_at"),
    }
