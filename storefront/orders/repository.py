"""
Accès aux données 'orders' et 'order_items' (client service-role).
- Les fonctions d'écriture retournent None/False en cas d'échec (loggé);
  le service décide de l'erreur à remonter.
- Les lectures servant de garde d'idempotence (get_order_by_payment_intent, get_order_items)
  laissent remonter l'exception: un échec de lecture ne doit pas passer pour "aucune ligne".
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

import storefront.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

ORDER_WITH_ITEMS_COLUMNS = "*, order_items (id, product_id, quantity, price, product_snapshot)"

# module storefront.orders.repository
def insert_order(data: Dict[str, Any]) -> Optional[dict]:
    """Insère une commande et retourne la ligne créée (id, created_at, ...)."""
    try:
        res = supabase_client.get_service_supabase().table("orders").insert(data).execute()
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception(
            "orders.repository.insert_order failed payment_intent_id=%s", data.get("payment_intent_id")
        )
        return None

def insert_order_items(rows: List[Dict[str, Any]]) -> bool:
    if not rows:
        return True
    try:
        supabase_client.get_service_supabase().table("order_items").insert(rows).execute()
        return True
    except Exception:
        logger.exception("orders.repository.insert_order_items failed order_id=%s", rows[0].get("order_id"))
        return False

def get_order_by_payment_intent(payment_intent_id: str) -> Optional[dict]:
    """Première commande rattachée au PaymentIntent, None si aucune."""
    if not payment_intent_id:
        return None
    res = (
        supabase_client.get_service_supabase()
        .table("orders")
        .select("*")
        .eq("payment_intent_id", payment_intent_id)
        .order("created_at", desc=False)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def get_order_items(order_id: str) -> List[dict]:
    res = (
        supabase_client.get_service_supabase()
        .table("order_items")
        .select("id, product_id, quantity")
        .eq("order_id", order_id)
        .execute()
    )
    return res.data or []

def get_order_with_items(order_id: str) -> Optional[dict]:
    if not order_id:
        return None
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select(ORDER_WITH_ITEMS_COLUMNS)
            .eq("id", order_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("orders.repository.get_order_with_items failed id=%s", order_id)
        return None

def update_order_status(payment_intent_id: str, status: str) -> bool:
    try:
        (
            supabase_client.get_service_supabase()
            .table("orders")
            .update({"status": status, "updated_at": datetime.now(timezone.utc).isoformat()})
            .eq("payment_intent_id", payment_intent_id)
            .execute()
        )
        return True
    except Exception:
        logger.exception(
            "orders.repository.update_order_status failed payment_intent_id=%s status=%s", payment_intent_id, status
        )
        return False
