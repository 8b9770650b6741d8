# module storefront.orders.views
"""Consultation des commandes passées depuis la session courante.
- Les identifiants de commande confirmés sont mémorisés dans la session signée;
  une commande d'une autre session répond 404 (pas de fuite d'existence).
"""
from typing import List

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from storefront.orders import service as orders_service

router = APIRouter(prefix="/api/v1/orders", tags=["Orders API"])

SESSION_ORDERS_KEY = "order_ids"

def remember_order(request: Request, order_id) -> None:
    """Rattache une commande confirmée à la session (10 dernières conservées)."""
    order_id = str(order_id or "")
    order_ids: List[str] = list(request.session.get(SESSION_ORDERS_KEY) or [])
    if order_id and order_id not in order_ids:
        order_ids.append(order_id)
    request.session[SESSION_ORDERS_KEY] = order_ids[-10:]

@router.get("/{order_id}")
def get_order(order_id: str, request: Request):
    if order_id not in (request.session.get(SESSION_ORDERS_KEY) or []):
        raise HTTPException(status_code=404, detail="Order not found")
    order = orders_service.get_order_details(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return JSONResponse(order)
