# module storefront.cart.views
"""Endpoints du panier de session.
- Le panier est identifié par un cart_id aléatoire conservé dans la session signée
  (SessionMiddleware); il n'est partagé avec aucune autre session.
- GET "" / GET /summary: lecture; POST/PATCH/DELETE /items: mutations; DELETE "": vidage.
"""
from typing import Any, Dict
from uuid import uuid4

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from storefront.cart import service as cart_service
from storefront.utils.validators import read_json_object

router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])

SESSION_CART_KEY = "cart_id"

def session_cart_id(request: Request) -> str:
    """Retourne le cart_id de la session, en le créant au premier accès."""
    cart_id = request.session.get(SESSION_CART_KEY)
    if not cart_id:
        cart_id = uuid4().hex
        request.session[SESSION_CART_KEY] = cart_id
    return cart_id

@router.get("")
async def get_cart(request: Request):
    return JSONResponse(cart_service.get_cart(session_cart_id(request)))

@router.get("/summary")
async def get_checkout_summary(request: Request):
    """Sous-total, taxe et montant à payer pour le panier courant."""
    return JSONResponse(cart_service.checkout_summary(session_cart_id(request)))

@router.post("/items")
async def add_item(request: Request):
    """Ajoute un produit.
    Body: {"productId": "<id>", "quantity": 1, "selectedVariants": {"size": "M"}}
    """
    body: Dict[str, Any] = await read_json_object(request)
    cart = cart_service.add_product(
        session_cart_id(request),
        body.get("productId"),
        body.get("quantity", 1),
        body.get("selectedVariants"),
    )
    return JSONResponse(cart)

@router.patch("/items/{item_id}")
async def update_item(item_id: str, request: Request):
    """Fixe la quantité d'une ligne; une quantité < 1 supprime la ligne."""
    body: Dict[str, Any] = await read_json_object(request)
    cart = cart_service.update_item(
        session_cart_id(request), item_id, body.get("quantity"), body.get("selectedVariants")
    )
    return JSONResponse(cart)

@router.delete("/items/{item_id}")
async def remove_item(item_id: str, request: Request):
    return JSONResponse(cart_service.remove_item(session_cart_id(request), item_id))

@router.delete("")
async def clear_cart(request: Request):
    return JSONResponse(cart_service.clear_cart(session_cart_id(request)))
