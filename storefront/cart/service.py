"""
Cas d'usage 'cart': charge le panier de la session, applique une opération du
CartStore, puis persiste. Les infos produit (nom, prix, image) viennent du
catalogue, jamais du client.
"""
from typing import Any, Dict, Optional

from storefront.catalog import repository as catalog_repository
from storefront.config import CHECKOUT_TAX_RATE, DEFAULT_CURRENCY
from storefront.errors import ProductNotFoundError, ValidationError
from storefront.utils.validators import validate_payload
from . import repository
from .schemas import CART_MESSAGES, AddCartItemRequest, CartLineSelection, UpdateCartItemRequest

# module storefront.cart.service
def get_cart(cart_id: str) -> Dict[str, Any]:
    return repository.load_cart(cart_id).to_dict()

def add_product(cart_id: str, product_id: Any, quantity: Any = 1, selected_variants: Any = None) -> Dict[str, Any]:
    """
    Ajoute un produit du catalogue au panier.
    - 400 si productId vide ou quantité < 1; 404 si produit introuvable; 400 si hors stock.
    """
    req = validate_payload(
        AddCartItemRequest,
        {"productId": product_id, "quantity": quantity, "selectedVariants": selected_variants},
        CART_MESSAGES,
    )

    product = catalog_repository.get_product(req.product_id)
    if not product:
        raise ProductNotFoundError(req.product_id)
    if not product.get("inStock"):
        raise ValidationError("Product out of stock")

    cart = repository.load_cart(cart_id)
    cart.add_item(
        {
            "id": product["id"],
            "name": product.get("name"),
            "price": product.get("price"),
            "image": (product.get("images") or ["/placeholder.svg"])[0],
            "selectedVariants": req.selected_variants,
        },
        req.quantity,
    )
    repository.save_cart(cart_id, cart)
    return cart.to_dict()

def update_item(cart_id: str, item_id: str, quantity: Any, selected_variants: Any = None) -> Dict[str, Any]:
    """Fixe la quantité d'une ligne (0 ou moins: suppression)."""
    req = validate_payload(
        UpdateCartItemRequest, {"quantity": quantity, "selectedVariants": selected_variants}, CART_MESSAGES
    )
    cart = repository.load_cart(cart_id)
    cart.update_quantity(item_id, req.quantity, req.selected_variants)
    repository.save_cart(cart_id, cart)
    return cart.to_dict()

def remove_item(cart_id: str, item_id: str, selected_variants: Any = None) -> Dict[str, Any]:
    req = validate_payload(CartLineSelection, {"selectedVariants": selected_variants}, CART_MESSAGES)
    cart = repository.load_cart(cart_id)
    cart.remove_item(item_id, req.selected_variants)
    repository.save_cart(cart_id, cart)
    return cart.to_dict()

def clear_cart(cart_id: str) -> Dict[str, Any]:
    cart = repository.load_cart(cart_id)
    cart.clear_cart()
    repository.save_cart(cart_id, cart)
    return cart.to_dict()

def checkout_summary(cart_id: str) -> Dict[str, Any]:
    """
    Montants affichés au checkout: sous-total, taxe (CHECKOUT_TAX_RATE) et montant
    à transmettre à create-payment-intent, avec les lignes à embarquer en metadata.
    """
    cart = repository.load_cart(cart_id)
    subtotal = cart.total
    tax = round(subtotal * CHECKOUT_TAX_RATE, 2)
    return {
        "items": cart.items,
        "itemCount": cart.item_count,
        "subtotal": subtotal,
        "tax": tax,
        "amount": round(subtotal + tax, 2),
        "currency": DEFAULT_CURRENCY,
    }
