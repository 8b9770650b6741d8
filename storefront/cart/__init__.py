"""
Module 'cart' (feature-first): point d'entrée public.
Réunit le conteneur d'état (store), sa persistance Redis (repository) et les cas d'usage (service).
"""

from .store import CartStore, line_key
from .repository import load_cart, save_cart
from .service import (
    get_cart,
    add_product,
    update_item,
    remove_item,
    clear_cart,
    checkout_summary,
)

__all__ = [
    # store
    "CartStore",
    "line_key",
    # repository
    "load_cart",
    "save_cart",
    # services
    "get_cart",
    "add_product",
    "update_item",
    "remove_item",
    "clear_cart",
    "checkout_summary",
]
