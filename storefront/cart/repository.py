"""
Persistance des paniers dans Redis (une clé par session navigateur).
- Clé: cart:<cart_id>, valeur: JSON des lignes, TTL glissant CART_TTL_SECONDS.
- Seules les lignes sont stockées; les totaux sont recalculés au chargement.
"""
import json
import logging
from typing import Any, Dict, List

from redis.exceptions import RedisError

import storefront.infra.redis_client as redis_client
from storefront.config import CART_TTL_SECONDS
from storefront.errors import InternalError
from .store import CartStore

logger = logging.getLogger(__name__)

# module storefront.cart.repository
def _cart_key(cart_id: str) -> str:
    return f"cart:{cart_id}"

def load_cart(cart_id: str) -> CartStore:
    """
    Recharge le panier d'une session.
    - Clé absente ou JSON illisible: panier vide.
    - Redis injoignable: InternalError.
    """
    try:
        raw = redis_client.get_cart_redis().get(_cart_key(cart_id))
    except RedisError:
        logger.exception("cart.repository.load_cart failed cart_id=%s", cart_id)
        raise InternalError("Cart storage unavailable")
    if not raw:
        return CartStore()
    try:
        items: List[Dict[str, Any]] = json.loads(raw)
    except ValueError:
        logger.warning("cart.repository.load_cart unreadable payload cart_id=%s", cart_id)
        return CartStore()
    return CartStore(items if isinstance(items, list) else [])

def save_cart(cart_id: str, cart: CartStore) -> None:
    """Écrit les lignes du panier (un panier vide supprime la clé)."""
    try:
        r = redis_client.get_cart_redis()
        if cart.is_empty():
            r.delete(_cart_key(cart_id))
            return
        r.set(_cart_key(cart_id), json.dumps(cart.items), ex=CART_TTL_SECONDS)
    except RedisError:
        logger.exception("cart.repository.save_cart failed cart_id=%s", cart_id)
        raise InternalError("Cart storage unavailable")
