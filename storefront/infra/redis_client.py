"""
Client Redis synchrone dédié au stockage des paniers.
- CART_REDIS_URL: base distincte de celle du rate limiting (RATE_LIMIT_REDIS_URL).
- USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests).
"""
import os
from typing import Optional
import redis

from storefront.config import CART_REDIS_URL

try:
    import fakeredis  # tests only
except Exception:
    fakeredis = None

_cart_redis: Optional[redis.Redis] = None

def get_cart_redis() -> redis.Redis:
    global _cart_redis
    if _cart_redis is None:
        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            if not fakeredis:
                raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé.")
            _cart_redis = fakeredis.FakeRedis(decode_responses=True)
        else:
            _cart_redis = redis.Redis.from_url(CART_REDIS_URL, encoding="utf-8", decode_responses=True)
    return _cart_redis
