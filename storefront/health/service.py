from urllib.parse import urlparse
import socket

from storefront.config import SUPABASE_URL, STRIPE_SECRET_KEY, STRIPE_PUBLISHABLE_KEY
import storefront.infra.supabase_client as supabase_client
import storefront.infra.redis_client as redis_client

def _check_table(client, name: str):
    try:
        res = client.table(name).select("*").limit(1).execute()
        cnt = len(res.data or [])
        return {"ok": True, "rows": cnt}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def health_supabase_info():
    effective_url = SUPABASE_URL
    parsed = urlparse(effective_url) if effective_url else None
    hostname = parsed.hostname if parsed else None
    dns_ok = None
    dns_error = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except Exception as e:
            dns_ok = False
            dns_error = str(e)

    info = {
        "supabase_url": effective_url,
        "hostname": hostname,
        "dns_ok": dns_ok,
        "dns_error": dns_error,
        "connect_ok": False,
        "error": None,
        "tables": {}
    }
    try:
        client = supabase_client.get_service_supabase()
        for t in ["products", "orders", "order_items"]:
            info["tables"][t] = _check_table(client, t)
        info["connect_ok"] = True
    except Exception as e:
        info["error"] = str(e)
    return info

def health_checkout_info():
    """Configuration Stripe présente et stockage panier joignable."""
    info = {
        "stripe_secret_configured": bool(STRIPE_SECRET_KEY),
        "stripe_publishable_configured": bool(STRIPE_PUBLISHABLE_KEY),
        "cart_storage_ok": False,
        "cart_storage_error": None,
    }
    try:
        info["cart_storage_ok"] = bool(redis_client.get_cart_redis().ping())
    except Exception as e:
        info["cart_storage_error"] = str(e)
    return info
