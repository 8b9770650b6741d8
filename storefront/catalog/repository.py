"""
Accès au catalogue produits (tables 'products' + 'product_variants').
- Lecture seule via le client anon.
- Normalise les lignes DB (snake_case) vers le format API (camelCase).
"""
from typing import Any, Dict, List, Optional
import logging

import storefront.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = "*, product_variants (id, name, value, in_stock)"

# module storefront.catalog.repository
def transform_product(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convertit une ligne 'products' vers le format exposé par l'API.
    - Valeurs par défaut: description '', tags/features [], images ['/placeholder.svg'].
    """
    return {
        "id": str(row.get("id") or ""),
        "name": row.get("name") or "",
        "description": row.get("description") or "",
        "price": float(row.get("price") or 0),
        "originalPrice": row.get("original_price") or None,
        "category": row.get("category") or "",
        "tags": row.get("tags") or [],
        "inStock": bool(row.get("in_stock")),
        "stockQuantity": int(row.get("stock_quantity") or 0),
        "rating": row.get("rating") or None,
        "reviewCount": int(row.get("review_count") or 0),
        "images": row.get("images") or ["/placeholder.svg"],
        "features": row.get("features") or [],
        "specifications": row.get("specifications") or {},
        "variants": [
            {
                "id": str(v.get("id") or ""),
                "name": v.get("name") or "",
                "value": v.get("value") or "",
                "inStock": bool(v.get("in_stock")),
            }
            for v in (row.get("product_variants") or [])
        ],
    }

def list_products() -> List[dict]:
    """Produits en stock, plus récents d'abord. [] en cas d'erreur."""
    try:
        res = (
            supabase_client.get_supabase()
            .table("products")
            .select(PRODUCT_COLUMNS)
            .eq("in_stock", True)
            .order("created_at", desc=True)
            .execute()
        )
        return [transform_product(r) for r in (res.data or [])]
    except Exception:
        logger.exception("catalog.repository.list_products failed")
        return []

def get_product(product_id: str) -> Optional[dict]:
    """Produit par identifiant, None si introuvable ou en cas d'erreur."""
    if not product_id:
        return None
    try:
        res = (
            supabase_client.get_supabase()
            .table("products")
            .select(PRODUCT_COLUMNS)
            .eq("id", product_id)
            .single()
            .execute()
        )
        return transform_product(res.data) if res.data else None
    except Exception:
        logger.exception("catalog.repository.get_product failed id=%s", product_id)
        return None
