# module storefront.catalog.views
"""Endpoints catalogue (lecture seule).
- GET /api/v1/products: produits en stock.
- GET /api/v1/products/{product_id}: détail, 404 si introuvable.
"""
from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from storefront.catalog import repository as catalog_repository

router = APIRouter(prefix="/api/v1/products", tags=["Catalog API"])

@router.get("")
def list_products():
    return JSONResponse({"items": catalog_repository.list_products()})

@router.get("/{product_id}")
def get_product(product_id: str):
    product = catalog_repository.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return JSONResponse(product)
