from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from storefront.health import service as health_service
from storefront.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/supabase")
def health_supabase():
    return JSONResponse(health_service.health_supabase_info())

@router.get("/checkout")
def health_checkout(request: Request):
    info = health_service.health_checkout_info()
    info["rate_limit"] = rate_limit_health_info(request)
    return JSONResponse(info)
