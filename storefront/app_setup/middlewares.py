from fastapi import Request, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from storefront.config import (
    SUPABASE_URL,
    COOKIE_SECURE,
    CORS_ORIGINS,
    ALLOWED_HOSTS,
    SESSION_SECRET_KEY,
    SESSION_COOKIE_NAME,
)

"""
Middlewares transverses de la boutique.
- register_basic_middlewares: session (panier + commandes confirmées), CORS, TrustedHost, X-Forwarded-*.
- register_security_middleware: en-têtes de sécurité et CSP autorisant Stripe.js.
- register_no_cache_middleware: pas de cache sur les réponses panier/commandes/paiements.
"""
STRIPE_JS_SOURCES = ["https://js.stripe.com"]
STRIPE_FRAME_SOURCES = ["https://js.stripe.com", "https://hooks.stripe.com"]
STRIPE_CONNECT_SOURCES = ["https://api.stripe.com"]
NO_CACHE_PREFIXES = ("/api/v1/cart", "/api/v1/orders", "/api/v1/payments")

def register_basic_middlewares(app: FastAPI) -> None:
    """
    - SessionMiddleware: cookie signé portant l'identifiant de panier et les commandes de la session.
    - CORSMiddleware: origines autorisées (dev/prod).
    - TrustedHostMiddleware: hôtes acceptés.
    - ProxyHeadersMiddleware (uvicorn): confiance aux en-têtes x-forwarded-*.
    """
    app.add_middleware(
        SessionMiddleware,
        secret_key=SESSION_SECRET_KEY,
        session_cookie=SESSION_COOKIE_NAME,
        https_only=COOKIE_SECURE,
        same_site="lax",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=ALLOWED_HOSTS + ["*"] if "*" in CORS_ORIGINS else ALLOWED_HOSTS,
    )
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)

        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        if COOKIE_SECURE:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")

        csp_connect = ["'self'"] + STRIPE_CONNECT_SOURCES
        if SUPABASE_URL:
            csp_connect.append(SUPABASE_URL.rstrip("/"))
        swagger_cdns = ["https://cdn.jsdelivr.net", "https://unpkg.com"]
        csp_connect.extend(swagger_cdns)

        csp = (
            "default-src 'self'; "
            "base-uri 'self'; object-src 'none'; frame-ancestors 'none'; "
            "img-src 'self' data: blob: https://fastapi.tiangolo.com; "
            f"style-src 'self' 'unsafe-inline' {' '.join(swagger_cdns)}; "
            f"script-src 'self' 'unsafe-inline' {' '.join(STRIPE_JS_SOURCES + swagger_cdns)}; "
            f"frame-src {' '.join(STRIPE_FRAME_SOURCES)}; "
            f"connect-src {' '.join(csp_connect)}"
        )
        response.headers["Content-Security-Policy"] = csp
        return response

def register_no_cache_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def no_cache_for_session_data(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith(NO_CACHE_PREFIXES):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response
