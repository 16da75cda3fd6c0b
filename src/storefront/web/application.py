"""FastAPI application factory.

The storefront domain must be initialized before ``create_app`` is called;
every request then runs inside its domain context.
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.admin.api import router as admin_router
from storefront.cart.api import router as cart_router
from storefront.catalogue.api import category_router, product_router, tag_router
from storefront.config import Settings, get_settings
from storefront.domain import storefront
from storefront.identity.api import router as auth_router
from storefront.notifications.api import router as notification_router
from storefront.ordering.api import router as order_router
from storefront.promotion.api import router as promotion_router
from storefront.reviews.api import product_reviews_router, review_router
from storefront.utils.logging import add_context, clear_context, get_logger
from storefront.web.errors import register_error_handlers
from storefront.web.middleware import RateLimitMiddleware
from storefront.wishlist.api import router as wishlist_router

logger = get_logger(__name__)

ROUTERS = (
    auth_router,
    category_router,
    tag_router,
    product_router,
    product_reviews_router,
    review_router,
    cart_router,
    order_router,
    wishlist_router,
    notification_router,
    promotion_router,
    admin_router,
)


async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and bind request details to every log line."""
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    add_context(request_id=request_id, method=request.method, path=request.url.path)
    try:
        with storefront.domain_context():
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.info("request_completed", status_code=response.status_code)
        return response
    finally:
        clear_context()


async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Storefront API",
        description="E-commerce REST API: catalogue, cart, checkout, orders, reviews and administration",
    )
    register_error_handlers(app)

    app.add_middleware(RateLimitMiddleware, limit=settings.rate_limit_per_minute)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Outermost, so throttled responses are tagged and logged too
    app.middleware("http")(domain_context_middleware)

    for router in ROUTERS:
        app.include_router(router)
    app.add_api_route("/health", health, methods=["GET"])

    return app
