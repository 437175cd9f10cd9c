"""Commerce FastAPI application.

Processes commands synchronously via HTTP. Every request runs inside the
commerce domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from commerce/domain.toml.
from commerce.domain import commerce
from commerce.utils.logging import add_context, clear_context, configure_logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

configure_logging()
commerce.init()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Commerce API",
    description="Cart, checkout, orders and stock",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the commerce domain context and bind the caller to the log context."""
    owner_id = request.headers.get("x-owner-id")
    if owner_id:
        add_context(owner_id=owner_id)
    try:
        with commerce.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from commerce.api import (  # noqa: E402
    admin_router,
    cart_router,
    checkout_router,
    order_router,
    product_router,
    register_commerce_exception_handlers,
    stock_router,
)

app.include_router(product_router)
app.include_router(stock_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(admin_router)

register_exception_handlers(app)
register_commerce_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": commerce.name})
