from commerce.api.errors import register_commerce_exception_handlers
from commerce.api.routes import admin_router, cart_router, checkout_router, order_router, product_router, stock_router

__all__ = [
    "admin_router",
    "cart_router",
    "checkout_router",
    "order_router",
    "product_router",
    "stock_router",
    "register_commerce_exception_handlers",
]
