"""FastAPI routes for the Commerce domain — products, stock, cart, checkout and orders.

The caller's identity arrives in the ``X-Owner-Id`` header, set by the
authenticating gateway in front of this service.
"""

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from commerce import settings
from commerce.api.schemas import (
    AddCartItemRequest,
    AdjustStockRequest,
    CancelOrderRequest,
    CartResponse,
    ChangePriceRequest,
    CheckoutRequest,
    OrderResponse,
    ProductIdResponse,
    ProductResponse,
    RegisterProductRequest,
    StatusResponse,
    StockLevelResponse,
    StockMovementRequest,
    UpdateCartItemRequest,
)
from commerce.cart.cart import Cart
from commerce.cart.items import AddCartItem, ClearCart, RemoveCartItem, UpdateCartItemQuantity
from commerce.cart.management import OpenCart
from commerce.catalogue.management import (
    ActivateProduct,
    ChangeProductPrice,
    DeactivateProduct,
    RegisterProduct,
)
from commerce.catalogue.product import Product
from commerce.checkout.checkout import checkout
from commerce.inventory.adjustment import (
    AddStock,
    AdjustStock,
    ReleaseStock,
    RemoveStock,
    ReserveStock,
    stock_level,
)
from commerce.order.lifecycle import CancelOrder, DeliverOrder, PayOrder, ShipOrder
from commerce.order.order import Order, OrderStatus
from commerce.shared.concurrency import process_with_retry


def _write(command):
    """Process a cart or stock command, re-running it if it loses a race with a concurrent writer."""
    return process_with_retry(command, settings.max_write_attempts())


def _active_cart(owner_id: str) -> CartResponse:
    cart_id = _write(OpenCart(owner_id=owner_id))
    return CartResponse.from_cart(current_domain.repository_for(Cart).get(cart_id))


def _order(order_id: str) -> OrderResponse:
    return OrderResponse.from_order(current_domain.repository_for(Order).lookup(order_id))


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def register_product(body: RegisterProductRequest) -> ProductIdResponse:
    command = RegisterProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        currency=body.currency,
        active=body.active,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(current_domain.repository_for(Product).lookup(product_id))


@product_router.put("/{product_id}/price", response_model=StatusResponse)
async def change_product_price(product_id: str, body: ChangePriceRequest) -> StatusResponse:
    current_domain.process(ChangeProductPrice(product_id=product_id, price=body.price), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/activate", response_model=StatusResponse)
async def activate_product(product_id: str) -> StatusResponse:
    current_domain.process(ActivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/deactivate", response_model=StatusResponse)
async def deactivate_product(product_id: str) -> StatusResponse:
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Stock Router
# ---------------------------------------------------------------------------
stock_router = APIRouter(prefix="/stock", tags=["stock"])


@stock_router.get("/{product_id}", response_model=StockLevelResponse)
async def get_stock_level(product_id: str) -> StockLevelResponse:
    return StockLevelResponse(**stock_level(product_id))


@stock_router.post("/{product_id}/add", response_model=StockLevelResponse)
async def add_stock(product_id: str, body: StockMovementRequest) -> StockLevelResponse:
    _write(AddStock(product_id=product_id, quantity=body.quantity, reason=body.reason))
    return StockLevelResponse(**stock_level(product_id))


@stock_router.post("/{product_id}/remove", response_model=StockLevelResponse)
async def remove_stock(product_id: str, body: StockMovementRequest) -> StockLevelResponse:
    _write(RemoveStock(product_id=product_id, quantity=body.quantity, reason=body.reason))
    return StockLevelResponse(**stock_level(product_id))


@stock_router.put("/{product_id}", response_model=StockLevelResponse)
async def adjust_stock(product_id: str, body: AdjustStockRequest) -> StockLevelResponse:
    _write(AdjustStock(product_id=product_id, new_quantity=body.new_quantity, reason=body.reason))
    return StockLevelResponse(**stock_level(product_id))


@stock_router.post("/{product_id}/reserve", response_model=StockLevelResponse)
async def reserve_stock(product_id: str, body: StockMovementRequest) -> StockLevelResponse:
    _write(ReserveStock(product_id=product_id, quantity=body.quantity, reason=body.reason))
    return StockLevelResponse(**stock_level(product_id))


@stock_router.post("/{product_id}/release", response_model=StockLevelResponse)
async def release_stock(product_id: str, body: StockMovementRequest) -> StockLevelResponse:
    _write(ReleaseStock(product_id=product_id, quantity=body.quantity, reason=body.reason))
    return StockLevelResponse(**stock_level(product_id))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(x_owner_id: str = Header()) -> CartResponse:
    return _active_cart(x_owner_id)


@cart_router.post("/items", status_code=201, response_model=CartResponse)
async def add_cart_item(body: AddCartItemRequest, x_owner_id: str = Header()) -> CartResponse:
    command = AddCartItem(
        owner_id=x_owner_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    _write(command)
    return _active_cart(x_owner_id)


@cart_router.put("/items/{line_id}", response_model=CartResponse)
async def update_cart_item(line_id: str, body: UpdateCartItemRequest, x_owner_id: str = Header()) -> CartResponse:
    command = UpdateCartItemQuantity(
        owner_id=x_owner_id,
        line_id=line_id,
        new_quantity=body.quantity,
    )
    _write(command)
    return _active_cart(x_owner_id)


@cart_router.delete("/items/{line_id}", response_model=CartResponse)
async def remove_cart_item(line_id: str, x_owner_id: str = Header()) -> CartResponse:
    _write(RemoveCartItem(owner_id=x_owner_id, line_id=line_id))
    return _active_cart(x_owner_id)


@cart_router.delete("/items", response_model=CartResponse)
async def clear_cart(x_owner_id: str = Header()) -> CartResponse:
    _write(ClearCart(owner_id=x_owner_id))
    return _active_cart(x_owner_id)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: CheckoutRequest, x_owner_id: str = Header()) -> OrderResponse:
    order_id = checkout(x_owner_id, shipping_address=body.shipping_address, notes=body.notes)
    return _order(order_id)


# ---------------------------------------------------------------------------
# Order Router (customer)
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderResponse])
async def list_my_orders(x_owner_id: str = Header()) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).placed_by(x_owner_id)
    return [OrderResponse.from_order(order) for order in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_my_order(order_id: str, x_owner_id: str = Header()) -> OrderResponse:
    order = current_domain.repository_for(Order).lookup_for_owner(order_id, x_owner_id)
    return OrderResponse.from_order(order)


@order_router.put("/{order_id}/pay", response_model=OrderResponse)
async def pay_order(order_id: str, x_owner_id: str = Header()) -> OrderResponse:
    current_domain.process(PayOrder(order_id=order_id, owner_id=x_owner_id), asynchronous=False)
    return _order(order_id)


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str, body: CancelOrderRequest | None = None, x_owner_id: str = Header()
) -> OrderResponse:
    current_domain.process(
        CancelOrder(order_id=order_id, owner_id=x_owner_id, reason=body.reason if body else None),
        asynchronous=False,
    )
    return _order(order_id)


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin/orders", tags=["admin"])


@admin_router.get("", response_model=list[OrderResponse])
async def list_orders_by_status(status: OrderStatus) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).with_status(status)
    return [OrderResponse.from_order(order) for order in orders]


@admin_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _order(order_id)


@admin_router.put("/{order_id}/ship", response_model=OrderResponse)
async def ship_order(order_id: str) -> OrderResponse:
    current_domain.process(ShipOrder(order_id=order_id), asynchronous=False)
    return _order(order_id)


@admin_router.put("/{order_id}/deliver", response_model=OrderResponse)
async def deliver_order(order_id: str) -> OrderResponse:
    current_domain.process(DeliverOrder(order_id=order_id), asynchronous=False)
    return _order(order_id)
