"""Pydantic request/response schemas for the Commerce API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Money travels as a decimal string plus currency.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class MoneySchema(BaseModel):
    amount: str
    currency: str

    @classmethod
    def from_money(cls, money) -> "MoneySchema":
        return cls(amount=str(money.amount), currency=money.currency)


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class RegisterProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    price: float = Field(gt=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    active: bool = True

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Mechanical Keyboard",
                    "description": "ABNT2 layout",
                    "price": 349.90,
                    "currency": "BRL",
                }
            ]
        }
    }


class ChangePriceRequest(BaseModel):
    price: float = Field(gt=0)


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: MoneySchema
    active: bool

    @classmethod
    def from_product(cls, product) -> "ProductResponse":
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            price=MoneySchema.from_money(product.price),
            active=product.active,
        )


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------
class StockMovementRequest(BaseModel):
    quantity: int
    reason: str | None = Field(default=None, max_length=500)


class AdjustStockRequest(BaseModel):
    new_quantity: int
    reason: str | None = Field(default=None, max_length=500)


class StockLevelResponse(BaseModel):
    product_id: str
    quantity: int
    low_stock: bool
    out_of_stock: bool
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddCartItemRequest(BaseModel):
    product_id: str
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    quantity: int


class CartLineResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    unit_price: MoneySchema
    subtotal: MoneySchema


class CartResponse(BaseModel):
    id: str
    owner_id: str
    status: str
    lines: list[CartLineResponse]
    total_value: MoneySchema
    total_quantity: int

    @classmethod
    def from_cart(cls, cart) -> "CartResponse":
        return cls(
            id=str(cart.id),
            owner_id=str(cart.owner_id),
            status=cart.status,
            lines=[
                CartLineResponse(
                    id=str(line.id),
                    product_id=str(line.product_id),
                    quantity=line.quantity,
                    unit_price=MoneySchema.from_money(line.unit_price),
                    subtotal=MoneySchema.from_money(line.subtotal),
                )
                for line in cart.lines
            ],
            total_value=MoneySchema.from_money(cart.total_value),
            total_quantity=cart.total_quantity,
        )


# ---------------------------------------------------------------------------
# Checkout and orders
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    shipping_address: str = Field(min_length=1, max_length=500)
    notes: str | None = Field(default=None, max_length=1000)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": "Rua das Flores, 123, São Paulo - SP",
                    "notes": "Leave with the doorman",
                }
            ]
        }
    }


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class OrderLineResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: MoneySchema
    subtotal: MoneySchema


class OrderResponse(BaseModel):
    id: str
    owner_id: str
    status: str
    lines: list[OrderLineResponse]
    item_count: int
    subtotal: MoneySchema
    shipping_fee: MoneySchema
    discount: MoneySchema
    total: MoneySchema
    shipping_address: str
    notes: str | None = None
    cancellation_reason: str | None = None
    created_at: datetime | None = None
    paid_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    canceled_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            owner_id=str(order.owner_id),
            status=order.status,
            lines=[
                OrderLineResponse(
                    id=str(line.id),
                    product_id=str(line.product_id),
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=MoneySchema.from_money(line.unit_price),
                    subtotal=MoneySchema.from_money(line.subtotal),
                )
                for line in order.lines
            ],
            item_count=order.item_count,
            subtotal=MoneySchema.from_money(order.subtotal),
            shipping_fee=MoneySchema.from_money(order.shipping_fee),
            discount=MoneySchema.from_money(order.discount),
            total=MoneySchema.from_money(order.total),
            shipping_address=order.shipping_address,
            notes=order.notes,
            cancellation_reason=order.cancellation_reason,
            created_at=order.created_at,
            paid_at=order.paid_at,
            shipped_at=order.shipped_at,
            delivered_at=order.delivered_at,
            canceled_at=order.canceled_at,
        )
