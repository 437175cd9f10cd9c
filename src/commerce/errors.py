"""Typed errors raised by the commerce domain.

Every error belongs to exactly one category. Adapters translate categories,
not individual classes, so new errors only need to pick the right parent.
"""


class CommerceError(Exception):
    """Base exception for all commerce errors."""

    code = "COMMERCE_ERROR"
    category = "commerce_error"

    def __init__(self, message: str, **details):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "category": self.category,
            "message": self.message,
            **{key: value for key, value in self.details.items() if value is not None},
        }


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
class NotFound(CommerceError):
    code = "NOT_FOUND"
    category = "not_found"


class Conflict(CommerceError):
    code = "CONFLICT"
    category = "conflict"


class InvalidState(CommerceError):
    code = "INVALID_STATE"
    category = "invalid_state"


class InvalidArgument(CommerceError):
    code = "INVALID_ARGUMENT"
    category = "invalid_argument"


class InsufficientStock(CommerceError):
    """Raised when a product does not have enough units on hand."""

    code = "INSUFFICIENT_STOCK"
    category = "insufficient_stock"

    def __init__(
        self,
        available: int,
        requested: int,
        product_id: str | None = None,
        product_name: str | None = None,
    ):
        self.available = available
        self.requested = requested
        self.product_id = product_id
        self.product_name = product_name
        subject = f" for {product_name}" if product_name else ""
        super().__init__(
            f"Insufficient stock{subject}. Available: {available}, Requested: {requested}",
            available=available,
            requested=requested,
            product_id=product_id,
            product_name=product_name,
        )


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------
class ProductNotFound(NotFound):
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}", product_id=product_id)


class CartNotFound(NotFound):
    code = "CART_NOT_FOUND"

    def __init__(self, owner_id: str):
        self.owner_id = owner_id
        super().__init__(f"No active cart for owner {owner_id}", owner_id=owner_id)


class LineNotFound(NotFound):
    code = "LINE_NOT_FOUND"

    def __init__(self, line_id: str):
        self.line_id = line_id
        super().__init__(f"Cart line not found: {line_id}", line_id=line_id)


class OrderNotFound(NotFound):
    code = "ORDER_NOT_FOUND"

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}", order_id=order_id)


# ---------------------------------------------------------------------------
# Conflict
# ---------------------------------------------------------------------------
class LineOwnershipMismatch(Conflict):
    """Raised when a cart line exists but not in the caller's active cart."""

    code = "LINE_OWNERSHIP_MISMATCH"

    def __init__(self, line_id: str, owner_id: str):
        self.line_id = line_id
        self.owner_id = owner_id
        super().__init__(
            f"Cart line {line_id} does not belong to the active cart of {owner_id}",
            line_id=line_id,
            owner_id=owner_id,
        )


class ActiveCartConflict(Conflict):
    code = "ACTIVE_CART_CONFLICT"

    def __init__(self, owner_id: str, count: int):
        self.owner_id = owner_id
        self.count = count
        super().__init__(
            f"Owner {owner_id} has {count} active carts, expected at most one",
            owner_id=owner_id,
            count=count,
        )


class StockContention(Conflict):
    """Raised when checkout keeps losing the race for a stock ledger."""

    code = "STOCK_CONTENTION"

    def __init__(self, owner_id: str, attempts: int):
        self.owner_id = owner_id
        self.attempts = attempts
        super().__init__(
            f"Checkout for {owner_id} gave up after {attempts} attempts on concurrent stock updates",
            owner_id=owner_id,
            attempts=attempts,
        )


class ConcurrentUpdate(Conflict):
    """Raised when a command keeps losing races against concurrent writers."""

    code = "CONCURRENT_UPDATE"

    def __init__(self, command: str, attempts: int):
        self.command = command
        self.attempts = attempts
        super().__init__(
            f"{command} gave up after {attempts} attempts on concurrent updates",
            command=command,
            attempts=attempts,
        )


# ---------------------------------------------------------------------------
# Invalid state
# ---------------------------------------------------------------------------
class IllegalStateTransition(InvalidState):
    code = "ILLEGAL_STATE_TRANSITION"

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Cannot transition from {from_status} to {to_status}",
            from_status=from_status,
            to_status=to_status,
        )


class CartNotActive(InvalidState):
    code = "CART_NOT_ACTIVE"

    def __init__(self, cart_id: str, status: str):
        self.cart_id = cart_id
        self.status = status
        super().__init__(f"Cart {cart_id} is {status} and can no longer be changed", cart_id=cart_id, status=status)


class EmptyCart(InvalidState):
    code = "EMPTY_CART"

    def __init__(self, cart_id: str):
        self.cart_id = cart_id
        super().__init__("Cannot check out an empty cart", cart_id=cart_id)


class ProductInactive(InvalidState):
    """Raised when adding a disabled product to a cart."""

    code = "PRODUCT_INACTIVE"

    def __init__(self, product_id: str, product_name: str | None = None):
        self.product_id = product_id
        self.product_name = product_name
        super().__init__(
            f"Product {product_name or product_id} is not available for sale",
            product_id=product_id,
            product_name=product_name,
        )


class ProductUnavailable(InvalidState):
    """Raised at checkout when a product in the cart was disabled meanwhile."""

    code = "PRODUCT_UNAVAILABLE"

    def __init__(self, product_name: str, product_id: str | None = None):
        self.product_name = product_name
        self.product_id = product_id
        super().__init__(
            f"Product {product_name} is no longer available",
            product_name=product_name,
            product_id=product_id,
        )


# ---------------------------------------------------------------------------
# Invalid argument
# ---------------------------------------------------------------------------
class InvalidAmount(InvalidArgument):
    code = "INVALID_AMOUNT"

    def __init__(self, amount, reason: str = "Amount cannot be negative"):
        self.amount = amount
        super().__init__(f"{reason}: {amount}", amount=str(amount))


class CurrencyMismatch(InvalidArgument):
    code = "CURRENCY_MISMATCH"

    def __init__(self, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(f"Cannot combine {left} with {right}", left=left, right=right)


class InvalidCurrency(InvalidArgument):
    code = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Unsupported currency: {currency}", currency=currency)


class InvalidQuantity(InvalidArgument):
    code = "INVALID_QUANTITY"

    def __init__(self, quantity, minimum: int = 1):
        self.quantity = quantity
        self.minimum = minimum
        super().__init__(f"Quantity must be at least {minimum}, got {quantity}", quantity=quantity, minimum=minimum)
