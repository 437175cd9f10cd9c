"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Cart")
class CartOpened:
    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    currency = String(required=True)
    opened_at = DateTime(required=True)


@commerce.event(part_of="Cart")
class CartItemAdded:
    """Units of a product were put in the cart, as a new line or on top of an existing one."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity_added = Integer(required=True)
    line_quantity = Integer(required=True)
    unit_price = String(required=True)
    cart_total = String(required=True)


@commerce.event(part_of="Cart")
class CartItemQuantityUpdated:
    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    cart_total = String(required=True)


@commerce.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    cart_total = String(required=True)


@commerce.event(part_of="Cart")
class CartCleared:
    __version__ = 1

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)


@commerce.event(part_of="Cart")
class CartClosed:
    """The cart was checked out. Closed carts are kept for history."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    order_id = Identifier(required=True)
    closed_at = DateTime(required=True)
