"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from commerce.domain import commerce


@commerce.event(part_of="Product")
class ProductRegistered:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: String(required=True)
    currency: String(required=True)
    active: Boolean(default=True)
    registered_at: DateTime(required=True)


@commerce.event(part_of="Product")
class ProductPriceChanged:
    """The live price changed. Cart and order lines keep their own snapshot."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_price: String(required=True)
    new_price: String(required=True)
    currency: String(required=True)
    changed_at: DateTime(required=True)


@commerce.event(part_of="Product")
class ProductActivated:
    __version__ = 1

    product_id: Identifier(required=True)
    activated_at: DateTime(required=True)


@commerce.event(part_of="Product")
class ProductDeactivated:
    __version__ = 1

    product_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)
