"""Product aggregate (CQRS) — the catalogue entry carts and orders read from.

Only the parts checkout depends on are modelled: a name, a live price and an
active flag. Carts snapshot the price when a line is created and orders
snapshot the name at checkout, so edits here never rewrite history.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String, Text, ValueObject

from commerce.catalogue.events import (
    ProductActivated,
    ProductDeactivated,
    ProductPriceChanged,
    ProductRegistered,
)
from commerce.domain import commerce
from commerce.errors import InvalidAmount
from commerce.shared.money import Money


@commerce.aggregate
class Product:
    name: String(required=True, max_length=200)
    description: Text()
    price: ValueObject(Money, required=True)
    active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def register(cls, name: str, price: Money, description: str | None = None, active: bool = True):
        if price.is_zero():
            raise InvalidAmount(price.amount, "Price must be greater than zero")

        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=price,
            active=active,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductRegistered(
                product_id=str(product.id),
                name=name,
                price=str(price.amount),
                currency=price.currency,
                active=active,
                registered_at=now,
            )
        )
        return product

    def change_price(self, new_price: Money) -> None:
        """Replace the live price. Existing cart and order lines are untouched."""
        if new_price.is_zero():
            raise InvalidAmount(new_price.amount, "Price must be greater than zero")

        previous = self.price
        now = datetime.now(UTC)
        self.price = new_price
        self.updated_at = now
        self.raise_(
            ProductPriceChanged(
                product_id=str(self.id),
                previous_price=str(previous.amount),
                new_price=str(new_price.amount),
                currency=new_price.currency,
                changed_at=now,
            )
        )

    def activate(self) -> None:
        if self.active:
            return
        now = datetime.now(UTC)
        self.active = True
        self.updated_at = now
        self.raise_(ProductActivated(product_id=str(self.id), activated_at=now))

    def deactivate(self) -> None:
        if not self.active:
            return
        now = datetime.now(UTC)
        self.active = False
        self.updated_at = now
        self.raise_(ProductDeactivated(product_id=str(self.id), deactivated_at=now))
