"""Repository for the Order aggregate — owner-scoped and admin queries."""

from protean.exceptions import ObjectNotFoundError

from commerce.domain import commerce
from commerce.errors import OrderNotFound
from commerce.order.order import Order, OrderStatus


@commerce.repository(part_of=Order)
class OrderRepository:
    def lookup(self, order_id: str) -> Order:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            raise OrderNotFound(str(order_id)) from None

    def lookup_for_owner(self, order_id: str, owner_id: str) -> Order:
        """Someone else's order is reported as missing, not as forbidden."""
        order = self.lookup(order_id)
        if not order.is_owned_by(owner_id):
            raise OrderNotFound(str(order_id))
        return order

    def placed_by(self, owner_id: str) -> list[Order]:
        """The owner's orders, newest first."""
        return self._dao.query.filter(owner_id=str(owner_id)).order_by("-created_at").all().items

    def with_status(self, status: OrderStatus | str) -> list[Order]:
        value = status.value if isinstance(status, OrderStatus) else OrderStatus(status).value
        return self._dao.query.filter(status=value).order_by("-created_at").all().items
