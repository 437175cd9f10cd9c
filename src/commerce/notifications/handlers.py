"""Event handlers forwarding domain events to the notifier.

Delivery is fire-and-forget: a failing notifier is logged and swallowed so it
can never undo the unit of work that raised the event.
"""

import structlog
from protean import handle

from commerce import settings
from commerce.domain import commerce
from commerce.inventory.events import StockUpdated
from commerce.inventory.ledger import StockLedger
from commerce.notifications import get_notifier
from commerce.order.events import OrderCanceled, OrderDelivered, OrderPaid, OrderPlaced, OrderShipped
from commerce.order.order import Order

logger = structlog.get_logger(__name__)


def _payload(event) -> dict:
    return {key: value for key, value in event.to_dict().items() if not key.startswith("_")}


def publish(event_type: str, payload: dict) -> None:
    try:
        get_notifier().publish(event_type, payload)
    except Exception as exc:
        logger.error("Notification delivery failed", event_type=event_type, error=str(exc))


@commerce.event_handler(part_of=Order)
class OrderNotificationsHandler:
    """Publishes order lifecycle events."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        publish("OrderPlaced", _payload(event))

    @handle(OrderPaid)
    def on_order_paid(self, event: OrderPaid) -> None:
        publish("OrderPaid", _payload(event))

    @handle(OrderShipped)
    def on_order_shipped(self, event: OrderShipped) -> None:
        publish("OrderShipped", _payload(event))

    @handle(OrderDelivered)
    def on_order_delivered(self, event: OrderDelivered) -> None:
        publish("OrderDelivered", _payload(event))

    @handle(OrderCanceled)
    def on_order_canceled(self, event: OrderCanceled) -> None:
        publish("OrderCanceled", _payload(event))


@commerce.event_handler(part_of=StockLedger)
class StockNotificationsHandler:
    """Publishes stock movements and flags ledgers running low."""

    @handle(StockUpdated)
    def on_stock_updated(self, event: StockUpdated) -> None:
        publish("StockUpdated", _payload(event))

        threshold = settings.low_stock_threshold()
        if event.new_quantity <= threshold < event.previous_quantity:
            logger.warning(
                "Low stock",
                product_id=str(event.product_id),
                quantity=event.new_quantity,
                threshold=threshold,
            )
            publish(
                "LowStock",
                {"product_id": str(event.product_id), "quantity": event.new_quantity, "threshold": threshold},
            )
