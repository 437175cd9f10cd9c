"""Order lifecycle — commands and handler.

Pay and cancel are customer actions and are scoped to the order's owner when
``owner_id`` is given. Ship and deliver are back-office actions.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.order.order import Order

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class PayOrder:
    order_id = Identifier(required=True)
    owner_id = Identifier()


@commerce.command(part_of="Order")
class ShipOrder:
    order_id = Identifier(required=True)


@commerce.command(part_of="Order")
class DeliverOrder:
    order_id = Identifier(required=True)


@commerce.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    owner_id = Identifier()
    reason = String(max_length=500)


def _load(repo, order_id, owner_id=None):
    if owner_id:
        return repo.lookup_for_owner(order_id, owner_id)
    return repo.lookup(order_id)


@commerce.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(PayOrder)
    def pay_order(self, command):
        repo = current_domain.repository_for(Order)
        order = _load(repo, command.order_id, command.owner_id)
        order.pay()
        repo.add(order)
        logger.info("Order paid", order_id=str(order.id), total=str(order.total))

    @handle(ShipOrder)
    def ship_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.lookup(command.order_id)
        order.mark_shipped()
        repo.add(order)
        logger.info("Order shipped", order_id=str(order.id))

    @handle(DeliverOrder)
    def deliver_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.lookup(command.order_id)
        order.mark_delivered()
        repo.add(order)
        logger.info("Order delivered", order_id=str(order.id))

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = _load(repo, command.order_id, command.owner_id)
        order.cancel(reason=command.reason)
        repo.add(order)
        logger.info("Order canceled", order_id=str(order.id), reason=command.reason)
