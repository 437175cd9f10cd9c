"""Checkout — turns the owner's Active cart into a CREATED order.

``PlaceOrder`` runs in one unit of work: it validates every line, takes the
units out of each stock ledger, writes the order and closes the cart. Any
failure rolls all of it back, so no partial order or half-closed cart can
exist.

``checkout()`` is the entry point adapters call. It re-runs the unit of work
when a stock ledger was changed concurrently (Protean's optimistic version
check), and gives up with ``StockContention`` after a few attempts. Business
failures such as ``InsufficientStock`` are never retried.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from commerce import settings
from commerce.cart.cart import Cart
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.errors import (
    CartNotFound,
    ConcurrentUpdate,
    EmptyCart,
    InsufficientStock,
    ProductUnavailable,
    StockContention,
)
from commerce.inventory.ledger import StockLedger
from commerce.order.order import Order, OrderLine
from commerce.shared.concurrency import process_with_retry

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class PlaceOrder:
    owner_id = Identifier(required=True)
    shipping_address = String(required=True, max_length=500)
    notes = Text()


@commerce.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        carts = current_domain.repository_for(Cart)
        products = current_domain.repository_for(Product)
        ledgers = current_domain.repository_for(StockLedger)
        orders = current_domain.repository_for(Order)

        cart = carts.active_for(command.owner_id)
        if cart is None:
            raise CartNotFound(str(command.owner_id))
        if not cart.lines:
            raise EmptyCart(str(cart.id))

        # Authoritative re-check: stock and activation may have changed since the items were added
        snapshots = []
        for line in cart.lines:
            product = products.lookup(line.product_id)
            if not product.active:
                raise ProductUnavailable(product.name, product_id=str(product.id))
            available = ledgers.quantity_of(line.product_id)
            if available < line.quantity:
                raise InsufficientStock(
                    available=available,
                    requested=line.quantity,
                    product_id=str(product.id),
                    product_name=product.name,
                )
            snapshots.append(OrderLine.snapshot(line.product_id, product.name, line.unit_price, line.quantity))

        for snapshot in snapshots:
            ledgers.consume(
                snapshot.product_id,
                snapshot.quantity,
                product_name=snapshot.product_name,
                reason=f"Checkout of cart {cart.id}",
            )

        order = Order.place(
            owner_id=command.owner_id,
            cart_id=str(cart.id),
            lines=snapshots,
            shipping_address=command.shipping_address,
            notes=command.notes,
        )
        cart.close(str(order.id))

        orders.add(order)
        carts.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            owner_id=str(command.owner_id),
            cart_id=str(cart.id),
            item_count=order.item_count,
            total=str(order.total),
        )
        return str(order.id)


def checkout(owner_id: str, shipping_address: str, notes: str | None = None) -> str:
    """Place an order from the owner's Active cart and return its id."""
    attempts = settings.max_checkout_attempts()
    try:
        return process_with_retry(
            PlaceOrder(owner_id=owner_id, shipping_address=shipping_address, notes=notes),
            attempts,
        )
    except ConcurrentUpdate:
        raise StockContention(str(owner_id), attempts) from None
