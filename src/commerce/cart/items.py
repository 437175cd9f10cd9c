"""Cart item management — commands and handler.

Every operation works on the caller's Active cart. Add and clear open one
when the owner has none yet; update and remove need the line to be in it.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from commerce import settings
from commerce.cart.cart import Cart
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.errors import LineNotFound, LineOwnershipMismatch
from commerce.inventory.ledger import StockLedger


@commerce.command(part_of="Cart")
class AddCartItem:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="Cart")
class UpdateCartItemQuantity:
    owner_id = Identifier(required=True)
    line_id = Identifier(required=True)
    new_quantity = Integer(required=True)


@commerce.command(part_of="Cart")
class RemoveCartItem:
    owner_id = Identifier(required=True)
    line_id = Identifier(required=True)


@commerce.command(part_of="Cart")
class ClearCart:
    owner_id = Identifier(required=True)


def _owned_line(repo, cart, owner_id, line_id):
    """Resolve ``line_id`` inside the owner's cart, telling unknown lines from foreign ones."""
    line = cart.line_for(line_id) if cart is not None else None
    if line is not None:
        return line
    if repo.line_exists(line_id):
        raise LineOwnershipMismatch(str(line_id), str(owner_id))
    raise LineNotFound(str(line_id))


@commerce.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddCartItem)
    def add_cart_item(self, command):
        product = current_domain.repository_for(Product).lookup(command.product_id)
        available = current_domain.repository_for(StockLedger).quantity_of(command.product_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_open(command.owner_id, settings.currency())
        line = cart.add_item(product, command.quantity, available)
        repo.add(cart)
        return str(line.id)

    @handle(UpdateCartItemQuantity)
    def update_cart_item_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.active_for(command.owner_id)
        line = _owned_line(repo, cart, command.owner_id, command.line_id)

        product = current_domain.repository_for(Product).lookup(line.product_id)
        available = current_domain.repository_for(StockLedger).quantity_of(line.product_id)
        cart.update_item_quantity(command.line_id, command.new_quantity, available, product.name)
        repo.add(cart)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.active_for(command.owner_id)
        _owned_line(repo, cart, command.owner_id, command.line_id)

        cart.remove_item(command.line_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_open(command.owner_id, settings.currency())
        cart.clear()
        repo.add(cart)
