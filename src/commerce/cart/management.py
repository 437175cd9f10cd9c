"""Cart management — get-or-create the owner's active cart."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from commerce import settings
from commerce.cart.cart import Cart
from commerce.domain import commerce


@commerce.command(part_of="Cart")
class OpenCart:
    """Return the owner's Active cart, creating an empty one if there is none."""

    owner_id = Identifier(required=True)


@commerce.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(OpenCart)
    def open_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.active_for(command.owner_id)
        if cart is None:
            cart = Cart.open(owner_id=command.owner_id, currency=settings.currency())
            repo.add(cart)
        return str(cart.id)
