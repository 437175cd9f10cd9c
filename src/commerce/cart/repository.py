"""Repository for the Cart aggregate.

An owner has at most one Active cart. Opening one is the only write that
could break that, so saving a new Active cart is refused with
``ExpectedVersionError`` when the owner already has one; the caller re-runs
and picks up the existing cart.
"""

from protean.core.repository import BaseRepository
from protean.utils.globals import current_domain

from commerce.cart.cart import Cart, CartLine, CartStatus
from commerce.domain import commerce
from commerce.errors import ActiveCartConflict
from commerce.shared.concurrency import insert_once


@commerce.repository(part_of=Cart)
class CartRepository:
    def add(self, cart: Cart) -> Cart:
        if cart.state_.is_persisted or cart.status != CartStatus.ACTIVE.value:
            return BaseRepository.add(self, cart)
        return insert_once(
            lambda item: BaseRepository.add(self, item),
            cart,
            lambda: bool(self._active_carts(cart.owner_id)),
            f"Active cart for owner {cart.owner_id}",
        )

    def _active_carts(self, owner_id: str) -> list[Cart]:
        return self._dao.query.filter(owner_id=str(owner_id), status=CartStatus.ACTIVE.value).all().items

    def active_for(self, owner_id: str) -> Cart | None:
        """The owner's Active cart, or None. Finding more than one is a data error."""
        carts = self._active_carts(owner_id)
        if len(carts) > 1:
            raise ActiveCartConflict(str(owner_id), len(carts))
        return carts[0] if carts else None

    def get_or_open(self, owner_id: str, currency: str) -> Cart:
        """The owner's Active cart, opening an unsaved empty one when there is none."""
        return self.active_for(owner_id) or Cart.open(owner_id=str(owner_id), currency=currency)

    def history_for(self, owner_id: str) -> list[Cart]:
        return self._dao.query.filter(owner_id=str(owner_id)).order_by("-created_at").all().items

    def line_exists(self, line_id: str) -> bool:
        """Whether a cart line with this id exists in any cart."""
        lines = current_domain.repository_for(CartLine)._dao.query.filter(id=str(line_id)).all().items
        return bool(lines)
