"""Product management — commands and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from commerce import settings
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.shared.money import Money


@commerce.command(part_of="Product")
class RegisterProduct:
    name: String(required=True, max_length=200)
    description: Text()
    price: Float(required=True)
    currency: String(max_length=3)
    active: Boolean(default=True)


@commerce.command(part_of="Product")
class ChangeProductPrice:
    product_id: Identifier(required=True)
    price: Float(required=True)


@commerce.command(part_of="Product")
class ActivateProduct:
    product_id: Identifier(required=True)


@commerce.command(part_of="Product")
class DeactivateProduct:
    product_id: Identifier(required=True)


@commerce.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        product = Product.register(
            name=command.name,
            price=Money.of(command.price, command.currency or settings.currency()),
            description=command.description,
            active=command.active,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(ChangeProductPrice)
    def change_price(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.lookup(command.product_id)
        product.change_price(Money.of(command.price, product.price.currency))
        repo.add(product)

    @handle(ActivateProduct)
    def activate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.lookup(command.product_id)
        product.activate()
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.lookup(command.product_id)
        product.deactivate()
        repo.add(product)
