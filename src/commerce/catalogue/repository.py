"""Repository for the Product aggregate."""

from protean.exceptions import ObjectNotFoundError

from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.errors import ProductNotFound


@commerce.repository(part_of=Product)
class ProductRepository:
    def lookup(self, product_id: str) -> Product:
        """Fetch a product or fail with ``ProductNotFound``."""
        try:
            return self.get(str(product_id))
        except ObjectNotFoundError:
            raise ProductNotFound(str(product_id)) from None
