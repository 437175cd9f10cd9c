"""Commerce bounded context — Cart, Checkout, Orders and Stock.

Turns a mutable shopping cart into an immutable order while keeping stock
non-negative. All aggregates live in one domain so checkout can write the
cart, the order and the stock ledgers in a single unit of work.
"""

import structlog
from protean.domain import Domain

commerce = Domain(name="commerce")

logger = structlog.get_logger(__name__)
