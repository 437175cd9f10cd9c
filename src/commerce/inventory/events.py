"""Domain events for the StockLedger aggregate.

Every mutation of a ledger raises one ``StockUpdated`` carrying the quantity
before and after the movement, which is the audit trail for stock.
"""

from protean.fields import DateTime, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="StockLedger")
class StockUpdated:
    __version__ = 1

    product_id = Identifier(required=True)
    movement = String(required=True)  # Added, Removed, Reserved, Released, Adjusted
    quantity = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    reason = String(max_length=500)
    occurred_at = DateTime(required=True)
