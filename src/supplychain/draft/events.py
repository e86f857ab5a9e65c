"""Domain events for agency drafts."""

from protean.fields import DateTime, Identifier, Integer, String

from supplychain.domain import supplychain


@supplychain.event(part_of="ReadyOrder")
class DraftAdded:
    """An agency put a catalog product into its draft list."""

    __version__ = 1

    draft_id = Identifier(required=True)
    agency_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(required=True)
    quantity = Integer(required=True)
    unit_price = Integer(required=True)
    added_at = DateTime(required=True)


@supplychain.event(part_of="ReadyOrder")
class DraftQuantityAdjusted:
    """A draft's quantity changed; line total recomputed."""

    __version__ = 1

    draft_id = Identifier(required=True)
    agency_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    line_total = Integer(required=True)


@supplychain.event(part_of="RetiredDraft")
class DraftRetired:
    """A draft left the draft list, either discarded or promoted into an order."""

    __version__ = 1

    draft_id = Identifier(required=True)
    agency_id = Identifier(required=True)
    reason = String(required=True)
    order_id = Identifier()
    retired_at = DateTime(required=True)
