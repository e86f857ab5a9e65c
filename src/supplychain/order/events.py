"""Domain events for the AgencyOrder aggregate."""

from protean.fields import Date, DateTime, Identifier, Integer, String, Text

from supplychain.domain import supplychain


@supplychain.event(part_of="AgencyOrder")
class OrderPlaced:
    """An agency confirmed drafts into a new order awaiting approval."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    agency_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of frozen item dicts
    total_quantity = Integer(required=True)
    total_amount = Integer(required=True)
    arrival_date = Date(required=True)
    ordered_at = DateTime(required=True)


@supplychain.event(part_of="AgencyOrder")
class OrderApproved:
    """The head office approved the order for shipping."""

    __version__ = 1

    order_id = Identifier(required=True)
    approved_at = DateTime(required=True)


@supplychain.event(part_of="AgencyOrder")
class ArrivalRescheduled:
    """The agency moved the requested arrival date before dispatch."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_date = Date(required=True)
    new_date = Date(required=True)


@supplychain.event(part_of="AgencyOrder")
class OrderDispatched:
    """A logistics company loaded the order onto a driver's vehicle."""

    __version__ = 1

    order_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    driver_name = String(required=True)
    vehicle = String()
    dispatched_at = DateTime(required=True)


@supplychain.event(part_of="AgencyOrder")
class OrderDelivered:
    """The driver handed the order over to the agency."""

    __version__ = 1

    order_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    delivered_at = DateTime(required=True)
