"""Domain events for the Driver aggregate."""

from protean.fields import DateTime, Identifier

from supplychain.domain import supplychain


@supplychain.event(part_of="Driver")
class DriverAssigned:
    """A free driver took on an order."""

    __version__ = 1

    driver_id = Identifier(required=True)
    order_id = Identifier(required=True)
    assigned_at = DateTime(required=True)


@supplychain.event(part_of="Driver")
class DriverReleased:
    """A driver finished a delivery and is free again."""

    __version__ = 1

    driver_id = Identifier(required=True)
    order_id = Identifier(required=True)
    released_at = DateTime(required=True)
