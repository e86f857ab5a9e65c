"""AgencyOrder aggregate — the confirmed, status-tracked unit of an order.

State Machine:
    (drafts) → PENDING_APPROVAL → READY_TO_SHIP → IN_TRANSIT → DELIVERED

Items, prices and the total are frozen when the order is placed; the catalog
is never consulted again. After placement only the status, the requested
arrival date (before dispatch) and the delivery assignment may change.
"""

import json
from datetime import UTC, date, datetime, timedelta
from enum import Enum
from uuid import uuid4

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import (
    Date,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from supplychain import settings
from supplychain.domain import supplychain
from supplychain.errors import InvalidTransitionError, NotFoundError
from supplychain.order.events import (
    ArrivalRescheduled,
    OrderApproved,
    OrderDelivered,
    OrderDispatched,
    OrderPlaced,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING_APPROVAL = "PendingApproval"
    READY_TO_SHIP = "ReadyToShip"
    IN_TRANSIT = "InTransit"
    DELIVERED = "Delivered"


# Pseudo-target used when reporting an illegal deletion
DELETED = "Deleted"

_VALID_TRANSITIONS = {
    OrderStatus.PENDING_APPROVAL: {OrderStatus.READY_TO_SHIP},
    OrderStatus.READY_TO_SHIP: {OrderStatus.IN_TRANSIT},
    OrderStatus.IN_TRANSIT: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
}

# Before dispatch the agency may still move the arrival date or withdraw the order
_PRE_DISPATCH_STATES = {
    OrderStatus.PENDING_APPROVAL,
    OrderStatus.READY_TO_SHIP,
}


def earliest_arrival(today=None) -> date:
    today = today or date.today()
    return today + timedelta(days=settings.MIN_LEAD_DAYS)


def _check_lead_time(arrival_date, today=None):
    if arrival_date is None:
        raise ValidationError({"arrival_date": ["Arrival date is required"]})
    minimum = earliest_arrival(today)
    if arrival_date < minimum:
        raise ValidationError(
            {
                "arrival_date": [
                    f"Arrival date must be on or after {minimum.isoformat()} "
                    f"({settings.MIN_LEAD_DAYS} days lead time)"
                ]
            }
        )


def _summarize(items_data):
    first = items_data[0]["product_name"]
    rest = len(items_data) - 1
    return f"{first} (+{rest})" if rest else first


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@supplychain.value_object(part_of="AgencyOrder")
class DeliveryAssignment:
    """The driver carrying an order, copied by value at dispatch time.

    Later edits to the driver's record do not change who carried the order.
    """

    driver_id = Identifier(required=True)
    logistic_id = Identifier(required=True)
    driver_name = String(required=True, max_length=100)
    driver_phone = String(max_length=30)
    vehicle = String(max_length=50)
    assigned_at = DateTime()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@supplychain.entity(part_of="AgencyOrder")
class OrderItem:
    """A product line frozen from a draft when the order was placed."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Integer(required=True, min_value=0)
    line_total = Integer(required=True, min_value=0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@supplychain.aggregate
class AgencyOrder:
    order_number = String(required=True, max_length=30)
    agency_id = Identifier(required=True)
    agency_name = String(max_length=255)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING_APPROVAL.value,
    )
    items = HasMany(OrderItem)
    product_summary = String(max_length=500)
    total_quantity = Integer(default=0)
    total_amount = Integer(default=0)
    arrival_date = Date(required=True)
    delivery = ValueObject(DeliveryAssignment)
    ordered_at = DateTime(required=True)
    approved_at = DateTime()
    dispatched_at = DateTime()
    delivered_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_match_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order needs at least one item"]})
        for item in self.items:
            if item.line_total != item.quantity * item.unit_price:
                raise ValidationError({"items": [f"Line total of {item.product_name} does not match its price"]})
        if self.total_amount != sum(item.line_total for item in self.items):
            raise ValidationError({"total_amount": ["Total amount must equal the sum of item totals"]})

    @invariant.post
    def shipped_orders_must_have_a_driver(self):
        if self.status in (OrderStatus.IN_TRANSIT.value, OrderStatus.DELIVERED.value) and not self.delivery:
            raise ValidationError({"delivery": ["An order on the road must have a driver"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, agency_id, agency_name, items_data, arrival_date, today=None):
        """Place a new order from frozen draft data.

        Args:
            agency_id: The agency the order belongs to.
            agency_name: Agency display name at placement time.
            items_data: List of dicts with product_id, product_name,
                        quantity, unit_price.
            arrival_date: Requested arrival date; at least the minimum lead
                          time after ``today``.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})
        _check_lead_time(arrival_date, today)

        now = datetime.now(UTC)
        frozen = []
        for data in items_data:
            if data["quantity"] < 1:
                raise ValidationError({"quantity": [f"Quantity of {data['product_name']} must be at least 1"]})
            frozen.append({**data, "line_total": data["quantity"] * data["unit_price"]})

        order = cls(
            order_number=f"AO-{now:%Y%m%d}-{uuid4().hex[:6].upper()}",
            agency_id=str(agency_id),
            agency_name=agency_name,
            status=OrderStatus.PENDING_APPROVAL.value,
            items=[OrderItem(**data) for data in frozen],
            product_summary=_summarize(frozen),
            total_quantity=sum(data["quantity"] for data in frozen),
            total_amount=sum(data["line_total"] for data in frozen),
            arrival_date=arrival_date,
            ordered_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                agency_id=str(agency_id),
                items=json.dumps(frozen),
                total_quantity=order.total_quantity,
                total_amount=order.total_amount,
                arrival_date=arrival_date,
                ordered_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(current.value, target_status.value)

    @property
    def is_pre_dispatch(self):
        return OrderStatus(self.status) in _PRE_DISPATCH_STATES

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def approve(self):
        """Head office approval: PENDING_APPROVAL → READY_TO_SHIP."""
        self._assert_can_transition(OrderStatus.READY_TO_SHIP)
        now = datetime.now(UTC)
        self.status = OrderStatus.READY_TO_SHIP.value
        self.approved_at = now
        self.updated_at = now

        self.raise_(OrderApproved(order_id=str(self.id), approved_at=now))

    def dispatch(self, driver):
        """Put the order on ``driver``'s vehicle: READY_TO_SHIP → IN_TRANSIT."""
        self._assert_can_transition(OrderStatus.IN_TRANSIT)
        now = datetime.now(UTC)
        self.delivery = DeliveryAssignment(
            driver_id=str(driver.id),
            logistic_id=str(driver.logistic_id),
            driver_name=driver.name,
            driver_phone=driver.phone,
            vehicle=driver.vehicle,
            assigned_at=now,
        )
        self.status = OrderStatus.IN_TRANSIT.value
        self.dispatched_at = now
        self.updated_at = now

        self.raise_(
            OrderDispatched(
                order_id=str(self.id),
                driver_id=str(driver.id),
                driver_name=driver.name,
                vehicle=driver.vehicle,
                dispatched_at=now,
            )
        )
        return self.delivery

    def complete_delivery(self):
        """Record the hand-over: IN_TRANSIT → DELIVERED."""
        self._assert_can_transition(OrderStatus.DELIVERED)
        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.delivered_at = now
        self.updated_at = now

        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                driver_id=str(self.delivery.driver_id),
                delivered_at=now,
            )
        )

    def reschedule_arrival(self, arrival_date, today=None):
        """Move the requested arrival date; only before dispatch."""
        if not self.is_pre_dispatch:
            raise InvalidTransitionError(
                self.status,
                self.status,
                detail=f"Arrival date is fixed once an order is {self.status}",
            )
        _check_lead_time(arrival_date, today)

        previous = self.arrival_date
        self.arrival_date = arrival_date
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ArrivalRescheduled(
                order_id=str(self.id),
                previous_date=previous,
                new_date=arrival_date,
            )
        )

    def assert_deletable(self):
        """Orders may be withdrawn only until a driver has taken them."""
        if not self.is_pre_dispatch:
            raise InvalidTransitionError(
                self.status,
                DELETED,
                detail=f"Order {self.order_number} is {self.status} and can no longer be deleted",
            )


@supplychain.repository(part_of=AgencyOrder)
class AgencyOrderRepository:
    def fetch(self, order_id) -> AgencyOrder:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError as exc:
            raise NotFoundError(f"Order {order_id} does not exist") from exc

    def for_agency(self, agency_id) -> list[AgencyOrder]:
        return self._dao.query.filter(agency_id=str(agency_id)).all().items

    def with_statuses(self, statuses) -> list[AgencyOrder]:
        return self._dao.query.filter(status__in=[s.value for s in statuses]).all().items

    def everything(self) -> list[AgencyOrder]:
        return self._dao.query.all().items

    def discard(self, order):
        self._dao.delete(order)
