"""Order search — role-scoped, filterable, sortable order listings.

Every role's order screen is a view over the same AgencyOrder collection:

- an agency sees only its own orders;
- the head office sees every order;
- a logistics company sees orders ready to ship plus those its own drivers
  carried.

``search`` is a pure function: given rows and an ``OrderSearch`` it returns
a deterministically ordered subsequence. Rows missing the sort value go last
whichever way the list is sorted, and equal sort values fall back to
ascending order id.
"""

from datetime import date
from enum import Enum
from typing import Literal

from protean.utils.globals import current_domain
from pydantic import BaseModel, ConfigDict

from supplychain.context import Caller, Role
from supplychain.order.order import AgencyOrder, OrderStatus


class SortKey(Enum):
    ORDER_NUMBER = "order_number"
    ORDERED_ON = "ordered_on"
    ARRIVAL_DATE = "arrival_date"
    STATUS = "status"
    AGENCY_NAME = "agency_name"
    PRODUCT_SUMMARY = "product_summary"
    TOTAL_QUANTITY = "total_quantity"
    TOTAL_AMOUNT = "total_amount"
    DRIVER_NAME = "driver_name"


class OrderRow(BaseModel):
    """Flat, read-only listing row for one order."""

    model_config = ConfigDict(frozen=True)

    order_id: str
    order_number: str
    agency_id: str
    agency_name: str | None = None
    status: str
    product_summary: str | None = None
    total_quantity: int
    total_amount: int
    ordered_on: date
    arrival_date: date
    driver_name: str | None = None
    driver_phone: str | None = None
    vehicle: str | None = None

    @classmethod
    def from_order(cls, order: AgencyOrder) -> "OrderRow":
        delivery = order.delivery
        return cls(
            order_id=str(order.id),
            order_number=order.order_number,
            agency_id=str(order.agency_id),
            agency_name=order.agency_name,
            status=order.status,
            product_summary=order.product_summary,
            total_quantity=order.total_quantity,
            total_amount=order.total_amount,
            ordered_on=order.ordered_at.date(),
            arrival_date=order.arrival_date,
            driver_name=delivery.driver_name if delivery else None,
            driver_phone=delivery.driver_phone if delivery else None,
            vehicle=delivery.vehicle if delivery else None,
        )


class OrderSearch(BaseModel):
    """Filter set and ordering for an order listing. Unset filters match everything."""

    statuses: list[OrderStatus] = []
    ordered_from: date | None = None
    ordered_to: date | None = None
    arrival_from: date | None = None
    arrival_to: date | None = None
    product: str | None = None
    agency: str | None = None
    order_number: str | None = None
    driver: str | None = None
    quantity_min: int | None = None
    quantity_max: int | None = None
    amount_min: int | None = None
    amount_max: int | None = None
    sort_by: SortKey = SortKey.ORDERED_ON
    direction: Literal["asc", "desc"] = "desc"


def _contains(value, needle):
    if not needle:
        return True
    return needle.strip().casefold() in (value or "").casefold()


def _within(value, low, high):
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def matches(row: OrderRow, query: OrderSearch) -> bool:
    if query.statuses and row.status not in {s.value for s in query.statuses}:
        return False
    return (
        _within(row.ordered_on, query.ordered_from, query.ordered_to)
        and _within(row.arrival_date, query.arrival_from, query.arrival_to)
        and _within(row.total_quantity, query.quantity_min, query.quantity_max)
        and _within(row.total_amount, query.amount_min, query.amount_max)
        and _contains(row.product_summary, query.product)
        and _contains(row.agency_name, query.agency)
        and _contains(row.order_number, query.order_number)
        and _contains(row.driver_name, query.driver)
    )


def _sortable(value):
    return value.casefold() if isinstance(value, str) else value


def search(rows, query: OrderSearch) -> list[OrderRow]:
    field = query.sort_by.value
    found = sorted((row for row in rows if matches(row, query)), key=lambda row: row.order_id)

    present = [row for row in found if getattr(row, field) is not None]
    missing = [row for row in found if getattr(row, field) is None]

    # list.sort is stable in both directions, so ties keep ascending order id
    present.sort(key=lambda row: _sortable(getattr(row, field)), reverse=query.direction == "desc")
    return present + missing


def visible_orders(caller: Caller) -> list[AgencyOrder]:
    repo = current_domain.repository_for(AgencyOrder)

    if caller.role == Role.AGENCY:
        return repo.for_agency(caller.tenant_id)
    if caller.role == Role.HEAD_OFFICE:
        return repo.everything()

    ready = repo.with_statuses([OrderStatus.READY_TO_SHIP])
    carried = [
        order
        for order in repo.with_statuses([OrderStatus.IN_TRANSIT, OrderStatus.DELIVERED])
        if order.delivery and str(order.delivery.logistic_id) == str(caller.tenant_id)
    ]
    return ready + carried


def is_visible(caller: Caller, order: AgencyOrder) -> bool:
    if caller.role == Role.HEAD_OFFICE:
        return True
    if caller.role == Role.AGENCY:
        return str(order.agency_id) == str(caller.tenant_id)
    if order.status == OrderStatus.READY_TO_SHIP.value:
        return True
    return bool(order.delivery) and str(order.delivery.logistic_id) == str(caller.tenant_id)
