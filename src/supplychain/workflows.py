"""Role-scoped supply-chain operations.

This is the surface the HTTP layer (and any other client) calls. Each write
checks the caller's role, turns the caller's tenant into the command's
owner field, and processes the command while holding the store guard, then
reads the result back before the guard is released.
"""

import json
from datetime import date, timedelta

from protean.utils.globals import current_domain

from supplychain import settings
from supplychain.catalog.catalog import Agency, Product
from supplychain.catalog.registration import ChangeAssortment, RegisterAgency, RegisterProduct
from supplychain.context import Caller, Role
from supplychain.draft.draft import ReadyOrder
from supplychain.draft.management import AddDraft, AdjustDraftQuantity, DiscardDrafts
from supplychain.errors import NotFoundError
from supplychain.fulfillment.delivery import CompleteDelivery
from supplychain.fulfillment.dispatch import AssignDriver
from supplychain.fulfillment.driver import Driver
from supplychain.fulfillment.roster import RegisterDriver
from supplychain.guard import guard
from supplychain.order.approval import ApproveOrders
from supplychain.order.order import AgencyOrder, DeliveryAssignment
from supplychain.order.promotion import PromoteDrafts
from supplychain.order.removal import WithdrawOrders
from supplychain.order.scheduling import RescheduleArrival
from supplychain.projections.order_search import (
    OrderRow,
    OrderSearch,
    is_visible,
    search,
    visible_orders,
)


def _process(command):
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Draft store
# ---------------------------------------------------------------------------
def add_draft(caller: Caller, product_id, quantity: int) -> ReadyOrder:
    caller.require(Role.AGENCY)
    with guard.hold("add_draft", agency_id=caller.tenant_id):
        draft_id = _process(AddDraft(agency_id=caller.tenant_id, product_id=product_id, quantity=quantity))
        return current_domain.repository_for(ReadyOrder).get(draft_id)


def adjust_quantity(caller: Caller, draft_id, delta: int) -> ReadyOrder:
    caller.require(Role.AGENCY)
    with guard.hold("adjust_quantity", agency_id=caller.tenant_id, draft_id=str(draft_id)):
        _process(AdjustDraftQuantity(agency_id=caller.tenant_id, draft_id=draft_id, delta=delta))
        return current_domain.repository_for(ReadyOrder).get(str(draft_id))


def list_drafts(caller: Caller) -> list[ReadyOrder]:
    caller.require(Role.AGENCY)
    return current_domain.repository_for(ReadyOrder).for_agency(caller.tenant_id)


def delete_drafts(caller: Caller, draft_ids) -> int:
    caller.require(Role.AGENCY)
    with guard.hold("delete_drafts", agency_id=caller.tenant_id):
        return _process(DiscardDrafts(agency_id=caller.tenant_id, draft_ids=json.dumps([str(i) for i in draft_ids])))


def promote_to_order(caller: Caller, draft_ids, reserve_date: date | None = None) -> AgencyOrder:
    caller.require(Role.AGENCY)
    if reserve_date is None:
        reserve_date = date.today() + timedelta(days=settings.DEFAULT_LEAD_DAYS)
    with guard.hold("promote_to_order", agency_id=caller.tenant_id):
        order_id = _process(
            PromoteDrafts(
                agency_id=caller.tenant_id,
                draft_ids=json.dumps([str(i) for i in draft_ids]),
                arrival_date=reserve_date,
            )
        )
        return current_domain.repository_for(AgencyOrder).get(order_id)


# ---------------------------------------------------------------------------
# Order lifecycle
# ---------------------------------------------------------------------------
def get_order(caller: Caller, order_id) -> AgencyOrder:
    order = current_domain.repository_for(AgencyOrder).fetch(order_id)
    if not is_visible(caller, order):
        raise NotFoundError(f"Order {order_id} does not exist")
    return order


def search_orders(caller: Caller, query: OrderSearch | None = None) -> list[OrderRow]:
    rows = [OrderRow.from_order(order) for order in visible_orders(caller)]
    return search(rows, query or OrderSearch())


def approve_orders(caller: Caller, order_ids) -> list[AgencyOrder]:
    caller.require(Role.HEAD_OFFICE)
    ids = [str(i) for i in order_ids]
    with guard.hold("approve_orders", order_count=len(ids)):
        _process(ApproveOrders(order_ids=json.dumps(ids)))
        repo = current_domain.repository_for(AgencyOrder)
        return [repo.get(order_id) for order_id in ids]


def reschedule_arrival(caller: Caller, order_id, arrival_date: date) -> AgencyOrder:
    caller.require(Role.AGENCY)
    with guard.hold("reschedule_arrival", order_id=str(order_id)):
        _process(RescheduleArrival(agency_id=caller.tenant_id, order_id=order_id, arrival_date=arrival_date))
        return current_domain.repository_for(AgencyOrder).get(str(order_id))


def delete_orders(caller: Caller, order_ids) -> int:
    caller.require(Role.AGENCY, Role.HEAD_OFFICE)
    agency_id = caller.tenant_id if caller.role == Role.AGENCY else None
    with guard.hold("delete_orders", agency_id=agency_id):
        return _process(WithdrawOrders(order_ids=json.dumps([str(i) for i in order_ids]), agency_id=agency_id))


# ---------------------------------------------------------------------------
# Fulfillment
# ---------------------------------------------------------------------------
def list_available_drivers(caller: Caller) -> list[Driver]:
    caller.require(Role.LOGISTICS)
    return current_domain.repository_for(Driver).available_for(caller.tenant_id)


def assign_driver(caller: Caller, order_id, driver_id) -> DeliveryAssignment:
    caller.require(Role.LOGISTICS)
    with guard.hold("assign_driver", order_id=str(order_id), driver_id=str(driver_id)):
        _process(AssignDriver(logistic_id=caller.tenant_id, order_id=order_id, driver_id=driver_id))
        return current_domain.repository_for(AgencyOrder).get(str(order_id)).delivery


def complete_delivery(caller: Caller, order_id) -> None:
    caller.require(Role.LOGISTICS)
    with guard.hold("complete_delivery", order_id=str(order_id)):
        _process(CompleteDelivery(logistic_id=caller.tenant_id, order_id=order_id))


def register_driver(caller: Caller, name: str, phone: str | None = None, vehicle: str | None = None, driver_id=None) -> Driver:
    caller.require(Role.LOGISTICS)
    driver_id = _process(
        RegisterDriver(driver_id=driver_id, logistic_id=caller.tenant_id, name=name, phone=phone, vehicle=vehicle)
    )
    return current_domain.repository_for(Driver).get(driver_id)


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------
def register_product(caller: Caller, name: str, unit_price: int, **details) -> Product:
    caller.require(Role.HEAD_OFFICE)
    product_id = _process(RegisterProduct(name=name, unit_price=unit_price, **details))
    return current_domain.repository_for(Product).get(product_id)


def register_agency(caller: Caller, name: str, **details) -> Agency:
    caller.require(Role.HEAD_OFFICE)
    agency_id = _process(RegisterAgency(name=name, **details))
    return current_domain.repository_for(Agency).get(agency_id)


def assign_assortment(caller: Caller, agency_id, product_ids) -> Agency:
    caller.require(Role.HEAD_OFFICE)
    with guard.hold("assign_assortment", agency_id=str(agency_id)):
        _process(ChangeAssortment(agency_id=agency_id, product_ids=json.dumps([str(i) for i in product_ids])))
        return current_domain.repository_for(Agency).get(str(agency_id))


def withdraw_assortment(caller: Caller, agency_id, product_ids) -> Agency:
    caller.require(Role.HEAD_OFFICE)
    with guard.hold("withdraw_assortment", agency_id=str(agency_id)):
        _process(
            ChangeAssortment(agency_id=agency_id, product_ids=json.dumps([str(i) for i in product_ids]), withdraw=True)
        )
        return current_domain.repository_for(Agency).get(str(agency_id))


def list_assortment(caller: Caller) -> list[Product]:
    """Active products the calling agency may put in its draft list."""
    caller.require(Role.AGENCY)
    agency = current_domain.repository_for(Agency).named(caller.tenant_id)
    products = current_domain.repository_for(Product)
    carried = [products.get(str(item.product_id)) for item in agency.assortment]
    return sorted((p for p in carried if p.active), key=lambda p: (p.name, str(p.id)))
