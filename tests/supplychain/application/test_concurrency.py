"""Racing writers against the store guard.

Each worker pushes its own domain context; the in-memory store underneath is
shared, as a database would be.
"""

import threading

import pytest
from protean.utils.globals import current_domain
from supplychain import workflows
from supplychain.domain import supplychain
from supplychain.errors import ConflictError, InvalidTransitionError
from supplychain.fulfillment.driver import Driver
from supplychain.order.order import AgencyOrder, OrderStatus

pytestmark = pytest.mark.concurrency


def _race(*calls):
    """Run every call on its own thread, released together; return outcomes in call order."""
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def worker(index, call):
        with supplychain.domain_context():
            barrier.wait()
            try:
                outcomes[index] = ("ok", call())
            except Exception as exc:  # noqa: BLE001
                outcomes[index] = ("error", exc)

    threads = [threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    return outcomes


def _errors(outcomes):
    return [value for kind, value in outcomes if kind == "error"]


class TestDriverRace:
    def test_one_driver_two_orders(self, place_order, approved_order, head_office, logistics_caller, driver):
        other = place_order()
        workflows.approve_orders(head_office, [other.id])

        outcomes = _race(
            lambda: workflows.assign_driver(logistics_caller, approved_order.id, driver.id),
            lambda: workflows.assign_driver(logistics_caller, other.id, driver.id),
        )

        assert [kind for kind, _ in outcomes].count("ok") == 1
        (error,) = _errors(outcomes)
        assert isinstance(error, ConflictError)

        statuses = sorted(
            current_domain.repository_for(AgencyOrder).get(order_id).status
            for order_id in (approved_order.id, other.id)
        )
        assert statuses == [OrderStatus.IN_TRANSIT.value, OrderStatus.READY_TO_SHIP.value]

        stored = current_domain.repository_for(Driver).get(driver.id)
        assert stored.delivering is True
        assert stored.current_order_id in (approved_order.id, other.id)

    def test_two_drivers_one_order(self, approved_order, logistics_caller, driver, second_driver):
        outcomes = _race(
            lambda: workflows.assign_driver(logistics_caller, approved_order.id, driver.id),
            lambda: workflows.assign_driver(logistics_caller, approved_order.id, second_driver.id),
        )

        (error,) = _errors(outcomes)
        assert isinstance(error, InvalidTransitionError)
        assert error.current_state == "InTransit"

        busy = [d for d in (driver, second_driver) if current_domain.repository_for(Driver).get(d.id).delivering]
        assert len(busy) == 1


class TestApprovalRace:
    def test_same_order_approved_twice(self, place_order, head_office):
        order = place_order()

        outcomes = _race(
            lambda: workflows.approve_orders(head_office, [order.id]),
            lambda: workflows.approve_orders(head_office, [order.id]),
        )

        (error,) = _errors(outcomes)
        assert isinstance(error, InvalidTransitionError)
        assert current_domain.repository_for(AgencyOrder).get(order.id).status == OrderStatus.READY_TO_SHIP.value


class TestPromotionRace:
    def test_same_drafts_promoted_twice(self, agency_caller, rice, oil, reserve_date):
        ids = [workflows.add_draft(agency_caller, rice.id, 1).id, workflows.add_draft(agency_caller, oil.id, 1).id]

        outcomes = _race(
            lambda: workflows.promote_to_order(agency_caller, ids, reserve_date),
            lambda: workflows.promote_to_order(agency_caller, ids, reserve_date),
        )

        (error,) = _errors(outcomes)
        assert isinstance(error, ConflictError)
        assert len(current_domain.repository_for(AgencyOrder).everything()) == 1

    def test_quantity_edit_racing_promotion(self, agency_caller, rice, reserve_date):
        draft = workflows.add_draft(agency_caller, rice.id, 1)

        outcomes = _race(
            lambda: workflows.promote_to_order(agency_caller, [draft.id], reserve_date),
            lambda: workflows.adjust_quantity(agency_caller, draft.id, 5),
        )

        (order_id,) = [o.id for o in current_domain.repository_for(AgencyOrder).everything()]
        order = current_domain.repository_for(AgencyOrder).get(order_id)
        if outcomes[1][0] == "ok":
            # The edit committed first and the order picked it up
            assert order.total_quantity == 6
        else:
            assert isinstance(outcomes[1][1], ConflictError)
            assert order.total_quantity == 1
