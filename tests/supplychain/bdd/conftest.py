"""Shared BDD fixtures and step definitions for the supply-chain lifecycle."""

from datetime import date, timedelta

import pytest
from pytest_bdd import given, parsers, then, when
from supplychain import workflows
from supplychain.errors import SupplyChainError


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalog():
    """Products registered by the scenario, keyed by name."""
    return {}


@pytest.fixture()
def roster():
    """Drivers registered by the scenario, keyed by name."""
    return {}


@pytest.fixture()
def state():
    return {"drafts": [], "order": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('the agency stocks "{name}" at {price:d}'))
def catalog_product(catalog, stocked, name, price):
    catalog[name] = stocked(name, price)


@given(parsers.parse('the logistics company has driver "{name}"'))
def roster_driver(roster, logistics_caller, name):
    roster[name] = workflows.register_driver(logistics_caller, name=name, vehicle="Truck 12")


@given(parsers.parse('the agency drafts {quantity:d} of "{name}"'))
def agency_drafts(state, catalog, agency_caller, quantity, name):
    state["drafts"].append(workflows.add_draft(agency_caller, catalog[name].id, quantity).id)


# ---------------------------------------------------------------------------
# Steps usable as Given or When
# ---------------------------------------------------------------------------
@given(parsers.parse("the agency promotes its drafts for arrival in {days:d} days"))
@when(parsers.parse("the agency promotes its drafts for arrival in {days:d} days"))
def promote(state, agency_caller, days):
    state["order"] = workflows.promote_to_order(
        agency_caller, state["drafts"], date.today() + timedelta(days=days)
    )


@given("the head office approves the order")
@when("the head office approves the order")
def approve(state, head_office):
    (state["order"],) = workflows.approve_orders(head_office, [state["order"].id])


@given(parsers.parse('logistics dispatches the order with "{name}"'))
@when(parsers.parse('logistics dispatches the order with "{name}"'))
def dispatch(state, roster, logistics_caller, name):
    workflows.assign_driver(logistics_caller, state["order"].id, roster[name].id)


@given("logistics completes the delivery")
@when("logistics completes the delivery")
def deliver(state, logistics_caller):
    workflows.complete_delivery(logistics_caller, state["order"].id)


@when("the agency tries to delete the order")
def try_delete(state, agency_caller):
    try:
        workflows.delete_orders(agency_caller, [state["order"].id])
    except SupplyChainError as exc:
        state["error"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the agency has no drafts left")
def no_drafts(agency_caller):
    assert workflows.list_drafts(agency_caller) == []


@then(parsers.parse('the order is "{status}" with total {total:d}'))
def order_is(state, head_office, status, total):
    order = workflows.get_order(head_office, state["order"].id)
    assert order.status == status
    assert order.total_amount == total


@then(parsers.parse('"{name}" is not available'))
def driver_busy(roster, logistics_caller, name):
    assert roster[name].id not in [d.id for d in workflows.list_available_drivers(logistics_caller)]


@then(parsers.parse('"{name}" is available'))
def driver_free(roster, logistics_caller, name):
    assert roster[name].id in [d.id for d in workflows.list_available_drivers(logistics_caller)]


@then(parsers.parse('the request fails with an invalid transition from "{status}"'))
def failed_transition(state, status):
    assert state["error"] is not None
    assert state["error"].kind == "invalid_transition"
    assert state["error"].current_state == status
