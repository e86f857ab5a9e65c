from datetime import date, timedelta

import pytest
from protean.integrations.pytest import DomainFixture
from protean.utils.globals import current_domain


@pytest.fixture(scope="session")
def supplychain_bed():
    from supplychain.domain import supplychain

    bed = DomainFixture(supplychain)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(supplychain_bed):
    with supplychain_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------
@pytest.fixture()
def head_office():
    from supplychain.context import Caller

    return Caller.head_office()


@pytest.fixture()
def agency(head_office):
    from supplychain import workflows

    return workflows.register_agency(head_office, name="Harbor Street Agency", code="AG-001")


@pytest.fixture()
def other_agency(head_office):
    from supplychain import workflows

    return workflows.register_agency(head_office, name="Hillside Agency", code="AG-002")


@pytest.fixture()
def agency_caller(agency):
    from supplychain.context import Caller

    return Caller.agency(agency.id)


@pytest.fixture()
def other_agency_caller(other_agency):
    from supplychain.context import Caller

    return Caller.agency(other_agency.id)


@pytest.fixture()
def logistics_caller():
    from supplychain.context import Caller

    return Caller.logistics("logi-001")


@pytest.fixture()
def rival_logistics_caller():
    from supplychain.context import Caller

    return Caller.logistics("logi-002")


@pytest.fixture()
def stocked(head_office, agency, other_agency):
    """Register a product and put it in both agencies' assortments."""
    from supplychain import workflows

    def _stock(name, unit_price, **details):
        product = workflows.register_product(head_office, name=name, unit_price=unit_price, **details)
        for shop in (agency, other_agency):
            workflows.assign_assortment(head_office, shop.id, [product.id])
        return product

    return _stock


@pytest.fixture()
def rice(stocked):
    return stocked("Rice 10kg", 1200, code="P-RICE", category="Grain")


@pytest.fixture()
def oil(stocked):
    return stocked("Canola Oil 1L", 450, code="P-OIL", category="Oil")


@pytest.fixture()
def driver(logistics_caller):
    from supplychain import workflows

    return workflows.register_driver(logistics_caller, name="Kim Driver", phone="010-1111-2222", vehicle="Truck 12")


@pytest.fixture()
def second_driver(logistics_caller):
    from supplychain import workflows

    return workflows.register_driver(logistics_caller, name="Lee Driver", phone="010-3333-4444", vehicle="Van 7")


@pytest.fixture()
def reserve_date():
    return date.today() + timedelta(days=5)


@pytest.fixture()
def place_order(agency_caller, rice, oil, reserve_date):
    """Promote a fresh pair of drafts into an order for the agency caller."""
    from supplychain import workflows

    def _place(caller=None, quantity=2):
        caller = caller or agency_caller
        first = workflows.add_draft(caller, rice.id, quantity)
        second = workflows.add_draft(caller, oil.id, 1)
        return workflows.promote_to_order(caller, [first.id, second.id], reserve_date)

    return _place


@pytest.fixture()
def approved_order(place_order, head_office):
    from supplychain import workflows

    order = place_order()
    (approved,) = workflows.approve_orders(head_office, [order.id])
    return approved

