"""Order withdrawal — command and handler.

Orders can be deleted in bulk by the agency that placed them or by the head
office, but only before dispatch. Once a driver has the goods the order stays
on record; there is no cascading cancellation.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from supplychain.domain import supplychain
from supplychain.draft.management import parse_ids
from supplychain.errors import NotFoundError
from supplychain.order.order import AgencyOrder

logger = structlog.get_logger(__name__)


@supplychain.command(part_of="AgencyOrder")
class WithdrawOrders:
    order_ids = Text(required=True)  # JSON: list of order ids
    agency_id = Identifier()  # Set when an agency withdraws its own orders


@supplychain.command_handler(part_of=AgencyOrder)
class WithdrawOrdersHandler:
    @handle(WithdrawOrders)
    def withdraw_orders(self, command):
        repo = current_domain.repository_for(AgencyOrder)
        orders = [repo.fetch(order_id) for order_id in parse_ids(command.order_ids, "order_ids")]

        for order in orders:
            if command.agency_id and str(order.agency_id) != str(command.agency_id):
                raise NotFoundError(f"Order {order.id} does not exist")
            order.assert_deletable()

        for order in orders:
            repo.discard(order)

        logger.info(
            "Orders withdrawn",
            order_numbers=[o.order_number for o in orders],
            by_agency=str(command.agency_id) if command.agency_id else None,
        )
        return len(orders)
