"""Head office approval — command and handler.

Approval is a batch action on the head office's order-check screen. Every
listed order must still be awaiting approval when the batch commits;
otherwise none of them is approved.
"""

from protean import handle
from protean.fields import Text
from protean.utils.globals import current_domain

from supplychain.domain import supplychain
from supplychain.draft.management import parse_ids
from supplychain.order.order import AgencyOrder


@supplychain.command(part_of="AgencyOrder")
class ApproveOrders:
    order_ids = Text(required=True)  # JSON: list of order ids


@supplychain.command_handler(part_of=AgencyOrder)
class ApproveOrdersHandler:
    @handle(ApproveOrders)
    def approve_orders(self, command):
        repo = current_domain.repository_for(AgencyOrder)
        orders = [repo.fetch(order_id) for order_id in parse_ids(command.order_ids, "order_ids")]

        for order in orders:
            order.approve()
        for order in orders:
            repo.add(order)

        return len(orders)
