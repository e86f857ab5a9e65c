"""Arrival rescheduling — command and handler."""

from protean import handle
from protean.fields import Date, Identifier
from protean.utils.globals import current_domain

from supplychain.domain import supplychain
from supplychain.errors import NotFoundError
from supplychain.order.order import AgencyOrder


@supplychain.command(part_of="AgencyOrder")
class RescheduleArrival:
    agency_id = Identifier(required=True)
    order_id = Identifier(required=True)
    arrival_date = Date(required=True)


@supplychain.command_handler(part_of=AgencyOrder)
class RescheduleArrivalHandler:
    @handle(RescheduleArrival)
    def reschedule_arrival(self, command):
        repo = current_domain.repository_for(AgencyOrder)
        order = repo.fetch(command.order_id)
        if str(order.agency_id) != str(command.agency_id):
            raise NotFoundError(f"Order {command.order_id} does not exist")

        order.reschedule_arrival(command.arrival_date)
        repo.add(order)
