"""Order dispatch — command and handler.

Booking the driver and moving the order in transit happen in one unit of
work. If the driver is already out, or the order is not ready to ship,
neither aggregate changes.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from supplychain.domain import supplychain
from supplychain.fulfillment.driver import Driver
from supplychain.order.order import AgencyOrder

logger = structlog.get_logger(__name__)


@supplychain.command(part_of="AgencyOrder")
class AssignDriver:
    logistic_id = Identifier(required=True)
    order_id = Identifier(required=True)
    driver_id = Identifier(required=True)


@supplychain.command_handler(part_of=AgencyOrder)
class AssignDriverHandler:
    @handle(AssignDriver)
    def assign_driver(self, command):
        order_repo = current_domain.repository_for(AgencyOrder)
        driver_repo = current_domain.repository_for(Driver)

        order = order_repo.fetch(command.order_id)
        driver = driver_repo.fetch(command.driver_id, logistic_id=command.logistic_id)

        # The order status is checked before the driver is booked
        order.dispatch(driver)
        driver.claim(order.id)

        driver_repo.add(driver)
        order_repo.add(order)

        logger.info(
            "Order dispatched",
            order_id=str(order.id),
            order_number=order.order_number,
            driver_id=str(driver.id),
            logistic_id=str(command.logistic_id),
        )
        return str(order.id)
