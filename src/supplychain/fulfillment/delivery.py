"""Delivery completion — command and handler.

Closing the order and freeing its driver commit together, so a driver is
never left marked as delivering for an order that already arrived.
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
class CompleteDelivery:
    logistic_id = Identifier(required=True)
    order_id = Identifier(required=True)


@supplychain.command_handler(part_of=AgencyOrder)
class CompleteDeliveryHandler:
    @handle(CompleteDelivery)
    def complete_delivery(self, command):
        order_repo = current_domain.repository_for(AgencyOrder)
        driver_repo = current_domain.repository_for(Driver)

        order = order_repo.fetch(command.order_id)
        order.complete_delivery()

        driver = driver_repo.fetch(order.delivery.driver_id, logistic_id=command.logistic_id)
        driver.release(order.id)

        order_repo.add(order)
        driver_repo.add(driver)

        logger.info(
            "Order delivered",
            order_id=str(order.id),
            order_number=order.order_number,
            driver_id=str(driver.id),
        )
        return str(order.id)
