"""Driver roster — command and handler.

Drivers are managed by each logistics company; this registers them so they
can be picked on the dispatch screen.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from supplychain.domain import supplychain
from supplychain.fulfillment.driver import Driver


@supplychain.command(part_of="Driver")
class RegisterDriver:
    driver_id = Identifier()
    logistic_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    phone = String(max_length=30)
    vehicle = String(max_length=50)


@supplychain.command_handler(part_of=Driver)
class RegisterDriverHandler:
    @handle(RegisterDriver)
    def register_driver(self, command):
        values = dict(
            logistic_id=command.logistic_id,
            name=command.name,
            phone=command.phone,
            vehicle=command.vehicle,
            delivering=False,
        )
        if command.driver_id:
            values["id"] = str(command.driver_id)
        driver = Driver(**values)
        current_domain.repository_for(Driver).add(driver)
        return str(driver.id)
