"""Driver aggregate — the one resource that must never be double-booked.

A driver belongs to a logistics company. While ``delivering`` is set the
driver carries exactly ``current_order_id`` and cannot be dispatched again;
the flag is raised by dispatch and lowered by delivery completion, each in
the same unit of work as the order's own transition.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, String

from supplychain.domain import supplychain
from supplychain.errors import ConflictError, NotFoundError
from supplychain.fulfillment.events import DriverAssigned, DriverReleased


@supplychain.aggregate
class Driver:
    logistic_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    phone = String(max_length=30)
    vehicle = String(max_length=50)
    delivering = Boolean(default=False)
    current_order_id = Identifier()

    def claim(self, order_id):
        """Book the driver for ``order_id``; a busy driver is a conflict."""
        if self.delivering:
            raise ConflictError(
                f"Driver {self.name} is already delivering order {self.current_order_id}",
                current_state="Delivering",
            )
        now = datetime.now(UTC)
        self.delivering = True
        self.current_order_id = str(order_id)

        self.raise_(DriverAssigned(driver_id=str(self.id), order_id=str(order_id), assigned_at=now))

    def release(self, order_id):
        """Free the driver at the end of the delivery of ``order_id``."""
        if not self.delivering or str(self.current_order_id) != str(order_id):
            raise ConflictError(
                f"Driver {self.name} is not carrying order {order_id}",
                current_state="Delivering" if self.delivering else "Available",
            )
        self.delivering = False
        self.current_order_id = None

        self.raise_(DriverReleased(driver_id=str(self.id), order_id=str(order_id), released_at=datetime.now(UTC)))


@supplychain.repository(part_of=Driver)
class DriverRepository:
    def fetch(self, driver_id, logistic_id=None) -> Driver:
        """Load a driver, scoped to ``logistic_id`` when one is given."""
        try:
            driver = self.get(str(driver_id))
        except ObjectNotFoundError as exc:
            raise NotFoundError(f"Driver {driver_id} does not exist") from exc
        if logistic_id is not None and str(driver.logistic_id) != str(logistic_id):
            raise NotFoundError(f"Driver {driver_id} does not exist")
        return driver

    def available_for(self, logistic_id) -> list[Driver]:
        drivers = self._dao.query.filter(logistic_id=str(logistic_id), delivering=False).all().items
        return sorted(drivers, key=lambda d: (d.name, str(d.id)))
