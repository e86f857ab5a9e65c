import pytest
from supplychain.errors import ConflictError
from supplychain.fulfillment.driver import Driver
from supplychain.fulfillment.events import DriverAssigned, DriverReleased


@pytest.fixture()
def driver():
    return Driver(logistic_id="logi-1", name="Kim Driver", vehicle="Truck 12")


class TestClaim:
    def test_free_driver_is_booked(self, driver):
        driver.claim("order-1")
        assert driver.delivering is True
        assert driver.current_order_id == "order-1"
        assert isinstance(driver._events[-1], DriverAssigned)

    def test_busy_driver_is_a_conflict(self, driver):
        driver.claim("order-1")
        with pytest.raises(ConflictError) as exc_info:
            driver.claim("order-2")
        assert exc_info.value.current_state == "Delivering"
        assert driver.current_order_id == "order-1"


class TestRelease:
    def test_release_frees_driver(self, driver):
        driver.claim("order-1")
        driver.release("order-1")
        assert driver.delivering is False
        assert driver.current_order_id is None
        assert isinstance(driver._events[-1], DriverReleased)

    def test_release_for_another_order_is_a_conflict(self, driver):
        driver.claim("order-1")
        with pytest.raises(ConflictError):
            driver.release("order-2")
        assert driver.delivering is True

    def test_release_of_free_driver_is_a_conflict(self, driver):
        with pytest.raises(ConflictError) as exc_info:
            driver.release("order-1")
        assert exc_info.value.current_state == "Available"
