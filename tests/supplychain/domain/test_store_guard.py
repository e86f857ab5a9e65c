import threading

import pytest
from protean.exceptions import ExpectedVersionError
from supplychain.errors import ConflictError
from supplychain.guard import StoreGuard


@pytest.fixture()
def guard():
    return StoreGuard(timeout=0.05)


class TestStoreGuard:
    def test_stale_version_is_a_conflict(self, guard):
        with pytest.raises(ConflictError) as exc_info:
            with guard.hold("approve_orders"):
                raise ExpectedVersionError("Wrong expected version: 3 (Aggregate: AgencyOrder, Version: 4)")

        assert isinstance(exc_info.value.__cause__, ExpectedVersionError)

    def test_other_errors_pass_through(self, guard):
        with pytest.raises(KeyError):
            with guard.hold("approve_orders"):
                raise KeyError("order")

    def test_busy_gate_times_out_as_a_conflict(self, guard):
        held, release = threading.Event(), threading.Event()

        def holder():
            with guard.hold("assign_driver"):
                held.set()
                release.wait(timeout=5)

        thread = threading.Thread(target=holder)
        thread.start()
        held.wait(timeout=5)
        try:
            with pytest.raises(ConflictError):
                with guard.hold("complete_delivery"):
                    pass
        finally:
            release.set()
            thread.join(timeout=5)

    def test_gate_is_released_after_a_failure(self, guard):
        with pytest.raises(ConflictError):
            with guard.hold("approve_orders"):
                raise ExpectedVersionError("stale")

        outcome = []
        thread = threading.Thread(target=lambda: outcome.append(guard._lock.acquire(timeout=1)))
        thread.start()
        thread.join(timeout=5)
        assert outcome == [True]

    def test_same_thread_may_nest(self, guard):
        with guard.hold("outer"):
            with guard.hold("inner"):
                pass
