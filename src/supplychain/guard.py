"""Store guard — the write gate every supply-chain mutation passes through.

A command's unit of work reads, checks and writes several aggregates (drafts
and the new order; the driver and the order being dispatched). The gate is
held for the whole unit of work, so a competing write re-reads committed state
and fails its own checks instead of overwriting a decision it never saw.

Version mismatches reported by the persistence layer (a stale copy written by
another process against a shared database) come out as ``ConflictError``.
"""

import threading
from contextlib import contextmanager

import structlog
from protean.exceptions import ExpectedVersionError

from supplychain import settings
from supplychain.errors import ConflictError

logger = structlog.get_logger(__name__)


class StoreGuard:
    def __init__(self, timeout: float):
        self.timeout = timeout
        self._lock = threading.RLock()

    @contextmanager
    def hold(self, operation: str, **context):
        if not self._lock.acquire(timeout=self.timeout):
            logger.warning("Store guard wait timed out", operation=operation, timeout=self.timeout, **context)
            raise ConflictError(f"Store busy: {operation} could not start within {self.timeout}s")
        try:
            yield
        except ExpectedVersionError as exc:
            logger.info("Stale write rejected", operation=operation, error=str(exc), **context)
            raise ConflictError(f"{operation} lost a concurrent update: {exc}") from exc
        finally:
            self._lock.release()


guard = StoreGuard(timeout=settings.GUARD_TIMEOUT)
