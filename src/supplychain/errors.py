"""Typed failures surfaced by supply-chain operations.

Malformed input is reported with Protean's own ``ValidationError``. The
remaining kinds below let a caller decide whether to refresh, retry or
report: each carries the state it observed at the moment it failed.
"""

from protean.exceptions import ValidationError

__all__ = [
    "ConflictError",
    "InvalidTransitionError",
    "NotFoundError",
    "PermissionDeniedError",
    "SupplyChainError",
    "ValidationError",
]


class SupplyChainError(Exception):
    kind = "error"

    def __init__(self, detail, current_state=None):
        super().__init__(detail)
        self.detail = detail
        self.current_state = current_state

    def to_dict(self):
        payload = {"kind": self.kind, "detail": self.detail}
        if self.current_state is not None:
            payload["current_state"] = self.current_state
        return payload


class NotFoundError(SupplyChainError):
    """The referenced object does not exist or lies outside the caller's tenant."""

    kind = "not_found"


class InvalidTransitionError(SupplyChainError):
    """A status change that the order lifecycle does not allow."""

    kind = "invalid_transition"

    def __init__(self, current, requested, detail=None):
        super().__init__(
            detail or f"Cannot move order from {current} to {requested}",
            current_state=current,
        )
        self.current = current
        self.requested = requested

    def to_dict(self):
        return {**super().to_dict(), "requested_state": self.requested}


class ConflictError(SupplyChainError):
    """A concurrent mutation won the race; re-read and retry if still wanted."""

    kind = "conflict"


class PermissionDeniedError(SupplyChainError):
    """The caller's role or tenant may not perform this write."""

    kind = "permission_denied"
