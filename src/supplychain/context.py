"""Resolved caller identity passed into every supply-chain operation.

The auth gateway verifies the credential and hands the core a role plus the
tenant the caller acts for. Nothing here trusts tenant fields sent by a client.
"""

from dataclasses import dataclass
from enum import Enum

from supplychain.errors import PermissionDeniedError


class Role(Enum):
    AGENCY = "agency"
    HEAD_OFFICE = "head_office"
    LOGISTICS = "logistics"


@dataclass(frozen=True)
class Caller:
    role: Role
    tenant_id: str | None = None

    @classmethod
    def agency(cls, agency_id):
        return cls(role=Role.AGENCY, tenant_id=str(agency_id))

    @classmethod
    def head_office(cls):
        return cls(role=Role.HEAD_OFFICE)

    @classmethod
    def logistics(cls, logistic_id):
        return cls(role=Role.LOGISTICS, tenant_id=str(logistic_id))

    def require(self, *roles: Role) -> None:
        if self.role not in roles:
            allowed = ", ".join(r.value for r in roles)
            raise PermissionDeniedError(f"Role {self.role.value} may not do this (allowed: {allowed})")
        if self.role in (Role.AGENCY, Role.LOGISTICS) and not self.tenant_id:
            raise PermissionDeniedError(f"Role {self.role.value} requires a tenant id")
