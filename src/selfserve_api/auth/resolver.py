"""
selfserve_api.auth.resolver

Identity resolution: external subject id -> guest or employee principal.

Responsibilities:
- Apply the fixed lookup priority (guest first, then employee + role).
- Separate "not provisioned" (None) from infrastructure faults (LookupFailure).
- Bound each resolution with a timeout.
"""

from __future__ import annotations

import asyncio

from selfserve_api.auth.errors import LookupFailure
from selfserve_api.auth.models import UNKNOWN_ROLE, EmployeePrincipal, GuestPrincipal
from selfserve_api.auth.stores import PrincipalStore, RoleDirectory
from selfserve_api.observability.logging import get_logger

log = get_logger(__name__)


class IdentityResolver:
    """
    Pure read path. Performs at most three point lookups per call, strictly in
    order: guest, employee (only on guest miss), role (only on employee hit).

    A subject id present in both stores resolves to the guest. That ordering is
    long-standing observed behavior and callers rely on it.
    """

    def __init__(
        self,
        *,
        principals: PrincipalStore,
        roles: RoleDirectory,
        timeout_seconds: float | None = None,
    ) -> None:
        self._principals = principals
        self._roles = roles
        self._timeout = timeout_seconds

    async def resolve(self, subject_id: str) -> GuestPrincipal | EmployeePrincipal | None:
        try:
            principal = await asyncio.wait_for(self._lookup(subject_id), timeout=self._timeout)
        except TimeoutError as e:
            log.warning("lookup_failure", reason="timeout", timeout_seconds=self._timeout)
            raise LookupFailure("Identity lookup timed out") from e
        except LookupFailure as e:
            log.warning("lookup_failure", reason=str(e))
            raise

        if principal is None:
            log.info("principal_unlinked")
        else:
            log.info("principal_resolved", kind=principal.kind.value)
        return principal

    async def _lookup(self, subject_id: str) -> GuestPrincipal | EmployeePrincipal | None:
        guest = await self._principals.find_guest_by_subject(subject_id)
        if guest is not None:
            _require(guest.guest_id, guest.hotel_id)
            return GuestPrincipal(
                principal_id=guest.guest_id,
                hotel_id=guest.hotel_id,
                external_subject_id=subject_id,
            )

        employee = await self._principals.find_employee_by_subject(subject_id)
        if employee is None:
            return None
        _require(employee.employee_id, employee.hotel_id)

        role = await self._roles.find_role_by_id(employee.role_id) if employee.role_id else None
        return EmployeePrincipal(
            principal_id=employee.employee_id,
            hotel_id=employee.hotel_id,
            external_subject_id=subject_id,
            role_id=employee.role_id,
            role_name=role.name if role is not None else UNKNOWN_ROLE,
            permissions=role.permissions if role is not None else frozenset(),
        )


def _require(*values: str | None) -> None:
    # A principal row without its id or hotel cannot be scoped; treat as a data fault.
    if not all(values):
        raise LookupFailure("Malformed principal record")


# --- Module Notes -----------------------------------------------------------
# asyncio.CancelledError propagates untouched; every lookup here is a read.
