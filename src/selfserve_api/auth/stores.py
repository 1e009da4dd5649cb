"""
selfserve_api.auth.stores

Read-only data-access contracts consumed by the identity resolver.

Responsibilities:
- Describe the Principal Store and Role Directory as protocols.
- Define the plain records they return.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class GuestRecord:
    guest_id: str
    hotel_id: str


@dataclass(frozen=True, slots=True)
class EmployeeRecord:
    employee_id: str
    hotel_id: str
    role_id: str


@dataclass(frozen=True, slots=True)
class RoleRecord:
    role_id: str
    name: str
    description: str | None = None
    hotel_id: str | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)


class PrincipalStore(Protocol):
    async def find_guest_by_subject(self, subject_id: str) -> GuestRecord | None: ...

    async def find_employee_by_subject(self, subject_id: str) -> EmployeeRecord | None: ...


class RoleDirectory(Protocol):
    async def find_role_by_id(self, role_id: str) -> RoleRecord | None: ...


# --- Module Notes -----------------------------------------------------------
# Implementations must raise `auth.errors.LookupFailure` for infrastructure
# faults and return None for "not found". See `db.repositories.principals`.
