"""
selfserve_api.auth.models

Auth domain models.

Responsibilities:
- Define the principal variants an external identity can resolve to.
- Define the per-request `AuthorizationContext` handed to route handlers.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar

UNKNOWN_ROLE = "unknown"


class PrincipalKind(enum.StrEnum):
    guest = "GUEST"
    employee = "EMPLOYEE"
    none = "NONE"


class AuthState(enum.StrEnum):
    # Progress of one request through authentication and the guard chain.
    unauthenticated = "UNAUTHENTICATED"
    authenticating = "AUTHENTICATING"
    linked = "LINKED"
    unlinked = "UNLINKED"
    allowed = "ALLOWED"
    denied = "DENIED"


@dataclass(frozen=True, slots=True)
class GuestPrincipal:
    principal_id: str
    hotel_id: str
    external_subject_id: str

    kind: ClassVar[PrincipalKind] = PrincipalKind.guest


@dataclass(frozen=True, slots=True)
class EmployeePrincipal:
    principal_id: str
    hotel_id: str
    external_subject_id: str
    role_id: str
    role_name: str
    # Role -> permission mapping is not populated yet; always empty.
    permissions: frozenset[str] = field(default_factory=frozenset)

    kind: ClassVar[PrincipalKind] = PrincipalKind.employee


@dataclass(frozen=True, slots=True)
class NoPrincipal:
    """
    Authenticated with the identity provider but not provisioned here.
    """

    kind: ClassVar[PrincipalKind] = PrincipalKind.none


NO_PRINCIPAL = NoPrincipal()

Principal = GuestPrincipal | EmployeePrincipal | NoPrincipal


@dataclass(frozen=True, slots=True)
class AuthorizationContext:
    """
    Request-local identity resolution result.

    Created empty once authentication succeeds, populated exactly once via
    `link`, read-only afterwards. Never persisted or shared between requests.
    """

    external_subject_id: str
    principal: Principal = NO_PRINCIPAL
    resolved: bool = False

    def __post_init__(self) -> None:
        if not self.external_subject_id:
            raise ValueError("external_subject_id must be non-empty")

    def link(self, principal: Principal) -> AuthorizationContext:
        if self.resolved:
            raise RuntimeError("AuthorizationContext is already resolved")
        return replace(self, principal=principal, resolved=True)

    @property
    def kind(self) -> PrincipalKind:
        return self.principal.kind

    @property
    def is_linked(self) -> bool:
        return not isinstance(self.principal, NoPrincipal)

    @property
    def is_guest(self) -> bool:
        return isinstance(self.principal, GuestPrincipal)

    @property
    def is_employee(self) -> bool:
        return isinstance(self.principal, EmployeePrincipal)

    @property
    def principal_id(self) -> str | None:
        if isinstance(self.principal, (GuestPrincipal, EmployeePrincipal)):
            return self.principal.principal_id
        return None

    @property
    def hotel_id(self) -> str | None:
        if isinstance(self.principal, (GuestPrincipal, EmployeePrincipal)):
            return self.principal.hotel_id
        return None

    @property
    def role(self) -> str | None:
        if isinstance(self.principal, EmployeePrincipal):
            return self.principal.role_name
        return None

    def as_boundary(self) -> dict[str, Any]:
        # Shape consumed by route handlers and returned by `/v1/me`.
        return {
            "principalKind": self.kind.value,
            "principalId": self.principal_id,
            "hotelId": self.hotel_id,
            "roleName": self.role,
        }


# --- Module Notes -----------------------------------------------------------
# Every guard matches on the principal type with isinstance checks; adding a
# principal variant means revisiting `auth.guards`.
