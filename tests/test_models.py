from __future__ import annotations

import pytest

from selfserve_api.auth.models import (
    NO_PRINCIPAL,
    AuthorizationContext,
    EmployeePrincipal,
    GuestPrincipal,
    PrincipalKind,
)


def test_empty_context_has_no_scope() -> None:
    ctx = AuthorizationContext(external_subject_id="ext-1")

    assert ctx.principal is NO_PRINCIPAL
    assert ctx.kind is PrincipalKind.none
    assert not ctx.resolved
    assert not ctx.is_linked
    assert ctx.hotel_id is None
    assert ctx.role is None


def test_context_requires_subject() -> None:
    with pytest.raises(ValueError):
        AuthorizationContext(external_subject_id="")


def test_link_populates_exactly_once() -> None:
    ctx = AuthorizationContext(external_subject_id="ext-1")
    emp = EmployeePrincipal(
        principal_id="e1", hotel_id="h1", external_subject_id="ext-1",
        role_id="r1", role_name="manager",
    )

    linked = ctx.link(emp)

    assert linked.is_employee and not linked.is_guest
    assert linked.hotel_id == "h1"
    assert linked.role == "manager"
    # The original value is untouched.
    assert ctx.principal is NO_PRINCIPAL
    with pytest.raises(RuntimeError):
        linked.link(emp)


def test_guest_boundary_contract() -> None:
    ctx = AuthorizationContext(external_subject_id="guest-1").link(
        GuestPrincipal(principal_id="g1", hotel_id="h1", external_subject_id="guest-1")
    )

    assert ctx.as_boundary() == {
        "principalKind": "GUEST",
        "principalId": "g1",
        "hotelId": "h1",
        "roleName": None,
    }
