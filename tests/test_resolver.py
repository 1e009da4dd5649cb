"""
tests.test_resolver

Identity resolution: priority, unlinked identities, missing roles, failures.
"""

from __future__ import annotations

import asyncio

import pytest

from selfserve_api.auth.errors import LookupFailure
from selfserve_api.auth.models import EmployeePrincipal, GuestPrincipal, PrincipalKind
from selfserve_api.auth.resolver import IdentityResolver
from selfserve_api.auth.stores import EmployeeRecord, GuestRecord


@pytest.mark.asyncio
async def test_guest_subject_resolves_to_guest(principal_store, role_directory) -> None:
    resolver = IdentityResolver(principals=principal_store, roles=role_directory)

    principal = await resolver.resolve("guest-1")

    assert principal == GuestPrincipal(
        principal_id="g1", hotel_id="h1", external_subject_id="guest-1"
    )
    assert principal.kind is PrincipalKind.guest
    # Employee store is never consulted after a guest hit.
    assert principal_store.calls == ["guest"]
    assert role_directory.calls == []


@pytest.mark.asyncio
async def test_employee_subject_resolves_with_role_name(principal_store, role_directory) -> None:
    resolver = IdentityResolver(principals=principal_store, roles=role_directory)

    principal = await resolver.resolve("ext-1")

    assert isinstance(principal, EmployeePrincipal)
    assert principal.principal_id == "e1"
    assert principal.hotel_id == "h1"
    assert principal.role_id == "r1"
    assert principal.role_name == "manager"
    assert principal.permissions == frozenset()
    assert principal_store.calls == ["guest", "employee"]
    assert role_directory.calls == ["r1"]


@pytest.mark.asyncio
async def test_subject_in_both_stores_resolves_to_guest(principal_store, role_directory) -> None:
    principal_store.guests["ext-1"] = GuestRecord(guest_id="g-dup", hotel_id="h7")
    resolver = IdentityResolver(principals=principal_store, roles=role_directory)

    for _ in range(3):
        principal = await resolver.resolve("ext-1")
        assert isinstance(principal, GuestPrincipal)
        assert principal.principal_id == "g-dup"


@pytest.mark.asyncio
async def test_unknown_subject_resolves_to_none(principal_store, role_directory) -> None:
    resolver = IdentityResolver(principals=principal_store, roles=role_directory)

    assert await resolver.resolve("nobody") is None
    assert principal_store.calls == ["guest", "employee"]
    assert role_directory.calls == []


@pytest.mark.asyncio
async def test_missing_role_reports_unknown(principal_store, role_directory) -> None:
    resolver = IdentityResolver(principals=principal_store, roles=role_directory)

    principal = await resolver.resolve("ext-orphan")

    assert isinstance(principal, EmployeePrincipal)
    assert principal.role_name == "unknown"


@pytest.mark.asyncio
async def test_store_fault_surfaces_as_lookup_failure(principal_store, role_directory) -> None:
    principal_store.fail = True
    resolver = IdentityResolver(principals=principal_store, roles=role_directory)

    with pytest.raises(LookupFailure):
        await resolver.resolve("guest-1")


@pytest.mark.asyncio
async def test_malformed_row_is_lookup_failure(principal_store, role_directory) -> None:
    principal_store.employees["ext-bad"] = EmployeeRecord(
        employee_id="e-bad", hotel_id="", role_id="r1"
    )
    resolver = IdentityResolver(principals=principal_store, roles=role_directory)

    with pytest.raises(LookupFailure):
        await resolver.resolve("ext-bad")


class _SlowStore:
    async def find_guest_by_subject(self, subject_id: str) -> GuestRecord | None:
        await asyncio.sleep(1)
        return None

    async def find_employee_by_subject(self, subject_id: str) -> EmployeeRecord | None:
        return None


@pytest.mark.asyncio
async def test_timeout_is_lookup_failure_not_not_found(role_directory) -> None:
    resolver = IdentityResolver(principals=_SlowStore(), roles=role_directory, timeout_seconds=0.01)

    with pytest.raises(LookupFailure) as exc_info:
        await resolver.resolve("guest-1")
    assert exc_info.value.retryable is True


class _BlockedStore:
    def __init__(self) -> None:
        self.entered = asyncio.Event()
        self.calls: list[str] = []

    async def find_guest_by_subject(self, subject_id: str) -> GuestRecord | None:
        self.calls.append("guest")
        self.entered.set()
        await asyncio.Event().wait()
        return None

    async def find_employee_by_subject(self, subject_id: str) -> EmployeeRecord | None:
        self.calls.append("employee")
        return None


@pytest.mark.asyncio
async def test_cancelled_lookup_propagates_cancellation(role_directory) -> None:
    store = _BlockedStore()
    resolver = IdentityResolver(principals=store, roles=role_directory, timeout_seconds=5)

    task = asyncio.create_task(resolver.resolve("guest-1"))
    await store.entered.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    # Abandoned before the employee or role lookups ran.
    assert store.calls == ["guest"]
    assert role_directory.calls == []
