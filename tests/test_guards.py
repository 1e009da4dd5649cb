"""
tests.test_guards

Guard contracts, pipeline ordering and the end-to-end tenant scenario.
"""

from __future__ import annotations

import pytest

from selfserve_api.auth.errors import (
    Forbidden,
    LookupFailure,
    PrincipalNotFound,
    TenantMismatch,
    Unauthenticated,
)
from selfserve_api.auth.guards import (
    AuthenticationGuard,
    EmployeeOnlyGuard,
    GuardPipeline,
    GuestOnlyGuard,
    IdentityLinkGuard,
    RequestInputs,
    RoleAllowListGuard,
    TenantMatchGuard,
    fixed,
    from_body,
    from_path,
    from_query,
)
from selfserve_api.auth.models import (
    AuthorizationContext,
    AuthState,
    EmployeePrincipal,
    GuestPrincipal,
)
from selfserve_api.auth.resolver import IdentityResolver


def _employee_ctx(role: str, hotel: str = "h1") -> AuthorizationContext:
    return AuthorizationContext(external_subject_id="ext-x").link(
        EmployeePrincipal(
            principal_id="e-x", hotel_id=hotel, external_subject_id="ext-x",
            role_id="r-x", role_name=role,
        )
    )


def _guest_ctx() -> AuthorizationContext:
    return AuthorizationContext(external_subject_id="guest-1").link(
        GuestPrincipal(principal_id="g1", hotel_id="h1", external_subject_id="guest-1")
    )


def _linked_pipeline(resolver: IdentityResolver, *guards) -> GuardPipeline:
    return GuardPipeline([AuthenticationGuard(), IdentityLinkGuard(resolver), *guards])


@pytest.fixture
def resolver(principal_store, role_directory) -> IdentityResolver:
    return IdentityResolver(principals=principal_store, roles=role_directory)


@pytest.mark.asyncio
async def test_missing_subject_is_unauthenticated(resolver) -> None:
    result = await _linked_pipeline(resolver).evaluate(RequestInputs(subject_id=None))

    assert isinstance(result.denial, Unauthenticated)
    assert result.state is AuthState.unauthenticated
    assert result.guard == "authentication"


@pytest.mark.asyncio
async def test_unlinked_subject_is_principal_not_found(resolver) -> None:
    result = await _linked_pipeline(resolver).evaluate(RequestInputs(subject_id="nobody"))

    assert isinstance(result.denial, PrincipalNotFound)
    assert result.state is AuthState.unlinked


@pytest.mark.asyncio
async def test_lookup_failure_is_reported_by_identity_link(resolver, principal_store) -> None:
    principal_store.fail = True

    result = await _linked_pipeline(resolver).evaluate(RequestInputs(subject_id="guest-1"))

    assert isinstance(result.denial, LookupFailure)
    assert result.guard == "identity_link"
    assert result.state is AuthState.authenticating


@pytest.mark.asyncio
async def test_role_allow_list_denies_staff_and_allows_manager() -> None:
    guard = RoleAllowListGuard({"manager", "admin"})
    pipeline = GuardPipeline([guard])

    denied = await pipeline.evaluate(RequestInputs(), context=_employee_ctx("staff"))
    allowed = await pipeline.evaluate(RequestInputs(), context=_employee_ctx("manager"))

    assert isinstance(denied.denial, Forbidden)
    assert not isinstance(denied.denial, TenantMismatch)
    assert denied.denial.message == "role not permitted"
    assert denied.state is AuthState.denied
    assert allowed.allowed and allowed.state is AuthState.allowed


@pytest.mark.asyncio
async def test_role_match_is_case_sensitive() -> None:
    result = await GuardPipeline([RoleAllowListGuard({"manager"})]).evaluate(
        RequestInputs(), context=_employee_ctx("Manager")
    )

    assert isinstance(result.denial, Forbidden)


@pytest.mark.asyncio
async def test_role_allow_list_rejects_guests() -> None:
    result = await GuardPipeline([RoleAllowListGuard({"manager"})]).evaluate(
        RequestInputs(), context=_guest_ctx()
    )

    assert isinstance(result.denial, Forbidden)
    assert result.denial.message == "employee role required"


@pytest.mark.asyncio
async def test_kind_guards() -> None:
    guest_only = GuardPipeline([GuestOnlyGuard()])
    employee_only = GuardPipeline([EmployeeOnlyGuard()])

    assert (await guest_only.evaluate(RequestInputs(), context=_guest_ctx())).allowed
    denied = await guest_only.evaluate(RequestInputs(), context=_employee_ctx("manager"))
    assert denied.denial.message == "guest role required"

    assert (await employee_only.evaluate(RequestInputs(), context=_employee_ctx("staff"))).allowed
    denied = await employee_only.evaluate(RequestInputs(), context=_guest_ctx())
    assert denied.denial.message == "employee role required"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "guard",
    [GuestOnlyGuard(), EmployeeOnlyGuard(), RoleAllowListGuard({"manager"})],
)
async def test_kind_and_role_guards_fail_closed_without_context(guard) -> None:
    unresolved = AuthorizationContext(external_subject_id="ext-1")

    for ctx in (None, unresolved):
        result = await GuardPipeline([guard]).evaluate(RequestInputs(), context=ctx)
        assert isinstance(result.denial, Forbidden)


@pytest.mark.asyncio
async def test_tenant_match_denies_mismatch_and_absence() -> None:
    ctx = _employee_ctx("manager", hotel="h1")

    async def run(source, inputs=RequestInputs(), context=ctx):
        return await GuardPipeline([TenantMatchGuard(source)]).evaluate(inputs, context=context)

    assert (await run(fixed("h1"))).allowed
    assert isinstance((await run(fixed("h2"))).denial, TenantMismatch)
    assert isinstance((await run(fixed(None))).denial, TenantMismatch)
    assert isinstance((await run(fixed(""))).denial, TenantMismatch)
    assert isinstance((await run(fixed("h1"), context=None)).denial, TenantMismatch)
    unresolved = AuthorizationContext(external_subject_id="ext-1")
    assert isinstance((await run(fixed("h1"), context=unresolved)).denial, TenantMismatch)


@pytest.mark.asyncio
async def test_tenant_match_reads_each_source() -> None:
    ctx = _employee_ctx("manager", hotel="h1")
    inputs = RequestInputs(
        path_params={"hotel_id": "h1"},
        query={"hotelId": "h1"},
        body={"hotelId": "h2"},
    )

    for source, ok in (
        (from_path("hotel_id"), True),
        (from_query("hotelId"), True),
        (from_body("hotelId"), False),
    ):
        result = await GuardPipeline([TenantMatchGuard(source)]).evaluate(inputs, context=ctx)
        assert result.allowed is ok


@pytest.mark.asyncio
async def test_first_failure_wins(resolver) -> None:
    class _Exploding:
        name = "exploding"

        async def evaluate(self, state):
            raise AssertionError("later guards must not run")

    pipeline = _linked_pipeline(resolver, RoleAllowListGuard({"manager"}), _Exploding())

    result = await pipeline.evaluate(RequestInputs(subject_id="nobody"))

    assert isinstance(result.denial, PrincipalNotFound)


@pytest.mark.asyncio
async def test_employee_scenario_end_to_end(resolver) -> None:
    def pipeline(hotel_id: str) -> GuardPipeline:
        return _linked_pipeline(
            resolver,
            EmployeeOnlyGuard(),
            RoleAllowListGuard({"manager"}),
            TenantMatchGuard(fixed(hotel_id)),
        )

    ctx = await pipeline("h1").authorize(RequestInputs(subject_id="ext-1"))
    assert ctx.principal_id == "e1"
    assert ctx.role == "manager"

    with pytest.raises(TenantMismatch):
        await pipeline("h2").authorize(RequestInputs(subject_id="ext-1"))
