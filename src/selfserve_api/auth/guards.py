"""
selfserve_api.auth.guards

Composable authorization guards and the pipeline that runs them.

Responsibilities:
- Define the guard contract: `evaluate(state) -> Allow | Deny`.
- Provide the standard guards (authentication, identity link, principal kind,
  role allow-list, tenant match).
- Run an ordered guard list, stopping at the first denial.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Protocol

from selfserve_api.auth.errors import (
    AuthError,
    Forbidden,
    PrincipalNotFound,
    TenantMismatch,
    Unauthenticated,
)
from selfserve_api.auth.models import (
    AuthorizationContext,
    AuthState,
    EmployeePrincipal,
    GuestPrincipal,
)
from selfserve_api.auth.resolver import IdentityResolver
from selfserve_api.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RequestInputs:
    """
    The parts of an inbound request that guards may inspect.
    """

    subject_id: str | None = None
    method: str = "GET"
    path_params: Mapping[str, Any] = field(default_factory=dict)
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Mapping[str, Any] = field(default_factory=dict)
    body_malformed: bool = False

    @property
    def is_read(self) -> bool:
        return self.method.upper() in ("GET", "HEAD")


@dataclass(frozen=True, slots=True)
class GuardState:
    inputs: RequestInputs
    context: AuthorizationContext | None = None


@dataclass(frozen=True, slots=True)
class Allow:
    # A guard that establishes or populates the context hands the new value back here.
    context: AuthorizationContext | None = None


@dataclass(frozen=True, slots=True)
class Deny:
    error: AuthError


Decision = Allow | Deny


class Guard(Protocol):
    name: str

    async def evaluate(self, state: GuardState) -> Decision: ...


HotelIdSource = Callable[[RequestInputs], Any]


def from_path(name: str) -> HotelIdSource:
    return lambda inputs: inputs.path_params.get(name)


def from_query(name: str) -> HotelIdSource:
    return lambda inputs: inputs.query.get(name)


def from_body(name: str) -> HotelIdSource:
    return lambda inputs: inputs.body.get(name)


def fixed(value: str | None) -> HotelIdSource:
    return lambda _inputs: value


class AuthenticationGuard:
    name = "authentication"

    async def evaluate(self, state: GuardState) -> Decision:
        if not state.inputs.subject_id:
            return Deny(Unauthenticated())
        if state.context is not None:
            return Allow()
        return Allow(context=AuthorizationContext(external_subject_id=state.inputs.subject_id))


class IdentityLinkGuard:
    name = "identity_link"

    def __init__(self, resolver: IdentityResolver) -> None:
        self._resolver = resolver

    async def evaluate(self, state: GuardState) -> Decision:
        ctx = state.context
        if ctx is None:
            return Deny(Unauthenticated())
        if ctx.resolved:
            return Allow() if ctx.is_linked else Deny(PrincipalNotFound())

        # LookupFailure propagates to the pipeline, which reports it as this guard's denial.
        principal = await self._resolver.resolve(ctx.external_subject_id)
        if principal is None:
            return Deny(PrincipalNotFound())
        return Allow(context=ctx.link(principal))


class GuestOnlyGuard:
    name = "guest_only"

    async def evaluate(self, state: GuardState) -> Decision:
        if state.context is not None and isinstance(state.context.principal, GuestPrincipal):
            return Allow()
        return Deny(Forbidden("guest role required"))


class EmployeeOnlyGuard:
    name = "employee_only"

    async def evaluate(self, state: GuardState) -> Decision:
        if state.context is not None and isinstance(state.context.principal, EmployeePrincipal):
            return Allow()
        return Deny(Forbidden("employee role required"))


class RoleAllowListGuard:
    name = "role_allow_list"

    def __init__(self, roles: Iterable[str]) -> None:
        self.roles = frozenset(roles)

    async def evaluate(self, state: GuardState) -> Decision:
        principal = state.context.principal if state.context is not None else None
        if not isinstance(principal, EmployeePrincipal):
            return Deny(Forbidden("employee role required"))
        # Exact, case-sensitive membership.
        if principal.role_name not in self.roles:
            return Deny(Forbidden("role not permitted"))
        return Allow()


class TenantMatchGuard:
    name = "tenant_match"

    def __init__(self, expected_hotel_id: HotelIdSource) -> None:
        self._source = expected_hotel_id

    async def evaluate(self, state: GuardState) -> Decision:
        actual = state.context.hotel_id if state.context is not None else None
        expected = self._source(state.inputs)
        # Absence on either side is a denial, never a wildcard.
        if not actual or expected is None or expected == "":
            return Deny(TenantMismatch())
        if str(expected) != actual:
            return Deny(TenantMismatch())
        return Allow()


@dataclass(frozen=True, slots=True)
class PipelineResult:
    state: AuthState
    context: AuthorizationContext | None
    denial: AuthError | None = None
    guard: str | None = None

    @property
    def allowed(self) -> bool:
        return self.denial is None

    def raise_for_denial(self) -> AuthorizationContext:
        if self.denial is not None:
            raise self.denial
        if self.context is None:
            # An allowed pipeline without AuthenticationGuard has no identity to hand out.
            raise Unauthenticated()
        return self.context


class GuardPipeline:
    """
    Runs guards in order. The first denial wins and later guards are not run.
    """

    def __init__(self, guards: Iterable[Guard]) -> None:
        self.guards: tuple[Guard, ...] = tuple(guards)

    async def evaluate(
        self, inputs: RequestInputs, *, context: AuthorizationContext | None = None
    ) -> PipelineResult:
        state = GuardState(inputs=inputs, context=context)
        for guard in self.guards:
            try:
                decision = await guard.evaluate(state)
            except AuthError as e:
                decision = Deny(e)

            if isinstance(decision, Deny):
                log.info("guard_denied", guard=guard.name, kind=decision.error.kind)
                return PipelineResult(
                    state=_denied_state(state.context, decision.error),
                    context=state.context,
                    denial=decision.error,
                    guard=guard.name,
                )
            if decision.context is not None:
                state = replace(state, context=decision.context)

        return PipelineResult(state=AuthState.allowed, context=state.context)

    async def authorize(
        self, inputs: RequestInputs, *, context: AuthorizationContext | None = None
    ) -> AuthorizationContext:
        result = await self.evaluate(inputs, context=context)
        return result.raise_for_denial()


def _denied_state(context: AuthorizationContext | None, error: AuthError) -> AuthState:
    if context is None:
        return AuthState.unauthenticated
    if isinstance(error, PrincipalNotFound):
        return AuthState.unlinked
    if not context.resolved:
        return AuthState.authenticating
    return AuthState.denied


# --- Module Notes -----------------------------------------------------------
# Kind/role/tenant guards assume IdentityLinkGuard ran before them and deny when
# the context is missing or unlinked.
