"""
selfserve_api.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Wire the identity provider and identity resolver into request scope.
- Turn an ordered guard list into a reusable route dependency.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError
from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.api.deps import db_session, settings_dep
from selfserve_api.api.errors import ValidationFailed
from selfserve_api.auth.guards import (
    AuthenticationGuard,
    EmployeeOnlyGuard,
    Guard,
    GuardPipeline,
    HotelIdSource,
    IdentityLinkGuard,
    RequestInputs,
    RoleAllowListGuard,
    TenantMatchGuard,
)
from selfserve_api.auth.identity import BearerTokenIdentityProvider, IdentityProvider
from selfserve_api.auth.jwt import JwtConfig
from selfserve_api.auth.models import AuthorizationContext
from selfserve_api.auth.propagation import propagate_identity
from selfserve_api.auth.resolver import IdentityResolver
from selfserve_api.db.repositories.principals import SqlPrincipalStore
from selfserve_api.db.repositories.roles import SqlRoleDirectory
from selfserve_api.settings import Settings

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class Authorized:
    """
    What a guarded route receives: the resolved context plus the request
    inputs as seen after identity propagation.
    """

    context: AuthorizationContext
    inputs: RequestInputs

    def query_value(self, name: str) -> Any:
        return self.inputs.query.get(name)

    def body_value(self, name: str) -> Any:
        return self.inputs.body.get(name)

    def body_as(self, model: type[ModelT]) -> ModelT:
        """
        Validate the request body, as seen after propagation, against `model`.

        Guarded routes take their payload from here, never as a route parameter.
        """
        try:
            return model.model_validate(dict(self.inputs.body))
        except SchemaError as e:
            raise ValidationFailed(
                "Invalid request body",
                details=[
                    {
                        "field": ".".join(str(p) for p in err["loc"]) or "body",
                        "message": err["msg"],
                    }
                    for err in e.errors()
                ],
            ) from e


def get_identity_provider(settings: Settings = Depends(settings_dep)) -> IdentityProvider:
    return BearerTokenIdentityProvider(JwtConfig.from_settings(settings))


def get_identity_resolver(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> IdentityResolver:
    return IdentityResolver(
        principals=SqlPrincipalStore(session),
        roles=SqlRoleDirectory(session),
        timeout_seconds=settings.lookup_timeout_seconds,
    )


async def request_inputs(request: Request, *, subject_id: str | None) -> RequestInputs:
    body: dict[str, Any] = {}
    malformed = False
    if request.method.upper() not in ("GET", "HEAD"):
        raw = await request.body()
        if raw:
            try:
                parsed = json.loads(raw)
            except ValueError:
                malformed = True
            else:
                if isinstance(parsed, dict):
                    body = parsed

    return RequestInputs(
        subject_id=subject_id,
        method=request.method,
        path_params=dict(request.path_params),
        query=dict(request.query_params),
        body=body,
        body_malformed=malformed,
    )


def authorize(
    *guards: Guard, propagate: str | None = None
) -> Callable[..., Awaitable[Authorized]]:
    """
    Build a dependency running authentication, identity linking, then `guards`.

    With `propagate` set, a guest caller's own id is filled in for that field
    when the request omits it (see `auth.propagation`).
    """

    extra: tuple[Guard, ...] = tuple(guards)

    async def _dep(
        request: Request,
        provider: IdentityProvider = Depends(get_identity_provider),
        resolver: IdentityResolver = Depends(get_identity_resolver),
    ) -> Authorized:
        inputs = await request_inputs(request, subject_id=provider.verified_subject(request))
        identity: tuple[Guard, ...] = (AuthenticationGuard(), IdentityLinkGuard(resolver))
        if inputs.body_malformed:
            # An unparseable body is reported only to a known caller.
            await GuardPipeline(identity).authorize(inputs)
            raise ValidationFailed("Malformed JSON body")
        context = await GuardPipeline([*identity, *extra]).authorize(inputs)
        if propagate:
            inputs = propagate_identity(context, inputs, field=propagate)
        return Authorized(context=context, inputs=inputs)

    return _dep


def require_roles(
    roles: Iterable[str], *, hotel_id: HotelIdSource | None = None
) -> Callable[..., Awaitable[Authorized]]:
    guards: list[Guard] = [EmployeeOnlyGuard(), RoleAllowListGuard(roles)]
    if hotel_id is not None:
        guards.append(TenantMatchGuard(hotel_id))
    return authorize(*guards)


# --- Module Notes -----------------------------------------------------------
# Tests replace `get_identity_resolver` through `app.dependency_overrides` to run
# the full HTTP path against in-memory stores.
