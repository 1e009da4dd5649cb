"""
selfserve_api.auth.propagation

Implicit identity propagation for guest-scoped endpoints.

Responsibilities:
- Fill in the guest's own id when a guest caller omits it.
- Never override an identifier the caller supplied explicitly.
"""

from __future__ import annotations

from dataclasses import replace

from selfserve_api.auth.guards import RequestInputs
from selfserve_api.auth.models import AuthorizationContext, GuestPrincipal

GUEST_ID_FIELD = "guestId"


def propagate_identity(
    context: AuthorizationContext,
    inputs: RequestInputs,
    *,
    field: str = GUEST_ID_FIELD,
) -> RequestInputs:
    """
    Reads get the id injected into the query, writes into the body.
    """

    principal = context.principal
    if not isinstance(principal, GuestPrincipal):
        return inputs
    if _present(inputs.query.get(field)) or _present(inputs.body.get(field)):
        return inputs

    if inputs.is_read:
        return replace(inputs, query={**inputs.query, field: principal.principal_id})
    return replace(inputs, body={**inputs.body, field: principal.principal_id})


def _present(value: object) -> bool:
    return value is not None and value != ""
