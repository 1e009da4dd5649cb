"""
selfserve_api.api.routers.guest.access

Shared access rules for guest endpoints.

Responsibilities:
- Provide the guest-only dependency with implicit `guestId` propagation.
- Load the guest a request addresses and confirm it is the caller.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.api.errors import NotFound, ValidationFailed
from selfserve_api.auth.deps import Authorized, authorize
from selfserve_api.auth.errors import Forbidden, TenantMismatch
from selfserve_api.auth.guards import GuestOnlyGuard
from selfserve_api.auth.propagation import GUEST_ID_FIELD
from selfserve_api.db.models import Guest
from selfserve_api.db.repositories.guests import GuestRepo

guest_access = authorize(GuestOnlyGuard(), propagate=GUEST_ID_FIELD)


async def load_guest(session: AsyncSession, auth: Authorized, guest_id: str | None) -> Guest:
    """
    Resolve the addressed guest. An explicit `guestId` is honoured as given,
    but it must still name the calling guest.
    """
    if not guest_id:
        raise ValidationFailed(
            "Missing guestId parameter",
            details=[{"field": GUEST_ID_FIELD, "message": "Guest ID is required"}],
        )
    guest = await GuestRepo(session).get(guest_id)
    if guest is None:
        raise NotFound("Guest")
    if guest.hotel_id != auth.context.hotel_id:
        raise TenantMismatch()
    if guest.guest_id != auth.context.principal_id:
        raise Forbidden("guest may only access own records")
    return guest
