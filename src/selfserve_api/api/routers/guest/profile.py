"""
selfserve_api.api.routers.guest.profile

Guest profile endpoints.

Responsibilities:
- Read the guest profile (name, language, hotel).
- Update the guest's name fields.

`guestId` may be omitted; the caller's own guest id is used then.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.api.deps import db_session
from selfserve_api.api.errors import ValidationFailed
from selfserve_api.api.routers.guest.access import guest_access, load_guest
from selfserve_api.api.schemas import GuestProfileResponse, GuestProfileUpdateRequest
from selfserve_api.auth.deps import Authorized
from selfserve_api.auth.propagation import GUEST_ID_FIELD
from selfserve_api.db.repositories.guests import GuestRepo
from selfserve_api.observability.logging import get_logger

router = APIRouter()
log = get_logger(__name__)


@router.get("", response_model=GuestProfileResponse)
async def get_profile(
    auth: Authorized = Depends(guest_access),
    session: AsyncSession = Depends(db_session),
) -> GuestProfileResponse:
    guest = await load_guest(session, auth, auth.query_value(GUEST_ID_FIELD))
    return GuestProfileResponse.from_row(guest)


@router.put("", response_model=GuestProfileResponse)
async def update_profile(
    auth: Authorized = Depends(guest_access),
    session: AsyncSession = Depends(db_session),
) -> GuestProfileResponse:
    body = auth.body_as(GuestProfileUpdateRequest)
    changes = body.name.changes()
    if not changes:
        raise ValidationFailed("At least one name field must be provided to update")

    repo = GuestRepo(session)
    guest = await load_guest(session, auth, body.guest_id)
    await repo.update_name(guest, changes)
    await session.commit()
    log.info("guest_profile_updated", guest_id=guest.guest_id, fields=sorted(changes))
    return GuestProfileResponse.from_row(await repo.refresh(guest))
