from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.api.deps import db_session
from selfserve_api.api.errors import NotFound
from selfserve_api.api.routers.guest.access import guest_access
from selfserve_api.api.schemas import HotelResponse
from selfserve_api.auth.deps import Authorized
from selfserve_api.db.repositories.hotels import HotelRepo

router = APIRouter()


@router.get("", response_model=HotelResponse)
async def get_hotel(
    auth: Authorized = Depends(guest_access),
    session: AsyncSession = Depends(db_session),
) -> HotelResponse:
    # Always the caller's own hotel; no hotel id is accepted from the request.
    hotel = await HotelRepo(session).get(auth.context.hotel_id or "")
    if hotel is None:
        raise NotFound("Hotel")
    return HotelResponse.from_row(hotel)
