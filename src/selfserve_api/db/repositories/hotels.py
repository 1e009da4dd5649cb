from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.db.models import Hotel


class HotelRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, hotel_id: str) -> Hotel | None:
        return await self._session.get(Hotel, hotel_id)
