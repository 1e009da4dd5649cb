from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.db.models import Guest, Name
from selfserve_api.db.repositories.employees import NAME_FIELDS


class GuestRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, guest_id: str) -> Guest | None:
        return await self._session.get(Guest, guest_id)

    async def update_name(self, guest: Guest, changes: dict[str, str | None]) -> None:
        name = await self._session.get(Name, guest.name_id)
        if name is None:
            raise LookupError("Guest name record not found")
        for key, value in changes.items():
            if key in NAME_FIELDS:
                setattr(name, key, value)
        now = datetime.utcnow()
        name.updated_at = now
        guest.updated_at = now
        await self._session.flush()

    async def refresh(self, guest: Guest) -> Guest:
        await self._session.refresh(guest, attribute_names=["name", "hotel"])
        return guest
