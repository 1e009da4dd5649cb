from __future__ import annotations

from datetime import datetime

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.db.models import Message


class MessageRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_guest(
        self, *, guest_id: str, hotel_id: str, limit: int = 50
    ) -> list[Message]:
        # Newest-first; scoped to the guest's hotel as well as the guest.
        stmt = (
            select(Message)
            .where(Message.receiver_id == guest_id, Message.hotel_id == hotel_id)
            .order_by(desc(Message.created_at))
            .limit(limit)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def get_for_guest(
        self, message_id: str, *, guest_id: str, hotel_id: str
    ) -> Message | None:
        stmt = select(Message).where(
            Message.message_id == message_id,
            Message.receiver_id == guest_id,
            Message.hotel_id == hotel_id,
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def mark_read(self, message: Message) -> Message:
        # First read wins; repeated calls keep the original timestamp.
        if message.read_at is None:
            message.read_at = datetime.utcnow()
            await self._session.flush()
        return message
