"""
selfserve_api.api.routers.guest.messages

Guest inbox endpoints.

Responsibilities:
- List and read messages addressed to the caller.
- Record when the caller first read a message.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.api.deps import db_session
from selfserve_api.api.errors import NotFound
from selfserve_api.api.routers.guest.access import guest_access, load_guest
from selfserve_api.api.schemas import GuestScopedRequest, MessageReadResponse, MessageResponse
from selfserve_api.auth.deps import Authorized
from selfserve_api.auth.propagation import GUEST_ID_FIELD
from selfserve_api.db.repositories.messages import MessageRepo

router = APIRouter()


@router.get("", response_model=list[MessageResponse])
async def list_messages(
    limit: int = Query(default=50, ge=1, le=200),
    auth: Authorized = Depends(guest_access),
    session: AsyncSession = Depends(db_session),
) -> list[MessageResponse]:
    guest = await load_guest(session, auth, auth.query_value(GUEST_ID_FIELD))
    messages = await MessageRepo(session).list_for_guest(
        guest_id=guest.guest_id, hotel_id=guest.hotel_id, limit=limit
    )
    return [MessageResponse.from_row(m) for m in messages]


@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(
    message_id: str,
    auth: Authorized = Depends(guest_access),
    session: AsyncSession = Depends(db_session),
) -> MessageResponse:
    guest = await load_guest(session, auth, auth.query_value(GUEST_ID_FIELD))
    msg = await MessageRepo(session).get_for_guest(
        message_id, guest_id=guest.guest_id, hotel_id=guest.hotel_id
    )
    if msg is None:
        raise NotFound("Message")
    return MessageResponse.from_row(msg)


@router.post("/{message_id}/read", response_model=MessageReadResponse)
async def mark_message_read(
    message_id: str,
    auth: Authorized = Depends(guest_access),
    session: AsyncSession = Depends(db_session),
) -> MessageReadResponse:
    body = auth.body_as(GuestScopedRequest)
    guest = await load_guest(session, auth, body.guest_id)

    repo = MessageRepo(session)
    # Someone else's message is reported exactly like a missing one.
    msg = await repo.get_for_guest(message_id, guest_id=guest.guest_id, hotel_id=guest.hotel_id)
    if msg is None:
        raise NotFound("Message")
    await repo.mark_read(msg)
    await session.commit()
    return MessageReadResponse(message_id=msg.message_id, read=True, read_at=msg.read_at)
