"""
selfserve_api.api.routers.guest.requests

Guest general-request endpoints.

Responsibilities:
- List and read the caller's general requests.
- Raise a new general request against the caller's hotel.
- Cancel a request while it is still Submitted or Scheduled.

`guestId` may be omitted throughout; reads take it from the query and writes
from the body once it has been filled in for the caller.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.api.deps import db_session
from selfserve_api.api.errors import DatabaseError, NotFound, ValidationFailed
from selfserve_api.api.routers.guest.access import guest_access, load_guest
from selfserve_api.api.schemas import (
    GeneralRequestCreateRequest,
    GeneralRequestListResponse,
    GeneralRequestResponse,
    GuestScopedRequest,
    Pagination,
)
from selfserve_api.auth.deps import Authorized
from selfserve_api.auth.errors import TenantMismatch
from selfserve_api.auth.propagation import GUEST_ID_FIELD
from selfserve_api.db.models import RequestStatus
from selfserve_api.db.repositories.requests import GeneralRequestRepo, is_cancellable
from selfserve_api.observability.logging import get_logger

router = APIRouter()
log = get_logger(__name__)


def _split(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


@router.get("", response_model=GeneralRequestListResponse)
async def list_requests(
    status: str | None = Query(default=None, max_length=200),
    category: str | None = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    auth: Authorized = Depends(guest_access),
    session: AsyncSession = Depends(db_session),
) -> GeneralRequestListResponse:
    guest = await load_guest(session, auth, auth.query_value(GUEST_ID_FIELD))
    # Unknown status names are ignored.
    known = {s.value for s in RequestStatus}
    rows, total = await GeneralRequestRepo(session).list_for_guest(
        guest_id=guest.guest_id,
        hotel_id=guest.hotel_id,
        statuses=[s for s in _split(status) if s in known],
        categories=_split(category),
        page=page,
        limit=limit,
    )
    return GeneralRequestListResponse(
        data=[GeneralRequestResponse.from_row(r) for r in rows],
        pagination=Pagination(page=page, limit=limit, total=total),
    )


@router.get("/{request_id}", response_model=GeneralRequestResponse)
async def get_request(
    request_id: str,
    auth: Authorized = Depends(guest_access),
    session: AsyncSession = Depends(db_session),
) -> GeneralRequestResponse:
    guest = await load_guest(session, auth, auth.query_value(GUEST_ID_FIELD))
    detail = await GeneralRequestRepo(session).get_for_guest(request_id, guest_id=guest.guest_id)
    if detail is None:
        raise NotFound("General request")
    return GeneralRequestResponse.from_row(detail)


@router.post("", response_model=GeneralRequestResponse, status_code=201)
async def create_request(
    auth: Authorized = Depends(guest_access),
    session: AsyncSession = Depends(db_session),
) -> GeneralRequestResponse:
    body = auth.body_as(GeneralRequestCreateRequest)
    guest = await load_guest(session, auth, body.guest_id)
    if body.hotel_id is not None and body.hotel_id != guest.hotel_id:
        raise TenantMismatch()

    try:
        detail = await GeneralRequestRepo(session).create(
            hotel_id=guest.hotel_id,
            guest_id=guest.guest_id,
            category=body.category,
            reservation_id=body.reservation_id,
            description=body.description,
            room_id=body.room_id,
            scheduled_time=body.scheduled_time,
            notes=body.notes,
        )
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise DatabaseError("Failed to create general request") from e

    log.info("general_request_created", request_id=detail.request_id, guest_id=guest.guest_id)
    return GeneralRequestResponse.from_row(detail)


@router.put("/{request_id}/cancel", response_model=GeneralRequestResponse)
async def cancel_request(
    request_id: str,
    auth: Authorized = Depends(guest_access),
    session: AsyncSession = Depends(db_session),
) -> GeneralRequestResponse:
    body = auth.body_as(GuestScopedRequest)
    guest = await load_guest(session, auth, body.guest_id)

    repo = GeneralRequestRepo(session)
    detail = await repo.get_for_guest(request_id, guest_id=guest.guest_id)
    if detail is None:
        raise NotFound("General request")
    if not is_cancellable(detail.request.status):
        raise ValidationFailed(
            f"Request cannot be cancelled in its current status: {detail.request.status}",
            details=[{"field": "status", "message": "Not cancellable"}],
        )

    try:
        await repo.cancel(detail)
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise DatabaseError("Failed to cancel general request") from e

    log.info("general_request_cancelled", request_id=request_id, guest_id=guest.guest_id)
    return GeneralRequestResponse.from_row(detail)
