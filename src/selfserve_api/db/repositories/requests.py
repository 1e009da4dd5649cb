"""
selfserve_api.db.repositories.requests

Repository for guest general requests (`ServiceRequest` + `GeneralRequest`).

Responsibilities:
- List a guest's general requests with status/category filters and pagination.
- Create a request and its general-request detail in one unit of work.
- Cancel a request while it is still cancellable.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.db.models import GeneralRequest, RequestStatus, ServiceRequest

GENERAL_REQUEST_TYPE = "General"
CANCELLABLE_STATUSES = frozenset({RequestStatus.SUBMITTED, RequestStatus.SCHEDULED})


class GeneralRequestRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_guest(
        self,
        *,
        guest_id: str,
        hotel_id: str,
        statuses: Iterable[str] = (),
        categories: Iterable[str] = (),
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[GeneralRequest], int]:
        conditions = [ServiceRequest.guest_id == guest_id, ServiceRequest.hotel_id == hotel_id]
        statuses = list(statuses)
        if statuses:
            conditions.append(ServiceRequest.status.in_(statuses))
        categories = list(categories)
        if categories:
            conditions.append(GeneralRequest.category.in_(categories))

        total = (
            await self._session.execute(
                select(func.count(GeneralRequest.request_id))
                .join(ServiceRequest, GeneralRequest.request_id == ServiceRequest.request_id)
                .where(*conditions)
            )
        ).scalar_one()

        stmt = (
            select(GeneralRequest)
            .join(GeneralRequest.request)
            .where(*conditions)
            .order_by(desc(ServiceRequest.created_at), GeneralRequest.request_id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        rows = (await self._session.execute(stmt)).unique().scalars().all()
        return list(rows), int(total)

    async def get_for_guest(self, request_id: str, *, guest_id: str) -> GeneralRequest | None:
        stmt = (
            select(GeneralRequest)
            .join(GeneralRequest.request)
            .where(GeneralRequest.request_id == request_id, ServiceRequest.guest_id == guest_id)
        )
        return (await self._session.execute(stmt)).unique().scalar_one_or_none()

    async def create(
        self,
        *,
        hotel_id: str,
        guest_id: str,
        category: str,
        reservation_id: str | None = None,
        description: str | None = None,
        room_id: str | None = None,
        scheduled_time: datetime | None = None,
        notes: str | None = None,
    ) -> GeneralRequest:
        base = ServiceRequest(
            hotel_id=hotel_id,
            guest_id=guest_id,
            reservation_id=reservation_id,
            request_type=GENERAL_REQUEST_TYPE,
            status=RequestStatus.SUBMITTED.value,
            scheduled_time=scheduled_time,
            notes=notes,
        )
        self._session.add(base)
        await self._session.flush()

        detail = GeneralRequest(
            request_id=base.request_id,
            category=category,
            description=description,
            room_id=room_id,
        )
        detail.request = base
        self._session.add(detail)
        await self._session.flush()
        return detail

    async def cancel(self, detail: GeneralRequest) -> None:
        base = detail.request
        base.status = RequestStatus.CANCELLED.value
        base.updated_at = datetime.utcnow()
        await self._session.flush()


def is_cancellable(status: str) -> bool:
    return status in CANCELLABLE_STATUSES
