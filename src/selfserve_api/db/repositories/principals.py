"""
selfserve_api.db.repositories.principals

SQL-backed Principal Store.

Responsibilities:
- Point lookups of guest/employee rows by external subject id.
- Translate driver/ORM faults into `LookupFailure`.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.auth.errors import LookupFailure
from selfserve_api.auth.stores import EmployeeRecord, GuestRecord
from selfserve_api.db.models import Employee, Guest


class SqlPrincipalStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_guest_by_subject(self, subject_id: str) -> GuestRecord | None:
        # No hotel filter: the subject id alone identifies a guest.
        stmt = select(Guest.guest_id, Guest.hotel_id).where(Guest.user_id == subject_id).limit(1)
        try:
            row = (await self._session.execute(stmt)).first()
        except SQLAlchemyError as e:
            raise LookupFailure("Guest lookup failed") from e
        if row is None:
            return None
        return GuestRecord(guest_id=row.guest_id, hotel_id=row.hotel_id)

    async def find_employee_by_subject(self, subject_id: str) -> EmployeeRecord | None:
        stmt = (
            select(Employee.employee_id, Employee.hotel_id, Employee.role_id)
            .where(Employee.user_id == subject_id)
            .limit(1)
        )
        try:
            row = (await self._session.execute(stmt)).first()
        except SQLAlchemyError as e:
            raise LookupFailure("Employee lookup failed") from e
        if row is None:
            return None
        return EmployeeRecord(
            employee_id=row.employee_id, hotel_id=row.hotel_id, role_id=row.role_id
        )
