"""
selfserve_api.db.repositories.employees

Repository for `Employee` entities (and the `Name` rows they own).

Responsibilities:
- Hotel-scoped listing with role/name filters and pagination.
- Create/update/delete employees; name rows are written alongside.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.db.models import Employee, Name, Role

NAME_FIELDS = ("title", "first_name", "middle_name", "last_name", "suffix")


class EmployeeRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_hotel(
        self,
        hotel_id: str,
        *,
        role_name: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Employee], int]:
        conditions = [Employee.hotel_id == hotel_id]
        if role_name:
            conditions.append(Role.name == role_name)
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(Name.first_name.ilike(pattern), Name.last_name.ilike(pattern)))

        base = (
            select(Employee.employee_id)
            .join(Name, Employee.name_id == Name.name_id)
            .outerjoin(Role, Employee.role_id == Role.role_id)
            .where(*conditions)
        )
        total = (
            await self._session.execute(select(func.count()).select_from(base.subquery()))
        ).scalar_one()

        stmt = (
            select(Employee)
            .where(Employee.employee_id.in_(base))
            .order_by(Employee.created_at.desc(), Employee.employee_id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return list(rows), int(total)

    async def get(self, employee_id: str) -> Employee | None:
        return await self._session.get(Employee, employee_id)

    async def exists_for_user(self, *, user_id: str, hotel_id: str) -> bool:
        stmt = select(Employee.employee_id).where(
            Employee.user_id == user_id, Employee.hotel_id == hotel_id
        )
        return (await self._session.execute(stmt.limit(1))).first() is not None

    async def create(
        self,
        *,
        hotel_id: str,
        user_id: str,
        role_id: str,
        first_name: str,
        last_name: str,
        title: str | None = None,
        middle_name: str | None = None,
        suffix: str | None = None,
    ) -> Employee:
        name = Name(
            title=title,
            first_name=first_name,
            middle_name=middle_name,
            last_name=last_name,
            suffix=suffix,
        )
        self._session.add(name)
        await self._session.flush()

        emp = Employee(hotel_id=hotel_id, user_id=user_id, name_id=name.name_id, role_id=role_id)
        self._session.add(emp)
        await self._session.flush()
        return emp

    async def set_role(self, employee: Employee, role_id: str) -> None:
        employee.role_id = role_id
        employee.updated_at = datetime.utcnow()
        await self._session.flush()

    async def update_name(self, employee: Employee, changes: dict[str, str | None]) -> None:
        name = await self._session.get(Name, employee.name_id)
        if name is None:
            raise LookupError("Employee name record not found")
        for key, value in changes.items():
            if key in NAME_FIELDS:
                setattr(name, key, value)
        now = datetime.utcnow()
        name.updated_at = now
        employee.updated_at = now
        await self._session.flush()

    async def delete(self, employee: Employee) -> None:
        name_id = employee.name_id
        await self._session.delete(employee)
        await self._session.flush()
        name = await self._session.get(Name, name_id)
        if name is not None:
            await self._session.delete(name)
            await self._session.flush()

    async def refresh(self, employee: Employee) -> Employee:
        # Reload relationships (role/name) after in-place changes.
        await self._session.refresh(employee, attribute_names=["role", "name", "hotel"])
        return employee
