"""
selfserve_api.db.repositories.roles

SQL-backed Role Directory.

Responsibilities:
- Resolve a role id to its name/description (identity resolution).
- List roles for the management API.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.auth.errors import LookupFailure
from selfserve_api.auth.stores import RoleRecord
from selfserve_api.db.models import Role


def _record(role: Role) -> RoleRecord:
    # Permissions stay empty until role -> permission mapping exists.
    return RoleRecord(
        role_id=role.role_id,
        name=role.name,
        description=role.description,
        hotel_id=role.hotel_id,
    )


class SqlRoleDirectory:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_role_by_id(self, role_id: str) -> RoleRecord | None:
        try:
            role = await self._session.get(Role, role_id)
        except SQLAlchemyError as e:
            raise LookupFailure("Role lookup failed") from e
        return _record(role) if role is not None else None

    async def list_roles(self) -> list[RoleRecord]:
        stmt = select(Role).order_by(Role.name)
        try:
            roles = (await self._session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise LookupFailure("Role listing failed") from e
        return [_record(r) for r in roles]
