"""
selfserve_api.api.routers.management.employees

Employee management endpoints for hotel staff.

Responsibilities:
- Hotel-scoped reads for any employee of that hotel.
- Create / re-role / edit / remove employees for managers and admins.
- Enforce tenant isolation on both the caller-supplied hotel id and the
  target employee's hotel.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from selfserve_api.api.deps import db_session
from selfserve_api.api.errors import DatabaseError, NotFound, ValidationFailed
from selfserve_api.api.schemas import (
    EmployeeCreateRequest,
    EmployeeDeleteRequest,
    EmployeeListResponse,
    EmployeeProfileUpdateRequest,
    EmployeeResponse,
    EmployeeRoleUpdateRequest,
    Pagination,
    RoleResponse,
)
from selfserve_api.auth.deps import Authorized, authorize, require_roles
from selfserve_api.auth.errors import TenantMismatch
from selfserve_api.auth.guards import EmployeeOnlyGuard, TenantMatchGuard, from_body, from_query
from selfserve_api.auth.roles import MANAGEMENT_ROLES
from selfserve_api.db.models import Employee
from selfserve_api.db.repositories.employees import EmployeeRepo
from selfserve_api.db.repositories.hotels import HotelRepo
from selfserve_api.db.repositories.roles import SqlRoleDirectory
from selfserve_api.observability.logging import get_logger

router = APIRouter()
log = get_logger(__name__)

HOTEL_ID_FIELD = "hotelId"

employee_access = authorize(EmployeeOnlyGuard())
hotel_staff_access = authorize(EmployeeOnlyGuard(), TenantMatchGuard(from_query(HOTEL_ID_FIELD)))
management_access = require_roles(MANAGEMENT_ROLES, hotel_id=from_body(HOTEL_ID_FIELD))


async def _load_target(repo: EmployeeRepo, employee_id: str, auth: Authorized) -> Employee:
    emp = await repo.get(employee_id)
    if emp is None:
        raise NotFound("Employee")
    # The acting hotel already matched the supplied hotelId; the target must live there too.
    if emp.hotel_id != auth.context.hotel_id:
        raise TenantMismatch()
    return emp


@router.get("", response_model=EmployeeListResponse)
async def list_employees(
    role: str | None = Query(default=None, max_length=50),
    search: str | None = Query(default=None, max_length=100),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    auth: Authorized = Depends(hotel_staff_access),
    session: AsyncSession = Depends(db_session),
) -> EmployeeListResponse:
    rows, total = await EmployeeRepo(session).list_for_hotel(
        auth.context.hotel_id or "",
        role_name=role,
        search=search,
        page=page,
        limit=limit,
    )
    return EmployeeListResponse(
        data=[EmployeeResponse.from_row(e) for e in rows],
        pagination=Pagination(page=page, limit=limit, total=total),
    )


@router.get("/me", response_model=EmployeeResponse)
async def get_current_employee(
    auth: Authorized = Depends(employee_access),
    session: AsyncSession = Depends(db_session),
) -> EmployeeResponse:
    emp = await EmployeeRepo(session).get(auth.context.principal_id or "")
    if emp is None:
        raise NotFound("Employee record for authenticated user")
    return EmployeeResponse.from_row(emp)


@router.get("/roles", response_model=list[RoleResponse])
async def list_roles(
    _: Authorized = Depends(employee_access),
    session: AsyncSession = Depends(db_session),
) -> list[RoleResponse]:
    roles = await SqlRoleDirectory(session).list_roles()
    return [RoleResponse(role_id=r.role_id, name=r.name, description=r.description) for r in roles]


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: str,
    auth: Authorized = Depends(hotel_staff_access),
    session: AsyncSession = Depends(db_session),
) -> EmployeeResponse:
    emp = await EmployeeRepo(session).get(employee_id)
    # Another hotel's employee is indistinguishable from a missing one on reads.
    if emp is None or emp.hotel_id != auth.context.hotel_id:
        raise NotFound("Employee")
    return EmployeeResponse.from_row(emp)


@router.post("", response_model=EmployeeResponse, status_code=201)
async def create_employee(
    auth: Authorized = Depends(management_access),
    session: AsyncSession = Depends(db_session),
) -> EmployeeResponse:
    body = auth.body_as(EmployeeCreateRequest)
    if await HotelRepo(session).get(body.hotel_id) is None:
        raise NotFound("Hotel")
    if await SqlRoleDirectory(session).find_role_by_id(body.role_id) is None:
        raise NotFound("Role")

    repo = EmployeeRepo(session)
    if await repo.exists_for_user(user_id=body.user_id, hotel_id=body.hotel_id):
        raise ValidationFailed(
            "Employee with this User ID already exists for this hotel",
            details=[{"field": "userId", "message": "Duplicate employee"}],
        )

    try:
        # Name and employee rows commit together or not at all.
        emp = await repo.create(
            hotel_id=body.hotel_id,
            user_id=body.user_id,
            role_id=body.role_id,
            first_name=body.first_name,
            last_name=body.last_name,
            title=body.title,
            middle_name=body.middle_name,
            suffix=body.suffix,
        )
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise ValidationFailed(
            "Employee with this User ID already exists",
            details=[{"field": "userId", "message": "Duplicate employee"}],
        ) from e
    except SQLAlchemyError as e:
        await session.rollback()
        raise DatabaseError("Failed to create employee") from e

    log.info("employee_created", employee_id=emp.employee_id, actor=auth.context.principal_id)
    return EmployeeResponse.from_row(await repo.refresh(emp))


@router.put("/{employee_id}/role")
async def update_employee_role(
    employee_id: str,
    auth: Authorized = Depends(management_access),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    body = auth.body_as(EmployeeRoleUpdateRequest)
    repo = EmployeeRepo(session)
    emp = await _load_target(repo, employee_id, auth)
    if await SqlRoleDirectory(session).find_role_by_id(body.role_id) is None:
        raise NotFound("Role to assign")

    if emp.role_id == body.role_id:
        return {
            "message": "Employee already has this role.",
            "data": EmployeeResponse.from_row(emp).model_dump(mode="json", by_alias=True),
        }

    try:
        await repo.set_role(emp, body.role_id)
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise DatabaseError("Failed to update employee role") from e

    log.info(
        "employee_role_updated",
        employee_id=emp.employee_id,
        role_id=body.role_id,
        actor=auth.context.principal_id,
    )
    emp = await repo.refresh(emp)
    return {
        "message": "Employee role updated successfully",
        "data": EmployeeResponse.from_row(emp).model_dump(mode="json", by_alias=True),
    }


@router.put("/{employee_id}/profile", response_model=EmployeeResponse)
async def update_employee_profile(
    employee_id: str,
    auth: Authorized = Depends(management_access),
    session: AsyncSession = Depends(db_session),
) -> EmployeeResponse:
    body = auth.body_as(EmployeeProfileUpdateRequest)
    repo = EmployeeRepo(session)
    emp = await _load_target(repo, employee_id, auth)

    try:
        await repo.update_name(emp, body.name.changes())
        await session.commit()
    except LookupError as e:
        await session.rollback()
        raise DatabaseError("Employee name record not found, cannot update.") from e
    except SQLAlchemyError as e:
        await session.rollback()
        raise DatabaseError("Failed to update employee") from e

    return EmployeeResponse.from_row(await repo.refresh(emp))


@router.delete("/{employee_id}")
async def delete_employee(
    employee_id: str,
    auth: Authorized = Depends(management_access),
    session: AsyncSession = Depends(db_session),
) -> dict[str, str]:
    auth.body_as(EmployeeDeleteRequest)
    repo = EmployeeRepo(session)
    emp = await _load_target(repo, employee_id, auth)

    try:
        await repo.delete(emp)
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise DatabaseError("Failed to delete employee. Check dependencies.") from e

    log.info("employee_deleted", employee_id=employee_id, actor=auth.context.principal_id)
    return {"message": "Employee deleted successfully", "employeeId": employee_id}


# --- Module Notes -----------------------------------------------------------
# Route order matters: `/me` and `/roles` are declared before `/{employee_id}`.
