"""
tests.conftest

Shared fixtures.

Responsibilities:
- In-memory Principal Store / Role Directory fakes for resolver and guard tests.
- A fully started app on a temporary SQLite database, seeded with two hotels.
- Bearer-token helpers standing in for the identity provider.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from datetime import datetime
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from selfserve_api.api.app import create_app
from selfserve_api.auth.errors import LookupFailure
from selfserve_api.auth.jwt import JwtConfig, issue_token
from selfserve_api.auth.stores import EmployeeRecord, GuestRecord, RoleRecord
from selfserve_api.db.models import (
    Employee,
    GeneralRequest,
    Guest,
    Hotel,
    Message,
    Name,
    RequestStatus,
    Role,
    ServiceRequest,
)
from selfserve_api.settings import Settings


class FakePrincipalStore:
    def __init__(
        self,
        *,
        guests: dict[str, GuestRecord] | None = None,
        employees: dict[str, EmployeeRecord] | None = None,
        fail: bool = False,
    ) -> None:
        self.guests = guests or {}
        self.employees = employees or {}
        self.fail = fail
        self.calls: list[str] = []

    async def find_guest_by_subject(self, subject_id: str) -> GuestRecord | None:
        self.calls.append("guest")
        if self.fail:
            raise LookupFailure("store unreachable")
        return self.guests.get(subject_id)

    async def find_employee_by_subject(self, subject_id: str) -> EmployeeRecord | None:
        self.calls.append("employee")
        if self.fail:
            raise LookupFailure("store unreachable")
        return self.employees.get(subject_id)


class FakeRoleDirectory:
    def __init__(self, roles: dict[str, RoleRecord] | None = None) -> None:
        self.roles = roles or {}
        self.calls: list[str] = []

    async def find_role_by_id(self, role_id: str) -> RoleRecord | None:
        self.calls.append(role_id)
        return self.roles.get(role_id)


@pytest.fixture
def principal_store() -> FakePrincipalStore:
    return FakePrincipalStore(
        guests={"guest-1": GuestRecord(guest_id="g1", hotel_id="h1")},
        employees={
            "ext-1": EmployeeRecord(employee_id="e1", hotel_id="h1", role_id="r1"),
            "ext-2": EmployeeRecord(employee_id="e2", hotel_id="h1", role_id="r2"),
            "ext-orphan": EmployeeRecord(employee_id="e9", hotel_id="h1", role_id="r-missing"),
        },
    )


@pytest.fixture
def role_directory() -> FakeRoleDirectory:
    return FakeRoleDirectory(
        roles={
            "r1": RoleRecord(role_id="r1", name="manager"),
            "r2": RoleRecord(role_id="r2", name="staff"),
        }
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'selfserve-test.db'}",
        jwt_secret="test-secret",
        log_level="WARNING",
    )


async def _seed(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session:
        session.add_all(
            [
                Hotel(hotel_id="h1", name="Harbor View", timezone="Europe/Lisbon"),
                Hotel(hotel_id="h2", name="Mountain Lodge"),
                Role(role_id="r-manager", name="manager", description="Runs the hotel"),
                Role(role_id="r-staff", name="staff"),
                Name(name_id="n1", first_name="Ana", last_name="Silva"),
                Name(name_id="n2", first_name="Bruno", last_name="Costa"),
                Name(name_id="n3", first_name="Carla", last_name="Dias"),
                Name(name_id="n4", first_name="Diego", last_name="Reis"),
                Name(name_id="n5", first_name="Eva", last_name="Lopes"),
                Name(name_id="n6", first_name="Vic", last_name="Tim"),
            ]
        )
        await session.flush()
        session.add_all(
            [
                Employee(
                    employee_id="e1", hotel_id="h1", user_id="ext-1", name_id="n1",
                    role_id="r-manager",
                ),
                Employee(
                    employee_id="e2", hotel_id="h1", user_id="ext-2", name_id="n2",
                    role_id="r-staff",
                ),
                Employee(
                    employee_id="e3", hotel_id="h2", user_id="ext-3", name_id="n3",
                    role_id="r-manager",
                ),
                Guest(guest_id="g1", hotel_id="h1", user_id="guest-1", name_id="n4"),
                Guest(guest_id="g2", hotel_id="h2", user_id="guest-2", name_id="n5"),
                Guest(guest_id="g9", hotel_id="h1", user_id="guest-9", name_id="n6"),
            ]
        )
        await session.flush()
        session.add_all(
            [
                Message(
                    message_id="m1", hotel_id="h1", sender_id="e1", receiver_id="g1",
                    subject="Welcome", content="Breakfast is served from 7am.",
                ),
                Message(
                    message_id="m2", hotel_id="h1", sender_id="e1", receiver_id="g9",
                    subject="Late checkout", content="Approved until 1pm.",
                ),
                ServiceRequest(
                    request_id="gr1", hotel_id="h1", guest_id="g1", request_type="General",
                    status=RequestStatus.SUBMITTED.value, created_at=datetime(2026, 5, 2, 9),
                ),
                ServiceRequest(
                    request_id="gr2", hotel_id="h1", guest_id="g1", request_type="General",
                    status=RequestStatus.COMPLETED.value, created_at=datetime(2026, 5, 1, 9),
                ),
                ServiceRequest(
                    request_id="gr3", hotel_id="h1", guest_id="g9", request_type="General",
                    status=RequestStatus.SUBMITTED.value,
                ),
            ]
        )
        await session.flush()
        session.add_all(
            [
                GeneralRequest(
                    request_id="gr1", category="Housekeeping", description="Extra towels"
                ),
                GeneralRequest(request_id="gr2", category="Maintenance", description="Fix the AC"),
                GeneralRequest(request_id="gr3", category="Housekeeping"),
            ]
        )
        await session.commit()


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not manage lifespan; run it explicitly.
    async with app.router.lifespan_context(app):
        await _seed(app.state.sessionmaker)
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def auth_headers(settings: Settings) -> Callable[[str], dict[str, str]]:
    cfg = JwtConfig.from_settings(settings)

    def _headers(subject: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_token(cfg=cfg, subject=subject)}"}

    return _headers


# --- Module Notes -----------------------------------------------------------
# Seeded tenants: h1 (manager e1/ext-1, staff e2/ext-2, guest g1/guest-1) and
# h2 (manager e3/ext-3, guest g2/guest-2). Guest g9/guest-9 shares h1 with g1;
# g1 owns general requests gr1 (Submitted) and gr2 (Completed), g9 owns gr3.
