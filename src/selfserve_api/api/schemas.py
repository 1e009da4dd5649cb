"""
selfserve_api.api.schemas

Request/response models shared by the routers.

Responsibilities:
- Expose camelCase JSON (`hotelId`, `guestId`, ...) over snake_case attributes.
- Project ORM rows into response models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from selfserve_api.db.models import Employee, GeneralRequest, Guest, Hotel, Message, Name
from selfserve_api.db.repositories.employees import NAME_FIELDS


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContextResponse(CamelModel):
    principal_kind: str
    principal_id: str | None
    hotel_id: str | None
    role_name: str | None


class NameFields(CamelModel):
    title: str | None = Field(default=None, max_length=20)
    first_name: str | None = Field(default=None, max_length=50)
    middle_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    suffix: str | None = Field(default=None, max_length=20)

    @classmethod
    def from_row(cls, name: Name | None) -> NameFields:
        if name is None:
            return cls()
        return cls(**{f: getattr(name, f) for f in NAME_FIELDS})

    def changes(self) -> dict[str, Any]:
        # Only fields the caller actually sent.
        return self.model_dump(include=set(NAME_FIELDS), exclude_unset=True)


class RoleResponse(CamelModel):
    role_id: str
    name: str
    description: str | None = None


class HotelSummary(CamelModel):
    hotel_id: str
    name: str
    logo: str | None = None
    timezone: str | None = None


class HotelResponse(HotelSummary):
    phone: str | None = None
    email: str | None = None
    website: str | None = None

    @classmethod
    def from_row(cls, hotel: Hotel) -> HotelResponse:
        return cls(
            hotel_id=hotel.hotel_id,
            name=hotel.name,
            logo=hotel.logo,
            timezone=hotel.timezone,
            phone=hotel.phone,
            email=hotel.email,
            website=hotel.website,
        )


class EmployeeResponse(CamelModel):
    employee_id: str
    hotel_id: str
    user_id: str
    name: NameFields
    role: RoleResponse | None = None
    hotel: HotelSummary | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, emp: Employee) -> EmployeeResponse:
        return cls(
            employee_id=emp.employee_id,
            hotel_id=emp.hotel_id,
            user_id=emp.user_id,
            name=NameFields.from_row(emp.name),
            role=(
                RoleResponse(
                    role_id=emp.role.role_id, name=emp.role.name, description=emp.role.description
                )
                if emp.role is not None
                else None
            ),
            hotel=(
                HotelSummary(
                    hotel_id=emp.hotel.hotel_id,
                    name=emp.hotel.name,
                    logo=emp.hotel.logo,
                    timezone=emp.hotel.timezone,
                )
                if emp.hotel is not None
                else None
            ),
            created_at=emp.created_at,
            updated_at=emp.updated_at,
        )


class Pagination(CamelModel):
    page: int
    limit: int
    total: int


class EmployeeListResponse(CamelModel):
    data: list[EmployeeResponse]
    pagination: Pagination


class EmployeeCreateRequest(CamelModel):
    hotel_id: str = Field(min_length=1)
    role_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1, max_length=255)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    title: str | None = Field(default=None, max_length=20)
    middle_name: str | None = Field(default=None, max_length=50)
    suffix: str | None = Field(default=None, max_length=20)


class EmployeeRoleUpdateRequest(CamelModel):
    hotel_id: str = Field(min_length=1)
    role_id: str = Field(min_length=1)


class EmployeeProfileUpdateRequest(CamelModel):
    hotel_id: str = Field(min_length=1)
    name: NameFields

    @model_validator(mode="after")
    def _at_least_one_name_field(self) -> EmployeeProfileUpdateRequest:
        if not self.name.changes():
            raise ValueError("At least one name field must be provided to update")
        return self


class EmployeeDeleteRequest(CamelModel):
    hotel_id: str = Field(min_length=1)


class GuestProfileResponse(CamelModel):
    guest_id: str
    hotel_id: str
    name: NameFields
    language_code: str | None = None
    is_active: bool
    hotel: HotelSummary | None = None

    @classmethod
    def from_row(cls, guest: Guest) -> GuestProfileResponse:
        return cls(
            guest_id=guest.guest_id,
            hotel_id=guest.hotel_id,
            name=NameFields.from_row(guest.name),
            language_code=guest.language_code,
            is_active=guest.is_active,
            hotel=(
                HotelSummary(
                    hotel_id=guest.hotel.hotel_id,
                    name=guest.hotel.name,
                    logo=guest.hotel.logo,
                    timezone=guest.hotel.timezone,
                )
                if guest.hotel is not None
                else None
            ),
        )


class GuestScopedRequest(CamelModel):
    # Filled in from the caller's identity when omitted.
    guest_id: str | None = None


class GuestProfileUpdateRequest(GuestScopedRequest):
    name: NameFields


class MessageResponse(CamelModel):
    message_id: str
    subject: str | None
    content: str
    sender_id: str | None
    created_at: datetime
    read_at: datetime | None = None

    @classmethod
    def from_row(cls, msg: Message) -> MessageResponse:
        return cls(
            message_id=msg.message_id,
            subject=msg.subject,
            content=msg.content,
            sender_id=msg.sender_id,
            created_at=msg.created_at,
            read_at=msg.read_at,
        )


class MessageReadResponse(CamelModel):
    message_id: str
    read: bool
    read_at: datetime | None


class GeneralRequestResponse(CamelModel):
    request_id: str
    hotel_id: str
    guest_id: str
    category: str
    description: str | None
    room_id: str | None
    reservation_id: str | None
    status: str
    scheduled_time: datetime | None
    completed_at: datetime | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, detail: GeneralRequest) -> GeneralRequestResponse:
        base = detail.request
        return cls(
            request_id=detail.request_id,
            hotel_id=base.hotel_id,
            guest_id=base.guest_id,
            category=detail.category,
            description=detail.description,
            room_id=detail.room_id,
            reservation_id=base.reservation_id,
            status=base.status,
            scheduled_time=base.scheduled_time,
            completed_at=base.completed_at,
            notes=base.notes,
            created_at=base.created_at,
            updated_at=base.updated_at,
        )


class GeneralRequestListResponse(CamelModel):
    data: list[GeneralRequestResponse]
    pagination: Pagination


class GeneralRequestCreateRequest(GuestScopedRequest):
    # Optional; when sent it must be the caller's hotel.
    hotel_id: str | None = None
    reservation_id: str | None = Field(default=None, max_length=36)
    category: str = Field(min_length=1, max_length=50)
    description: str | None = None
    room_id: str | None = Field(default=None, max_length=36)
    scheduled_time: datetime | None = None
    notes: str | None = None
