"""
selfserve_api.db.models

Persistence schema for the hotel-services API.

Responsibilities:
- Define ORM models for the tables this service reads and writes:
  - Hotel: the tenant
  - Name: person names shared by guests and employees
  - Role: employee role reference data
  - Employee / Guest: principals, keyed by the identity provider's subject id (`user_id`)
  - Message: hotel-to-guest messages, with a read marker
  - ServiceRequest / GeneralRequest: guest-raised requests and their general-request detail
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from selfserve_api.db.base import Base, new_id


def _utcnow() -> datetime:
    return datetime.utcnow()


class Hotel(Base):
    __tablename__ = "hotel"

    hotel_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    logo: Mapped[str | None] = mapped_column(String(150), nullable=True)
    timezone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


class Name(Base):
    __tablename__ = "name"

    name_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str | None] = mapped_column(String(20), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    middle_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    suffix: Mapped[str | None] = mapped_column(String(20), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


class Role(Base):
    __tablename__ = "role"

    role_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    hotel_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("hotel.hotel_id", ondelete="CASCADE"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class Employee(Base):
    __tablename__ = "employee"

    employee_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    hotel_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("hotel.hotel_id", ondelete="CASCADE"), nullable=False, index=True
    )
    # External subject id from the identity provider.
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    name_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("name.name_id", ondelete="RESTRICT"), nullable=False
    )
    role_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("role.role_id", ondelete="RESTRICT"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    name: Mapped[Name] = relationship(lazy="joined")
    role: Mapped[Role] = relationship(lazy="joined")
    hotel: Mapped[Hotel] = relationship(lazy="joined")


class Guest(Base):
    __tablename__ = "guest"

    guest_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    hotel_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("hotel.hotel_id", ondelete="RESTRICT"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    name_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("name.name_id", ondelete="RESTRICT"), nullable=False
    )
    language_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    name: Mapped[Name] = relationship(lazy="joined")
    hotel: Mapped[Hotel] = relationship(lazy="joined")


class Message(Base):
    __tablename__ = "message"

    message_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    hotel_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("hotel.hotel_id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("employee.employee_id", ondelete="SET NULL"), nullable=True
    )
    receiver_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("guest.guest_id", ondelete="SET NULL"), nullable=True, index=True
    )
    subject: Mapped[str | None] = mapped_column(String(100), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, index=True)
    read_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (Index("ix_message_receiver_created", "receiver_id", "created_at"),)


class RequestStatus(StrEnum):
    SUBMITTED = "Submitted"
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "InProgress"
    DELAYED = "Delayed"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    FAILED = "Failed"


class ServiceRequest(Base):
    __tablename__ = "request"

    request_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    hotel_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("hotel.hotel_id", ondelete="CASCADE"), nullable=False, index=True
    )
    guest_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("guest.guest_id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Reservations live outside this service.
    reservation_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    request_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RequestStatus.SUBMITTED.value
    )
    scheduled_time: Mapped[datetime | None] = mapped_column(nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


class GeneralRequest(Base):
    __tablename__ = "general_request"

    request_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("request.request_id", ondelete="CASCADE"), primary_key=True
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    room_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    request: Mapped[ServiceRequest] = relationship(lazy="joined", innerjoin=True)


# --- Module Notes -----------------------------------------------------------
# `user_id` is unique per table but nothing prevents the same subject appearing
# in both guest and employee; identity resolution gives the guest row priority.
