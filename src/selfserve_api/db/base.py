"""
selfserve_api.db.base

SQLAlchemy declarative base.
"""

from __future__ import annotations

import uuid

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def new_id() -> str:
    # Primary keys are uuid4 strings; principals and hotel scope are compared as plain strings.
    return str(uuid.uuid4())
