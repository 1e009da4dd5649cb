"""
selfserve_api.api.routers.management.router

Management router aggregator.

Responsibilities:
- Mount management sub-routers under `/v1/management`.
"""

from __future__ import annotations

from fastapi import APIRouter

from selfserve_api.api.routers.management import employees

router = APIRouter(prefix="/v1/management", tags=["management"])

## Every included router requires an employee principal; mutations also require a management role.
router.include_router(employees.router, prefix="/employees")
