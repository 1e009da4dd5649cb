"""
selfserve_api.api.routers.guest.router

Guest router aggregator.

Responsibilities:
- Mount guest sub-routers under `/v1/guest`.
"""

from __future__ import annotations

from fastapi import APIRouter

from selfserve_api.api.routers.guest import hotel, messages, profile, requests

router = APIRouter(prefix="/v1/guest", tags=["guest"])

## Every included router requires a guest principal (see `access.guest_access`).
router.include_router(profile.router, prefix="/profile")
router.include_router(messages.router, prefix="/messages")
router.include_router(requests.router, prefix="/general-requests")
router.include_router(hotel.router, prefix="/hotel")
