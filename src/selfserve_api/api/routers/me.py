"""
selfserve_api.api.routers.me

Identity introspection for any provisioned caller.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from selfserve_api.api.schemas import ContextResponse
from selfserve_api.auth.deps import Authorized, authorize

router = APIRouter(prefix="/v1", tags=["identity"])


@router.get("/me", response_model=ContextResponse)
async def whoami(auth: Authorized = Depends(authorize())) -> ContextResponse:
    return ContextResponse.model_validate(auth.context.as_boundary())
