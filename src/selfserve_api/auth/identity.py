"""
selfserve_api.auth.identity

Identity-provider collaborator.

Responsibilities:
- Turn an inbound request into a verified external subject id, or nothing.
"""

from __future__ import annotations

from typing import Protocol

from starlette.requests import Request

from selfserve_api.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from selfserve_api.observability.logging import get_logger

log = get_logger(__name__)


class IdentityProvider(Protocol):
    def verified_subject(self, request: Request) -> str | None: ...


class BearerTokenIdentityProvider:
    """
    Validates `Authorization: Bearer <jwt>` and returns its `sub` claim.

    Missing, malformed and invalid tokens all yield None; the authentication
    guard turns that into `Unauthenticated`.
    """

    def __init__(self, cfg: JwtConfig) -> None:
        self._cfg = cfg

    def verified_subject(self, request: Request) -> str | None:
        header = request.headers.get("authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None

        try:
            payload = decode_and_validate(cfg=self._cfg, token=token.strip())
        except JwtValidationError as e:
            log.info("token_rejected", reason=str(e))
            return None

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            return None
        return subject
