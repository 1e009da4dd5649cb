"""
selfserve_api.auth.errors

Authorization outcome taxonomy.

Responsibilities:
- Give every failure mode of the authorization layer a distinct, stable kind.
- Carry the HTTP status each kind maps to at the request boundary.
"""

from __future__ import annotations

from typing import ClassVar


class AuthError(Exception):
    """
    Base class for authorization outcomes that terminate a request.

    `kind` and `status_code` are part of the public API contract; clients
    branch on `kind`, so treat the values as stable.
    """

    kind: ClassVar[str] = "AuthError"
    status_code: ClassVar[int] = 500
    default_message: ClassVar[str] = "Authorization error"
    retryable: ClassVar[bool] = False

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AuthError):
    kind = "Unauthenticated"
    status_code = 401
    default_message = "Unauthorized"


class PrincipalNotFound(AuthError):
    kind = "PrincipalNotFound"
    status_code = 404
    default_message = "User not found"


class Forbidden(AuthError):
    kind = "Forbidden"
    status_code = 403
    default_message = "Access denied"


class TenantMismatch(AuthError):
    kind = "TenantMismatch"
    status_code = 403
    default_message = "Hotel scope mismatch"


class LookupFailure(AuthError):
    # Infrastructure fault; the data-access collaborator may retry, this layer never does.
    kind = "LookupFailure"
    status_code = 500
    default_message = "Identity lookup failed"
    retryable = True


# --- Module Notes -----------------------------------------------------------
# Guards raise nothing themselves; they return a `Deny(error)` carrying one of
# these and the pipeline surfaces it unchanged.
