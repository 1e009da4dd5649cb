"""
selfserve_api.auth.roles

Role names the API recognises in guard configuration.
"""

from __future__ import annotations

MANAGER = "manager"
ADMIN = "admin"
STAFF = "staff"

# Roles allowed to create, re-role, edit and remove employees of their own hotel.
MANAGEMENT_ROLES: frozenset[str] = frozenset({MANAGER, ADMIN})
