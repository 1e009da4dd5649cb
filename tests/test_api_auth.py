"""
tests.test_api_auth

HTTP status mapping of authorization outcomes.
"""

from __future__ import annotations

import pytest

from selfserve_api.auth.deps import get_identity_resolver
from selfserve_api.auth.resolver import IdentityResolver


@pytest.mark.asyncio
async def test_missing_token_is_401(client) -> None:
    r = await client.get("/v1/me")

    assert r.status_code == 401
    assert r.json()["error"]["kind"] == "Unauthenticated"


@pytest.mark.asyncio
async def test_invalid_token_is_401(client) -> None:
    r = await client.get("/v1/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert r.status_code == 401


@pytest.mark.asyncio
async def test_unprovisioned_identity_is_404(client, auth_headers) -> None:
    r = await client.get("/v1/me", headers=auth_headers("someone-new"))

    assert r.status_code == 404
    assert r.json()["error"]["kind"] == "PrincipalNotFound"


@pytest.mark.asyncio
async def test_me_returns_employee_boundary(client, auth_headers) -> None:
    r = await client.get("/v1/me", headers=auth_headers("ext-1"))

    assert r.status_code == 200
    assert r.json() == {
        "principalKind": "EMPLOYEE",
        "principalId": "e1",
        "hotelId": "h1",
        "roleName": "manager",
    }


@pytest.mark.asyncio
async def test_guest_on_employee_endpoint_is_403(client, auth_headers) -> None:
    r = await client.get("/v1/management/employees/me", headers=auth_headers("guest-1"))

    assert r.status_code == 403
    assert r.json()["error"] == {"kind": "Forbidden", "message": "employee role required"}


@pytest.mark.asyncio
async def test_employee_on_guest_endpoint_is_403(client, auth_headers) -> None:
    r = await client.get("/v1/guest/profile", headers=auth_headers("ext-1"))

    assert r.status_code == 403
    assert r.json()["error"]["message"] == "guest role required"


@pytest.mark.asyncio
async def test_lookup_failure_is_500_without_internals(
    app, client, auth_headers, principal_store, role_directory
) -> None:
    principal_store.fail = True
    app.dependency_overrides[get_identity_resolver] = lambda: IdentityResolver(
        principals=principal_store, roles=role_directory
    )
    try:
        r = await client.get("/v1/me", headers=auth_headers("guest-1"))
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 500
    body = r.json()
    assert body["error"]["kind"] == "LookupFailure"
    assert "cause" not in body["error"]
    assert "store unreachable" not in r.text
