"""
Tenant context resolution tests.
"""

import pytest

from app.core.errors import UnauthenticatedError
from app.core.tenancy import TenantContext, resolve_tenant


class TestResolveTenant:
    async def test_by_id(self, session, seed):
        tenant = await resolve_tenant(session, str(seed.acme.id))
        assert tenant.slug == "acme"

    async def test_by_slug(self, session, seed):
        tenant = await resolve_tenant(session, "globex")
        assert tenant.id == seed.globex.id

    async def test_unknown(self, session, seed):
        assert await resolve_tenant(session, "nobody") is None
        assert await resolve_tenant(session, "   ") is None

    async def test_out_of_range_id(self, session, seed):
        assert await resolve_tenant(session, "99999999999999999999") is None


def test_empty_context():
    context = TenantContext()
    assert context.get_tenant_id() is None
    with pytest.raises(UnauthenticatedError):
        context.require_tenant_id()


@pytest.mark.asyncio
async def test_missing_header_is_unauthenticated(client, seed):
    r = await client.get("/api/v1/tasks")
    assert r.status_code == 401
    assert r.json() == {
        "error": {"code": "UNAUTHENTICATED", "message": "Tenant context is required but not set", "status": 401}
    }


@pytest.mark.asyncio
async def test_unknown_tenant_is_forbidden(client, seed):
    r = await client.get("/api/v1/tasks", headers={"X-Tenant-ID": "99999"})
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_oversized_tenant_id_is_forbidden(client, seed):
    r = await client.get("/api/v1/tasks", headers={"X-Tenant-ID": "99999999999999999999"})
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_suspended_tenant_is_forbidden(client, seed, headers):
    r = await client.get("/api/v1/tasks", headers=headers.frozen)
    assert r.status_code == 403
    assert "suspended" in r.json()["error"]["message"]


@pytest.mark.asyncio
async def test_slug_header(client, seed):
    r = await client.get("/api/v1/projects", headers={"X-Tenant-ID": "acme"})
    assert r.status_code == 200
    assert {p["name"] for p in r.json()} == {"API Server", "Docs Site"}


@pytest.mark.asyncio
async def test_tenants_see_only_their_own_data(client, seed, headers):
    r = await client.get("/api/v1/tasks", headers=headers.globex)
    assert [t["title"] for t in r.json()] == ["Invoice export"]

    r = await client.get(f"/api/v1/tasks/{seed.tasks[0].id}", headers=headers.globex)
    assert r.status_code == 404

    r = await client.get(f"/api/v1/departments/{seed.eng.id}", headers=headers.globex)
    assert r.status_code == 404
