"""
Tenant context resolution.

The acting tenant is resolved once per request from the tenant header (numeric
id or slug). Routers then pass the resolved ``tenant_id`` explicitly into every
repository and service call; nothing below the API layer reads request state.
"""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_session
from app.core.errors import ForbiddenError, UnauthenticatedError
from app.models.tenant import Tenant
from app.repositories import tenants as tenant_repo
from taskforge_shared.schemas.common import MAX_ID, TenantStatus

log = structlog.get_logger()
settings = get_settings()


class TenantContext:
    """Per-request holder for the resolved tenant."""

    def __init__(self, tenant: Optional[Tenant] = None):
        self.tenant = tenant

    def get_tenant_id(self) -> Optional[int]:
        return self.tenant.id if self.tenant is not None else None

    def require_tenant_id(self) -> int:
        tenant_id = self.get_tenant_id()
        if tenant_id is None:
            raise UnauthenticatedError("Tenant context is required but not set")
        return tenant_id


async def resolve_tenant(session: AsyncSession, ref: str) -> Optional[Tenant]:
    """Look a tenant up by numeric id or by slug."""
    ref = ref.strip()
    if not ref:
        return None
    if ref.isascii() and ref.isdigit():
        tenant_id = int(ref)
        if tenant_id > MAX_ID:
            return None
        return await tenant_repo.get_tenant(session, tenant_id)
    return await tenant_repo.get_tenant_by_slug(session, ref)


async def get_tenant_context(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> TenantContext:
    """Resolve the tenant header into a ``TenantContext`` (possibly empty)."""
    ref = request.headers.get(settings.tenant_header)
    if not ref:
        return TenantContext()

    tenant = await resolve_tenant(session, ref)
    if tenant is None:
        log.info("tenant.unresolved", ref=ref)
        raise ForbiddenError("No tenant context available. Please select a tenant.")
    if tenant.status == TenantStatus.SUSPENDED.value:
        raise ForbiddenError("This organization has been suspended. Please contact support.")

    return TenantContext(tenant)


async def require_tenant(
    context: TenantContext = Depends(get_tenant_context),
) -> int:
    """Dependency yielding the acting tenant id; 401 when none was supplied."""
    return context.require_tenant_id()
