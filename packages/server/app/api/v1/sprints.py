"""
Sprint and sprint template endpoints.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.params import ResourceId
from app.core.activity import ActivitySink, get_activity_sink
from app.core.database import get_session
from app.core.tenancy import require_tenant
from app.services.sprints import (
    create_sprint,
    create_template,
    delete_sprint,
    delete_template,
    get_sprint,
    get_template,
    list_sprints,
    list_templates,
    update_sprint,
    update_template,
)
from taskforge_shared.schemas.common import MAX_ID
from taskforge_shared.schemas.sprints import (
    SprintCreate,
    SprintRead,
    SprintTemplateCreate,
    SprintTemplateRead,
    SprintTemplateUpdate,
    SprintUpdate,
)

router = APIRouter()
templates_router = APIRouter()


# ---------------------------------------------------------------------------
# Sprints
# ---------------------------------------------------------------------------


@router.post("", response_model=SprintRead, status_code=201)
async def create_sprint_endpoint(
    sprint_in: SprintCreate,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    """Create a sprint; the body must name its project."""
    sprint = await create_sprint(session, tenant_id, sprint_in.project_id, sprint_in)
    await session.commit()
    background.add_task(
        sink.emit, tenant_id, "sprint.created", {"sprint_id": sprint.id, "project_id": sprint.project_id}
    )
    return sprint


@router.get("", response_model=List[SprintRead])
async def list_sprints_endpoint(
    project_id: Optional[int] = Query(None, alias="projectId", ge=1, le=MAX_ID),
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    return await list_sprints(session, tenant_id, project_id)


@router.get("/{sprint_id}", response_model=SprintRead)
async def get_sprint_endpoint(
    sprint_id: ResourceId,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    return await get_sprint(session, tenant_id, sprint_id)


@router.patch("/{sprint_id}", response_model=SprintRead)
async def update_sprint_endpoint(
    sprint_id: ResourceId,
    sprint_in: SprintUpdate,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    sprint = await update_sprint(session, tenant_id, sprint_id, sprint_in)
    await session.commit()
    return sprint


@router.delete("/{sprint_id}", status_code=204)
async def delete_sprint_endpoint(
    sprint_id: ResourceId,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    await delete_sprint(session, tenant_id, sprint_id)
    await session.commit()
    background.add_task(sink.emit, tenant_id, "sprint.deleted", {"sprint_id": sprint_id})
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Sprint templates
# ---------------------------------------------------------------------------


@templates_router.post("", response_model=SprintTemplateRead, status_code=201)
async def create_template_endpoint(
    template_in: SprintTemplateCreate,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    template = await create_template(session, tenant_id, template_in)
    await session.commit()
    background.add_task(
        sink.emit,
        tenant_id,
        "sprint_template.created",
        {"template_id": template.id, "department_id": template.department_id},
    )
    return template


@templates_router.get("", response_model=List[SprintTemplateRead])
async def list_templates_endpoint(
    department_id: Optional[int] = Query(None, alias="departmentId", ge=1, le=MAX_ID),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(25, ge=1, le=100),
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    """List templates, defaults first."""
    return await list_templates(
        session, tenant_id, department_id=department_id, search=search, page=page, per_page=per_page
    )


@templates_router.get("/{template_id}", response_model=SprintTemplateRead)
async def get_template_endpoint(
    template_id: ResourceId,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    return await get_template(session, tenant_id, template_id)


@templates_router.patch("/{template_id}", response_model=SprintTemplateRead)
async def update_template_endpoint(
    template_id: ResourceId,
    template_in: SprintTemplateUpdate,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    template = await update_template(session, tenant_id, template_id, template_in)
    await session.commit()
    return template


@templates_router.delete("/{template_id}", status_code=204)
async def delete_template_endpoint(
    template_id: ResourceId,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    await delete_template(session, tenant_id, template_id)
    await session.commit()
    return Response(status_code=204)
