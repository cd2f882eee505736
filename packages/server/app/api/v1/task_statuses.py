"""
Task status endpoints.

``GET /by-project`` resolves a project's workflow: project statuses, else its
department's, else the built-in six are created for the project on the spot.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.params import ResourceId
from app.core.activity import ActivitySink, get_activity_sink
from app.core.database import get_session
from app.core.tenancy import require_tenant
from app.services.task_statuses import (
    create_status,
    delete_status,
    get_status,
    initialize_default_statuses,
    list_statuses,
    reorder_statuses,
    resolve_statuses_for_project,
    update_status,
)
from taskforge_shared.schemas.common import MAX_ID
from taskforge_shared.schemas.task_statuses import (
    StatusReorder,
    TaskStatusCreate,
    TaskStatusRead,
    TaskStatusUpdate,
)

router = APIRouter()


@router.post("", response_model=TaskStatusRead, status_code=201)
async def create_status_endpoint(
    status_in: TaskStatusCreate,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    """Create a status scoped to a project, a department, or the tenant."""
    status = await create_status(session, tenant_id, status_in)
    await session.commit()
    background.add_task(
        sink.emit,
        tenant_id,
        "task_status.created",
        {"status_id": status.id, "code": status.code, "project_id": status.project_id, "department_id": status.department_id},
    )
    return status


@router.get("", response_model=List[TaskStatusRead])
async def list_statuses_endpoint(
    project_id: Optional[int] = Query(None, alias="projectId", ge=1, le=MAX_ID),
    department_id: Optional[int] = Query(None, alias="departmentId", ge=1, le=MAX_ID),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(25, ge=1, le=100),
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    """List statuses visible to the tenant (including system templates)."""
    return await list_statuses(
        session,
        tenant_id,
        project_id=project_id,
        department_id=department_id,
        search=search,
        page=page,
        per_page=per_page,
    )


@router.get("/by-project", response_model=List[TaskStatusRead])
async def statuses_by_project_endpoint(
    project_id: Optional[int] = Query(None, alias="projectId", ge=1, le=MAX_ID),
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    """Statuses for a project, with department fallback and default bootstrap."""
    if project_id is None:
        return []
    statuses = await resolve_statuses_for_project(session, tenant_id, project_id)
    await session.commit()
    return statuses


@router.post("/reorder", response_model=List[TaskStatusRead])
async def reorder_statuses_endpoint(
    body: StatusReorder,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    statuses = await reorder_statuses(session, tenant_id, body.status_ids)
    await session.commit()
    return statuses


@router.post("/initialize/{project_id}", response_model=List[TaskStatusRead], status_code=201)
async def initialize_statuses_endpoint(
    project_id: ResourceId,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    """Give a project its own copy of the default statuses."""
    statuses = await initialize_default_statuses(session, tenant_id, project_id)
    await session.commit()
    return statuses


@router.get("/{status_id}", response_model=TaskStatusRead)
async def get_status_endpoint(
    status_id: ResourceId,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    return await get_status(session, tenant_id, status_id)


@router.patch("/{status_id}", response_model=TaskStatusRead)
async def update_status_endpoint(
    status_id: ResourceId,
    status_in: TaskStatusUpdate,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    status = await update_status(session, tenant_id, status_id, status_in)
    await session.commit()
    background.add_task(
        sink.emit,
        tenant_id,
        "task_status.updated",
        {"status_id": status.id, **status_in.model_dump(exclude_unset=True, mode="json")},
    )
    return status


@router.delete("/{status_id}", status_code=204)
async def delete_status_endpoint(
    status_id: ResourceId,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    """Delete a non-default status."""
    await delete_status(session, tenant_id, status_id)
    await session.commit()
    background.add_task(sink.emit, tenant_id, "task_status.deleted", {"status_id": status_id})
    return Response(status_code=204)
