"""
Task endpoints: CRUD, dependency graph, sprint assignment.

Dependencies:
- POST adds "task depends on dependentTaskId"; self-loops and cycles → 400,
  duplicates → 409, tasks outside the tenant → 404.
- DELETE removes one edge by id.
- Audit/notification events are dispatched after commit, as background tasks.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.params import ResourceId
from app.core.activity import ActivitySink, get_activity_sink
from app.core.database import get_session
from app.core.tenancy import require_tenant
from app.services.dependencies import add_dependency, list_dependencies, remove_dependency
from app.services.sprints import assign_task
from app.services.tasks import create_task, delete_task, get_task_or_404, list_tasks
from taskforge_shared.schemas.common import MAX_ID
from taskforge_shared.schemas.dependencies import DependencyAdd, DependencyRead
from taskforge_shared.schemas.sprints import SprintTaskAssign
from taskforge_shared.schemas.tasks import TaskCreate, TaskRead

router = APIRouter()


# ---------------------------------------------------------------------------
# Task CRUD
# ---------------------------------------------------------------------------


@router.get("", response_model=List[TaskRead])
async def list_tasks_endpoint(
    project_id: Optional[int] = Query(None, alias="projectId", ge=1, le=MAX_ID),
    page: int = Query(1, ge=1),
    per_page: int = Query(25, ge=1, le=100),
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    """List live tasks, optionally for one project."""
    return await list_tasks(session, tenant_id, project_id=project_id, page=page, per_page=per_page)


@router.post("", response_model=TaskRead, status_code=201)
async def create_task_endpoint(
    task_in: TaskCreate,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    """Create a task in a project."""
    task = await create_task(session, tenant_id, task_in)
    await session.commit()
    background.add_task(
        sink.emit,
        tenant_id,
        "task.created",
        {"task_id": task.id, "project_id": task.project_id, "status": task.status},
    )
    return task


@router.get("/{task_id}", response_model=TaskRead)
async def get_task_endpoint(
    task_id: ResourceId,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    return await get_task_or_404(session, tenant_id, task_id)


@router.delete("/{task_id}", status_code=204)
async def delete_task_endpoint(
    task_id: ResourceId,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    """Soft-delete a task."""
    await delete_task(session, tenant_id, task_id)
    await session.commit()
    background.add_task(sink.emit, tenant_id, "task.deleted", {"task_id": task_id})
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


@router.post("/{task_id}/dependencies", response_model=DependencyRead, status_code=201)
async def add_dependency_endpoint(
    task_id: ResourceId,
    body: DependencyAdd,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    """Add a dependency (task depends on dependentTaskId). Detects circular deps."""
    dep = await add_dependency(session, tenant_id, task_id, body.dependent_task_id)
    await session.commit()
    background.add_task(
        sink.emit,
        tenant_id,
        "task.dependency.added",
        {"dependency_id": dep.id, "task_id": task_id, "dependent_task_id": body.dependent_task_id},
    )
    return dep


@router.get("/{task_id}/dependencies", response_model=List[DependencyRead])
async def list_dependencies_endpoint(
    task_id: ResourceId,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    """Everything this task depends on."""
    return await list_dependencies(session, tenant_id, task_id)


@router.delete("/{task_id}/dependencies/{dependency_id}", status_code=204)
async def remove_dependency_endpoint(
    task_id: ResourceId,
    dependency_id: ResourceId,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    """Remove a dependency."""
    dep = await remove_dependency(session, tenant_id, dependency_id, task_id=task_id)
    await session.commit()
    background.add_task(
        sink.emit,
        tenant_id,
        "task.dependency.removed",
        {"dependency_id": dependency_id, "task_id": dep.task_id, "dependent_task_id": dep.dependent_task_id},
    )
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Sprint assignment
# ---------------------------------------------------------------------------


@router.patch("/{task_id}/sprint", response_model=TaskRead)
async def assign_task_sprint_endpoint(
    task_id: ResourceId,
    body: SprintTaskAssign,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    task = await assign_task(session, tenant_id, task_id, body.sprint_id)
    await session.commit()
    background.add_task(
        sink.emit, tenant_id, "task.sprint_assigned", {"task_id": task_id, "sprint_id": body.sprint_id}
    )
    return task
