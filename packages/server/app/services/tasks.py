"""
Task service: creation within a project, lookups, soft delete.

Status codes are validated against the statuses that apply to the task's
project (project -> department -> built-in set).
"""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidArgumentError, NotFoundError
from app.models.task import Task
from app.repositories import projects as project_repo
from app.repositories import tasks as task_repo
from app.services.task_statuses import resolve_statuses_for_project
from taskforge_shared.schemas.common import DEFAULT_TASK_STATUS_CODE
from taskforge_shared.schemas.tasks import TaskCreate

log = structlog.get_logger()


async def get_task_or_404(session: AsyncSession, tenant_id: int, task_id: int) -> Task:
    task = await task_repo.get_task(session, tenant_id, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    return task


async def create_task(session: AsyncSession, tenant_id: int, task_in: TaskCreate) -> Task:
    if await project_repo.get_project(session, tenant_id, task_in.project_id) is None:
        raise NotFoundError("Project not found in this tenant")

    if task_in.parent_task_id is not None:
        await get_task_or_404(session, tenant_id, task_in.parent_task_id)

    statuses = await resolve_statuses_for_project(session, tenant_id, task_in.project_id)
    codes = {s.code for s in statuses}
    if task_in.status:
        if task_in.status not in codes:
            raise InvalidArgumentError(
                f'Status "{task_in.status}" does not belong to the project\'s workflow'
            )
        status_code = task_in.status
    else:
        default = next((s for s in statuses if s.is_default), None)
        status_code = default.code if default else DEFAULT_TASK_STATUS_CODE

    task = await task_repo.add_task(
        session,
        Task(
            project_id=task_in.project_id,
            parent_task_id=task_in.parent_task_id,
            title=task_in.title,
            description=task_in.description,
            status=status_code,
        ),
    )
    log.info("task.created", tenant_id=tenant_id, task_id=task.id, project_id=task.project_id)
    return task


async def list_tasks(
    session: AsyncSession,
    tenant_id: int,
    *,
    project_id: Optional[int] = None,
    page: int = 1,
    per_page: int = 25,
) -> list[Task]:
    return await task_repo.list_tasks(
        session,
        tenant_id,
        project_id=project_id,
        offset=(page - 1) * per_page,
        limit=per_page,
    )


async def delete_task(session: AsyncSession, tenant_id: int, task_id: int) -> Task:
    task = await get_task_or_404(session, tenant_id, task_id)
    await task_repo.soft_delete_task(session, task)
    log.info("task.deleted", tenant_id=tenant_id, task_id=task_id)
    return task
