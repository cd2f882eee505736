"""Task store.

Tasks have no tenant column; every query joins through ``projects`` and
filters on ``Project.tenant_id``. Soft-deleted tasks are invisible.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.project import Project
from app.models.task import Task


def _tenant_tasks(tenant_id: int):
    return (
        select(Task)
        .join(Project, Project.id == Task.project_id)
        .where(Project.tenant_id == tenant_id, Task.deleted_at.is_(None))
    )


async def get_task(session: AsyncSession, tenant_id: int, task_id: int) -> Optional[Task]:
    result = await session.execute(_tenant_tasks(tenant_id).where(Task.id == task_id))
    return result.scalar_one_or_none()


async def get_tasks(
    session: AsyncSession, tenant_id: int, task_ids: Iterable[int]
) -> list[Task]:
    ids = list(set(task_ids))
    result = await session.execute(_tenant_tasks(tenant_id).where(Task.id.in_(ids)))
    return list(result.scalars().all())


async def list_tasks(
    session: AsyncSession,
    tenant_id: int,
    *,
    project_id: Optional[int] = None,
    offset: int = 0,
    limit: int = 100,
) -> list[Task]:
    stmt = _tenant_tasks(tenant_id)
    if project_id is not None:
        stmt = stmt.where(Task.project_id == project_id)
    result = await session.execute(stmt.order_by(Task.id).offset(offset).limit(limit))
    return list(result.scalars().all())


async def add_task(session: AsyncSession, task: Task) -> Task:
    session.add(task)
    await session.flush()
    return task


async def soft_delete_task(session: AsyncSession, task: Task) -> Task:
    task.deleted_at = datetime.now(timezone.utc)
    session.add(task)
    await session.flush()
    return task
