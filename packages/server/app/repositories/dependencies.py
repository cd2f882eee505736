"""Task dependency store.

Edges are tenant-scoped through their owning task:
``dependency.task_id -> task.project_id -> project.tenant_id``.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.dependency import TaskDependency
from app.models.project import Project
from app.models.task import Task


def _tenant_edges(tenant_id: int):
    return (
        select(TaskDependency)
        .join(Task, Task.id == TaskDependency.task_id)
        .join(Project, Project.id == Task.project_id)
        .where(Project.tenant_id == tenant_id)
    )


async def add_dependency(
    session: AsyncSession, task_id: int, dependent_task_id: int
) -> TaskDependency:
    dep = TaskDependency(task_id=task_id, dependent_task_id=dependent_task_id)
    session.add(dep)
    await session.flush()
    return dep


async def get_dependency(
    session: AsyncSession, tenant_id: int, dependency_id: int
) -> Optional[TaskDependency]:
    result = await session.execute(
        _tenant_edges(tenant_id).where(TaskDependency.id == dependency_id)
    )
    return result.scalar_one_or_none()


async def find_edge(
    session: AsyncSession, tenant_id: int, task_id: int, dependent_task_id: int
) -> Optional[TaskDependency]:
    result = await session.execute(
        _tenant_edges(tenant_id).where(
            TaskDependency.task_id == task_id,
            TaskDependency.dependent_task_id == dependent_task_id,
        )
    )
    return result.scalar_one_or_none()


async def list_for_task(
    session: AsyncSession, tenant_id: int, task_id: int
) -> list[TaskDependency]:
    result = await session.execute(
        _tenant_edges(tenant_id)
        .where(TaskDependency.task_id == task_id)
        .order_by(TaskDependency.id)
    )
    return list(result.scalars().all())


async def list_edges(session: AsyncSession, tenant_id: int) -> list[tuple[int, int]]:
    """All ``(task_id, dependent_task_id)`` pairs owned by the tenant."""
    result = await session.execute(
        select(TaskDependency.task_id, TaskDependency.dependent_task_id)
        .join(Task, Task.id == TaskDependency.task_id)
        .join(Project, Project.id == Task.project_id)
        .where(Project.tenant_id == tenant_id)
        .order_by(TaskDependency.id)
    )
    return [(row[0], row[1]) for row in result.all()]


async def delete_dependency(session: AsyncSession, dep: TaskDependency) -> None:
    await session.delete(dep)
    await session.flush()
