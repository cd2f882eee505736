"""Task status store.

Tenant-owned rows carry ``tenant_id``. Rows with ``tenant_id`` NULL are
system templates: readable by every tenant, writable by none. A status's
*scope* is the exact ``(project_id, department_id)`` pair, either of which
may be NULL.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.task_status import TaskStatus
from taskforge_shared.schemas.task_statuses import DEFAULT_STATUS_SET


def _visible_to(tenant_id: int):
    return or_(TaskStatus.tenant_id == tenant_id, TaskStatus.tenant_id.is_(None))


def _in_scope(project_id: Optional[int], department_id: Optional[int]) -> list:
    return [
        TaskStatus.project_id == project_id if project_id is not None else TaskStatus.project_id.is_(None),
        TaskStatus.department_id == department_id if department_id is not None else TaskStatus.department_id.is_(None),
    ]


async def get_status(
    session: AsyncSession, tenant_id: int, status_id: int
) -> Optional[TaskStatus]:
    """A status visible to the tenant (its own or a system template)."""
    result = await session.execute(
        select(TaskStatus).where(TaskStatus.id == status_id, _visible_to(tenant_id))
    )
    return result.scalar_one_or_none()


async def get_owned_status(
    session: AsyncSession, tenant_id: int, status_id: int
) -> Optional[TaskStatus]:
    """A status the tenant may modify."""
    result = await session.execute(
        select(TaskStatus).where(TaskStatus.id == status_id, TaskStatus.tenant_id == tenant_id)
    )
    return result.scalar_one_or_none()


async def find_by_code(
    session: AsyncSession,
    tenant_id: int,
    project_id: Optional[int],
    department_id: Optional[int],
    code: str,
) -> Optional[TaskStatus]:
    result = await session.execute(
        select(TaskStatus)
        .where(TaskStatus.code == code, _visible_to(tenant_id), *_in_scope(project_id, department_id))
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_scope(
    session: AsyncSession,
    tenant_id: int,
    project_id: Optional[int],
    department_id: Optional[int],
) -> list[TaskStatus]:
    """Statuses in one exact scope, ordered by ``sort_order``."""
    result = await session.execute(
        select(TaskStatus)
        .where(_visible_to(tenant_id), *_in_scope(project_id, department_id))
        .order_by(TaskStatus.sort_order, TaskStatus.id)
    )
    return list(result.scalars().all())


async def list_statuses(
    session: AsyncSession,
    tenant_id: int,
    *,
    project_id: Optional[int] = None,
    department_id: Optional[int] = None,
    search: Optional[str] = None,
    offset: int = 0,
    limit: int = 100,
) -> list[TaskStatus]:
    stmt = select(TaskStatus).where(_visible_to(tenant_id))
    if project_id is not None:
        stmt = stmt.where(TaskStatus.project_id == project_id)
    if department_id is not None:
        stmt = stmt.where(TaskStatus.department_id == department_id)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(TaskStatus.name.ilike(pattern), TaskStatus.code.ilike(pattern)))
    result = await session.execute(
        stmt.order_by(TaskStatus.sort_order, TaskStatus.id).offset(offset).limit(limit)
    )
    return list(result.scalars().all())


async def clear_defaults(
    session: AsyncSession,
    tenant_id: int,
    project_id: Optional[int],
    department_id: Optional[int],
) -> None:
    """Unset ``is_default`` on every tenant-owned status in the scope."""
    await session.execute(
        update(TaskStatus)
        .where(
            TaskStatus.tenant_id == tenant_id,
            TaskStatus.is_default.is_(True),
            *_in_scope(project_id, department_id),
        )
        .values(is_default=False)
    )


async def add_status(session: AsyncSession, status: TaskStatus) -> TaskStatus:
    session.add(status)
    await session.flush()
    return status


async def delete_status(session: AsyncSession, status: TaskStatus) -> None:
    await session.delete(status)
    await session.flush()


async def add_default_statuses(
    session: AsyncSession, tenant_id: int, project_id: int
) -> list[TaskStatus]:
    """Stage the built-in default set for a project and flush it in one go."""
    created = [
        TaskStatus(tenant_id=tenant_id, project_id=project_id, **fields)
        for fields in DEFAULT_STATUS_SET
    ]
    session.add_all(created)
    await session.flush()
    return created
