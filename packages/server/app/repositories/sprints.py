"""Sprint and sprint template stores.

Templates are tenant-scoped through their department, sprints through their
project.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.department import Department
from app.models.project import Project
from app.models.sprint import Sprint, SprintTemplate


# ---------------------------------------------------------------------------
# Sprint templates
# ---------------------------------------------------------------------------


def _tenant_templates(tenant_id: int):
    return (
        select(SprintTemplate)
        .join(Department, Department.id == SprintTemplate.department_id)
        .where(Department.tenant_id == tenant_id)
    )


async def get_template(
    session: AsyncSession, tenant_id: int, template_id: int
) -> Optional[SprintTemplate]:
    result = await session.execute(
        _tenant_templates(tenant_id).where(SprintTemplate.id == template_id)
    )
    return result.scalar_one_or_none()


async def list_templates(
    session: AsyncSession,
    tenant_id: int,
    *,
    department_id: Optional[int] = None,
    search: Optional[str] = None,
    offset: int = 0,
    limit: int = 100,
) -> list[SprintTemplate]:
    stmt = _tenant_templates(tenant_id)
    if department_id is not None:
        stmt = stmt.where(SprintTemplate.department_id == department_id)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(SprintTemplate.name.ilike(pattern), SprintTemplate.name_pattern.ilike(pattern))
        )
    result = await session.execute(
        stmt.order_by(SprintTemplate.is_default.desc(), SprintTemplate.id)
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())


async def clear_template_defaults(
    session: AsyncSession, tenant_id: int, department_id: int
) -> None:
    tenant_departments = select(Department.id).where(Department.tenant_id == tenant_id)
    await session.execute(
        update(SprintTemplate)
        .where(
            SprintTemplate.department_id == department_id,
            SprintTemplate.department_id.in_(tenant_departments),
            SprintTemplate.is_default.is_(True),
        )
        .values(is_default=False)
    )


async def add_template(session: AsyncSession, template: SprintTemplate) -> SprintTemplate:
    session.add(template)
    await session.flush()
    return template


async def delete_template(session: AsyncSession, template: SprintTemplate) -> None:
    await session.delete(template)
    await session.flush()


# ---------------------------------------------------------------------------
# Sprints
# ---------------------------------------------------------------------------


def _tenant_sprints(tenant_id: int):
    return (
        select(Sprint)
        .join(Project, Project.id == Sprint.project_id)
        .where(Project.tenant_id == tenant_id)
    )


async def get_sprint(
    session: AsyncSession, tenant_id: int, sprint_id: int
) -> Optional[Sprint]:
    result = await session.execute(_tenant_sprints(tenant_id).where(Sprint.id == sprint_id))
    return result.scalar_one_or_none()


async def list_sprints(
    session: AsyncSession, tenant_id: int, *, project_id: Optional[int] = None
) -> list[Sprint]:
    stmt = _tenant_sprints(tenant_id)
    if project_id is not None:
        stmt = stmt.where(Sprint.project_id == project_id).order_by(Sprint.start_date, Sprint.id)
    else:
        stmt = stmt.order_by(Sprint.created_at.desc(), Sprint.id.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def count_sprints(session: AsyncSession, tenant_id: int, project_id: int) -> int:
    result = await session.execute(
        select(func.count(Sprint.id))
        .join(Project, Project.id == Sprint.project_id)
        .where(Sprint.project_id == project_id, Project.tenant_id == tenant_id)
    )
    return result.scalar_one()


async def add_sprint(session: AsyncSession, sprint: Sprint) -> Sprint:
    session.add(sprint)
    await session.flush()
    return sprint


async def delete_sprint(session: AsyncSession, sprint: Sprint) -> None:
    await session.delete(sprint)
    await session.flush()
