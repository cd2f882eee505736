"""Project store: every lookup is filtered by ``tenant_id``."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.project import Project


async def get_project(
    session: AsyncSession, tenant_id: int, project_id: int
) -> Optional[Project]:
    result = await session.execute(
        select(Project).where(
            Project.id == project_id,
            Project.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def list_projects(
    session: AsyncSession,
    tenant_id: int,
    *,
    department_id: Optional[int] = None,
    offset: int = 0,
    limit: int = 100,
) -> list[Project]:
    stmt = select(Project).where(Project.tenant_id == tenant_id)
    if department_id is not None:
        stmt = stmt.where(Project.department_id == department_id)
    result = await session.execute(stmt.order_by(Project.id).offset(offset).limit(limit))
    return list(result.scalars().all())


async def add_project(session: AsyncSession, project: Project) -> Project:
    session.add(project)
    await session.flush()
    return project
