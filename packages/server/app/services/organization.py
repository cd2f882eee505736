"""
Department and project service.
"""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, NotFoundError
from app.models.department import Department
from app.models.project import Project
from app.repositories import departments as department_repo
from app.repositories import projects as project_repo
from taskforge_shared.schemas.organization import DepartmentCreate, ProjectCreate

log = structlog.get_logger()


async def create_department(
    session: AsyncSession, tenant_id: int, department_in: DepartmentCreate
) -> Department:
    if await department_repo.get_department_by_code(session, tenant_id, department_in.code):
        raise ConflictError(f'Department with code "{department_in.code}" already exists')

    department = await department_repo.add_department(
        session,
        Department(tenant_id=tenant_id, **department_in.model_dump()),
    )
    log.info("department.created", tenant_id=tenant_id, department_id=department.id)
    return department


async def get_department(session: AsyncSession, tenant_id: int, department_id: int) -> Department:
    department = await department_repo.get_department(session, tenant_id, department_id)
    if department is None:
        raise NotFoundError("Department not found")
    return department


async def list_departments(
    session: AsyncSession, tenant_id: int, *, page: int = 1, per_page: int = 25
) -> list[Department]:
    return await department_repo.list_departments(
        session, tenant_id, offset=(page - 1) * per_page, limit=per_page
    )


async def create_project(
    session: AsyncSession, tenant_id: int, project_in: ProjectCreate
) -> Project:
    if project_in.department_id is not None:
        if await department_repo.get_department(session, tenant_id, project_in.department_id) is None:
            raise NotFoundError("Department not found in this tenant")

    project = await project_repo.add_project(
        session,
        Project(tenant_id=tenant_id, **project_in.model_dump()),
    )
    log.info("project.created", tenant_id=tenant_id, project_id=project.id)
    return project


async def get_project(session: AsyncSession, tenant_id: int, project_id: int) -> Project:
    project = await project_repo.get_project(session, tenant_id, project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


async def list_projects(
    session: AsyncSession,
    tenant_id: int,
    *,
    department_id: Optional[int] = None,
    page: int = 1,
    per_page: int = 25,
) -> list[Project]:
    return await project_repo.list_projects(
        session,
        tenant_id,
        department_id=department_id,
        offset=(page - 1) * per_page,
        limit=per_page,
    )
