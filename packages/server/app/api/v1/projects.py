"""
Department and project endpoints, plus the project-scoped sprint routes.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.params import ResourceId
from app.core.activity import ActivitySink, get_activity_sink
from app.core.database import get_session
from app.core.tenancy import require_tenant
from app.services.organization import (
    create_department,
    create_project,
    get_department,
    get_project,
    list_departments,
    list_projects,
)
from app.services.sprints import (
    create_sprint,
    create_sprint_from_template,
    list_department_templates,
    list_sprints,
)
from taskforge_shared.schemas.common import MAX_ID
from taskforge_shared.schemas.organization import (
    DepartmentCreate,
    DepartmentRead,
    ProjectCreate,
    ProjectRead,
)
from taskforge_shared.schemas.sprints import (
    SprintCreate,
    SprintFromTemplate,
    SprintRead,
    SprintTemplateRead,
)

router = APIRouter()
departments_router = APIRouter()


# ---------------------------------------------------------------------------
# Departments
# ---------------------------------------------------------------------------


@departments_router.post("", response_model=DepartmentRead, status_code=201)
async def create_department_endpoint(
    department_in: DepartmentCreate,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    department = await create_department(session, tenant_id, department_in)
    await session.commit()
    return department


@departments_router.get("", response_model=List[DepartmentRead])
async def list_departments_endpoint(
    page: int = Query(1, ge=1),
    per_page: int = Query(25, ge=1, le=100),
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    return await list_departments(session, tenant_id, page=page, per_page=per_page)


@departments_router.get("/{department_id}", response_model=DepartmentRead)
async def get_department_endpoint(
    department_id: ResourceId,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    return await get_department(session, tenant_id, department_id)


@departments_router.get("/{department_id}/sprint-templates", response_model=List[SprintTemplateRead])
async def department_templates_endpoint(
    department_id: ResourceId,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    """All sprint templates of a department, default first."""
    return await list_department_templates(session, tenant_id, department_id)


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project_endpoint(
    project_in: ProjectCreate,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    project = await create_project(session, tenant_id, project_in)
    await session.commit()
    return project


@router.get("", response_model=List[ProjectRead])
async def list_projects_endpoint(
    department_id: Optional[int] = Query(None, alias="departmentId", ge=1, le=MAX_ID),
    page: int = Query(1, ge=1),
    per_page: int = Query(25, ge=1, le=100),
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    return await list_projects(
        session, tenant_id, department_id=department_id, page=page, per_page=per_page
    )


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project_endpoint(
    project_id: ResourceId,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    return await get_project(session, tenant_id, project_id)


# ---------------------------------------------------------------------------
# Project sprints
# ---------------------------------------------------------------------------


@router.post("/{project_id}/sprints", response_model=SprintRead, status_code=201)
async def create_project_sprint_endpoint(
    project_id: ResourceId,
    sprint_in: SprintCreate,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    sprint = await create_sprint(session, tenant_id, project_id, sprint_in)
    await session.commit()
    background.add_task(
        sink.emit, tenant_id, "sprint.created", {"sprint_id": sprint.id, "project_id": project_id}
    )
    return sprint


@router.get("/{project_id}/sprints", response_model=List[SprintRead])
async def list_project_sprints_endpoint(
    project_id: ResourceId,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
):
    return await list_sprints(session, tenant_id, project_id)


@router.post("/{project_id}/sprints/from-template", response_model=SprintRead, status_code=201)
async def create_sprint_from_template_endpoint(
    project_id: ResourceId,
    body: SprintFromTemplate,
    background: BackgroundTasks,
    tenant_id: int = Depends(require_tenant),
    session: AsyncSession = Depends(get_session),
    sink: ActivitySink = Depends(get_activity_sink),
):
    """Create the project's next sprint from a template."""
    sprint = await create_sprint_from_template(session, tenant_id, project_id, body.template_id)
    await session.commit()
    background.add_task(
        sink.emit,
        tenant_id,
        "sprint.created_from_template",
        {"sprint_id": sprint.id, "project_id": project_id, "template_id": body.template_id},
    )
    return sprint
