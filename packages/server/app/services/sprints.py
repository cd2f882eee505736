"""
Sprint templates and sprints.

Templates belong to a department and carry the same single-default rule as
task statuses: marking one default clears its siblings first. A template
stamps out sprints for a project, numbering them after the project's existing
sprint count.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.errors import InvalidArgumentError, NotFoundError
from app.models.sprint import Sprint, SprintTemplate
from app.models.task import Task
from app.repositories import departments as department_repo
from app.repositories import projects as project_repo
from app.repositories import sprints as sprint_repo
from app.repositories import tasks as task_repo
from taskforge_shared.schemas.common import SprintStatus
from taskforge_shared.schemas.sprints import (
    SprintCreate,
    SprintTemplateCreate,
    SprintTemplateUpdate,
    SprintUpdate,
    render_sprint_name,
)

log = structlog.get_logger()
settings = get_settings()


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


async def create_template(
    session: AsyncSession, tenant_id: int, template_in: SprintTemplateCreate
) -> SprintTemplate:
    if await department_repo.get_department(session, tenant_id, template_in.department_id) is None:
        raise NotFoundError("Department not found in this tenant")

    if template_in.is_default:
        await sprint_repo.clear_template_defaults(session, tenant_id, template_in.department_id)

    template = await sprint_repo.add_template(
        session,
        SprintTemplate(
            department_id=template_in.department_id,
            name=template_in.name,
            name_pattern=template_in.name_pattern or None,
            duration_days=template_in.duration_days or settings.default_sprint_duration_days,
            goal_template=template_in.goal_template or None,
            is_default=template_in.is_default,
        ),
    )
    log.info("sprint_template.created", tenant_id=tenant_id, template_id=template.id)
    return template


async def get_template(session: AsyncSession, tenant_id: int, template_id: int) -> SprintTemplate:
    template = await sprint_repo.get_template(session, tenant_id, template_id)
    if template is None:
        raise NotFoundError("Sprint template not found in this tenant")
    return template


async def list_templates(
    session: AsyncSession,
    tenant_id: int,
    *,
    department_id: Optional[int] = None,
    search: Optional[str] = None,
    page: int = 1,
    per_page: int = 25,
) -> list[SprintTemplate]:
    return await sprint_repo.list_templates(
        session,
        tenant_id,
        department_id=department_id,
        search=search,
        offset=(page - 1) * per_page,
        limit=per_page,
    )


async def list_department_templates(
    session: AsyncSession, tenant_id: int, department_id: int
) -> list[SprintTemplate]:
    if await department_repo.get_department(session, tenant_id, department_id) is None:
        raise NotFoundError("Department not found in this tenant")
    return await sprint_repo.list_templates(session, tenant_id, department_id=department_id, limit=1000)


async def update_template(
    session: AsyncSession, tenant_id: int, template_id: int, template_in: SprintTemplateUpdate
) -> SprintTemplate:
    template = await get_template(session, tenant_id, template_id)
    data = template_in.model_dump(exclude_unset=True)

    if data.get("is_default") and not template.is_default:
        await sprint_repo.clear_template_defaults(session, tenant_id, template.department_id)

    if not data.get("name"):
        data.pop("name", None)
    if data.get("duration_days") is None:
        data.pop("duration_days", None)
    if data.get("is_default") is None:
        data.pop("is_default", None)

    for key, value in data.items():
        setattr(template, key, value)

    session.add(template)
    await session.flush()
    log.info("sprint_template.updated", tenant_id=tenant_id, template_id=template.id)
    return template


async def delete_template(session: AsyncSession, tenant_id: int, template_id: int) -> None:
    template = await get_template(session, tenant_id, template_id)
    await sprint_repo.delete_template(session, template)
    log.info("sprint_template.deleted", tenant_id=tenant_id, template_id=template_id)


# ---------------------------------------------------------------------------
# Sprints
# ---------------------------------------------------------------------------


async def create_sprint(
    session: AsyncSession, tenant_id: int, project_id: Optional[int], sprint_in: SprintCreate
) -> Sprint:
    if project_id is None:
        raise InvalidArgumentError("projectId is required")
    if await project_repo.get_project(session, tenant_id, project_id) is None:
        raise NotFoundError("Project not found in this tenant")

    sprint = await sprint_repo.add_sprint(
        session,
        Sprint(
            project_id=project_id,
            sprint_name=sprint_in.sprint_name,
            goal=sprint_in.goal or None,
            start_date=sprint_in.start_date,
            end_date=sprint_in.end_date,
            status=sprint_in.status.value,
        ),
    )
    log.info("sprint.created", tenant_id=tenant_id, sprint_id=sprint.id, project_id=project_id)
    return sprint


async def get_sprint(session: AsyncSession, tenant_id: int, sprint_id: int) -> Sprint:
    sprint = await sprint_repo.get_sprint(session, tenant_id, sprint_id)
    if sprint is None:
        raise NotFoundError("Sprint not found")
    return sprint


async def list_sprints(
    session: AsyncSession, tenant_id: int, project_id: Optional[int] = None
) -> list[Sprint]:
    return await sprint_repo.list_sprints(session, tenant_id, project_id=project_id)


async def update_sprint(
    session: AsyncSession, tenant_id: int, sprint_id: int, sprint_in: SprintUpdate
) -> Sprint:
    sprint = await get_sprint(session, tenant_id, sprint_id)
    data = sprint_in.model_dump(exclude_unset=True)
    if not data.get("sprint_name"):
        data.pop("sprint_name", None)
    if data.get("status") is None:
        data.pop("status", None)
    else:
        data["status"] = SprintStatus(data["status"]).value

    for key, value in data.items():
        setattr(sprint, key, value)

    session.add(sprint)
    await session.flush()
    log.info("sprint.updated", tenant_id=tenant_id, sprint_id=sprint.id)
    return sprint


async def delete_sprint(session: AsyncSession, tenant_id: int, sprint_id: int) -> None:
    sprint = await get_sprint(session, tenant_id, sprint_id)
    await sprint_repo.delete_sprint(session, sprint)
    log.info("sprint.deleted", tenant_id=tenant_id, sprint_id=sprint_id)


async def assign_task(
    session: AsyncSession, tenant_id: int, task_id: int, sprint_id: int
) -> Task:
    task = await task_repo.get_task(session, tenant_id, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    sprint = await get_sprint(session, tenant_id, sprint_id)
    if sprint.project_id != task.project_id:
        raise InvalidArgumentError("Sprint belongs to a different project than the task")

    task.sprint_id = sprint.id
    session.add(task)
    await session.flush()
    log.info("sprint.task_assigned", tenant_id=tenant_id, sprint_id=sprint.id, task_id=task_id)
    return task


async def create_sprint_from_template(
    session: AsyncSession,
    tenant_id: int,
    project_id: int,
    template_id: int,
    *,
    today: Optional[date] = None,
) -> Sprint:
    """Stamp out the project's next sprint from a template.

    Runs from ``today`` for ``duration_days`` and is named after the
    template's pattern with ``{number}`` = existing sprint count + 1.
    """
    template = await sprint_repo.get_template(session, tenant_id, template_id)
    if template is None:
        raise NotFoundError("Sprint template not found")

    start = today or datetime.now(timezone.utc).date()
    end = start + timedelta(days=template.duration_days)
    count = await sprint_repo.count_sprints(session, tenant_id, project_id)

    sprint = await create_sprint(
        session,
        tenant_id,
        project_id,
        # Template patterns may be longer than a request-supplied sprint name.
        SprintCreate.model_construct(
            sprint_name=render_sprint_name(template.name_pattern, count + 1),
            goal=template.goal_template or None,
            start_date=start,
            end_date=end,
            status=SprintStatus.PLANNING,
        ),
    )
    log.info(
        "sprint.created_from_template",
        tenant_id=tenant_id,
        sprint_id=sprint.id,
        template_id=template_id,
    )
    return sprint
