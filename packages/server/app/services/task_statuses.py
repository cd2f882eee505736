"""
Task status scoping: scope exclusivity, per-scope code uniqueness, the
single-default rule, and project -> department -> built-in fallback with lazy
bootstrap of the default set.
"""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from app.models.task_status import TaskStatus
from app.repositories import departments as department_repo
from app.repositories import projects as project_repo
from app.repositories import task_statuses as status_repo
from taskforge_shared.schemas.task_statuses import TaskStatusCreate, TaskStatusUpdate

log = structlog.get_logger()
settings = get_settings()


async def create_status(
    session: AsyncSession, tenant_id: int, status_in: TaskStatusCreate
) -> TaskStatus:
    if status_in.project_id is not None and status_in.department_id is not None:
        raise InvalidArgumentError("Cannot assign status to both Project and Department")

    if status_in.project_id is not None:
        if await project_repo.get_project(session, tenant_id, status_in.project_id) is None:
            raise NotFoundError("Project not found in this tenant")
    if status_in.department_id is not None:
        if await department_repo.get_department(session, tenant_id, status_in.department_id) is None:
            raise NotFoundError("Department not found in this tenant")

    existing = await status_repo.find_by_code(
        session, tenant_id, status_in.project_id, status_in.department_id, status_in.code
    )
    if existing is not None:
        raise ConflictError(f'Status with code "{status_in.code}" already exists in this scope')

    if status_in.is_default:
        await status_repo.clear_defaults(
            session, tenant_id, status_in.project_id, status_in.department_id
        )

    status = await status_repo.add_status(
        session,
        TaskStatus(
            tenant_id=tenant_id,
            project_id=status_in.project_id,
            department_id=status_in.department_id,
            name=status_in.name,
            code=status_in.code,
            color=status_in.color or settings.default_status_color,
            sort_order=status_in.sort_order or 0,
            is_default=status_in.is_default,
            is_terminal=status_in.is_terminal,
        ),
    )
    log.info("task_status.created", tenant_id=tenant_id, status_id=status.id, code=status.code)
    return status


async def get_status(session: AsyncSession, tenant_id: int, status_id: int) -> TaskStatus:
    status = await status_repo.get_status(session, tenant_id, status_id)
    if status is None:
        raise NotFoundError("Status not found")
    return status


async def _bootstrap_defaults(
    session: AsyncSession, tenant_id: int, project_id: int
) -> list[TaskStatus]:
    """Persist the built-in set for a project, or adopt a concurrent winner's."""
    try:
        created = await status_repo.add_default_statuses(session, tenant_id, project_id)
    except IntegrityError:
        # Another request bootstrapped first; the unique (project_id, code)
        # index rejected our copy.
        await session.rollback()
        log.info("task_status.bootstrap_lost_race", tenant_id=tenant_id, project_id=project_id)
        return await status_repo.list_scope(session, tenant_id, project_id, None)
    log.info("task_status.defaults_bootstrapped", tenant_id=tenant_id, project_id=project_id)
    return created


async def resolve_statuses_for_project(
    session: AsyncSession, tenant_id: int, project_id: int
) -> list[TaskStatus]:
    """Statuses that apply to a project.

    Project-scoped statuses win; otherwise the project's department statuses;
    otherwise the built-in set is created for the project and returned.
    """
    project = await project_repo.get_project(session, tenant_id, project_id)
    if project is None:
        raise NotFoundError("Project not found in this tenant")

    statuses = await status_repo.list_scope(session, tenant_id, project_id, None)
    if statuses:
        return statuses

    if project.department_id is not None:
        statuses = await status_repo.list_scope(session, tenant_id, None, project.department_id)
        if statuses:
            return statuses

    return await _bootstrap_defaults(session, tenant_id, project_id)


async def initialize_default_statuses(
    session: AsyncSession, tenant_id: int, project_id: int
) -> list[TaskStatus]:
    """Give a project its own default set unless it already has statuses."""
    if await project_repo.get_project(session, tenant_id, project_id) is None:
        raise NotFoundError("Project not found in this tenant")
    existing = await status_repo.list_scope(session, tenant_id, project_id, None)
    if existing:
        return existing
    return await _bootstrap_defaults(session, tenant_id, project_id)


async def list_statuses(
    session: AsyncSession,
    tenant_id: int,
    *,
    project_id: Optional[int] = None,
    department_id: Optional[int] = None,
    search: Optional[str] = None,
    page: int = 1,
    per_page: int = 25,
) -> list[TaskStatus]:
    return await status_repo.list_statuses(
        session,
        tenant_id,
        project_id=project_id,
        department_id=department_id,
        search=search,
        offset=(page - 1) * per_page,
        limit=per_page,
    )


async def update_status(
    session: AsyncSession, tenant_id: int, status_id: int, status_in: TaskStatusUpdate
) -> TaskStatus:
    status = await status_repo.get_owned_status(session, tenant_id, status_id)
    if status is None:
        raise NotFoundError("Status not found")

    data = {k: v for k, v in status_in.model_dump(exclude_unset=True).items() if v is not None}

    new_code = data.get("code")
    if new_code and new_code != status.code:
        conflicting = await status_repo.find_by_code(
            session, tenant_id, status.project_id, status.department_id, new_code
        )
        if conflicting is not None and conflicting.id != status.id:
            raise ConflictError(f'Status with code "{new_code}" already exists')

    if data.get("is_default") and not status.is_default:
        await status_repo.clear_defaults(session, tenant_id, status.project_id, status.department_id)

    for key, value in data.items():
        setattr(status, key, value)

    session.add(status)
    await session.flush()
    log.info("task_status.updated", tenant_id=tenant_id, status_id=status.id, fields=sorted(data))
    return status


async def delete_status(session: AsyncSession, tenant_id: int, status_id: int) -> TaskStatus:
    status = await status_repo.get_owned_status(session, tenant_id, status_id)
    if status is None:
        raise NotFoundError("Status not found")
    if status.is_default:
        raise InvalidArgumentError(
            "Cannot delete the default status. Set another status as default first."
        )
    await status_repo.delete_status(session, status)
    log.info("task_status.deleted", tenant_id=tenant_id, status_id=status_id)
    return status


async def reorder_statuses(
    session: AsyncSession, tenant_id: int, status_ids: list[int]
) -> list[TaskStatus]:
    """Set ``sort_order`` to each id's position, then return the refreshed list.

    The caller supplies ids from one scope. The list returned is resolved from
    the first status: its project's statuses, or its own scope when it is not
    project-scoped.
    """
    if not status_ids:
        return []

    statuses: list[TaskStatus] = []
    for status_id in status_ids:
        status = await status_repo.get_owned_status(session, tenant_id, status_id)
        if status is None:
            raise NotFoundError("Status not found")
        statuses.append(status)

    for index, status in enumerate(statuses):
        status.sort_order = index
        session.add(status)
    await session.flush()

    first = statuses[0]
    log.info("task_status.reordered", tenant_id=tenant_id, count=len(statuses))
    if first.project_id is not None:
        return await resolve_statuses_for_project(session, tenant_id, first.project_id)
    return await status_repo.list_scope(session, tenant_id, None, first.department_id)
