"""Task dependency schemas.

An edge ``(task_id, dependent_task_id)`` reads "task_id depends on
dependent_task_id": the task cannot be considered complete until the
dependency is.
"""

from __future__ import annotations

from .common import CamelModel, EntityId


class DependencyAdd(CamelModel):
    """Request body for POST /tasks/{taskId}/dependencies."""
    dependent_task_id: EntityId


class DependencyRead(CamelModel):
    id: int
    task_id: int
    dependent_task_id: int
