"""Task schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel, EntityId


class TaskCreate(CamelModel):
    project_id: EntityId
    title: str = Field(max_length=255)
    description: Optional[str] = None
    parent_task_id: Optional[EntityId] = None
    status: Optional[str] = None  # defaults to the project's default status code


class TaskRead(CamelModel):
    id: int
    project_id: int
    parent_task_id: Optional[int] = None
    sprint_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    status: str
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
