"""Task model.

Tasks carry no tenant column: a task's tenant is always its project's tenant.
"""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import BigIntId, IdMixin, TimestampMixin


class Task(IdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "tasks"

    project_id: int = Field(foreign_key="projects.id", nullable=False, index=True, sa_type=BigIntId)
    parent_task_id: Optional[int] = Field(default=None, foreign_key="tasks.id", sa_type=BigIntId)
    sprint_id: Optional[int] = Field(default=None, foreign_key="sprints.id", index=True, sa_type=BigIntId)
    title: str = Field(nullable=False)
    description: Optional[str] = None
    status: str = Field(nullable=False, default="TODO")  # a TaskStatus.code
    deleted_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
