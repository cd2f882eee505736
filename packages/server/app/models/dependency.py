"""Task dependency model.

Edges are immutable: delete and recreate, never update.
"""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import Field, SQLModel

from .base import BigIntId, IdMixin, _utcnow


class TaskDependency(IdMixin, SQLModel, table=True):
    __tablename__ = "task_dependencies"
    __table_args__ = (
        CheckConstraint("task_id != dependent_task_id", name="no_self_dependency"),
        UniqueConstraint("task_id", "dependent_task_id", name="uq_task_dependency_edge"),
    )

    task_id: int = Field(foreign_key="tasks.id", nullable=False, index=True, sa_type=BigIntId)
    dependent_task_id: int = Field(foreign_key="tasks.id", nullable=False, index=True, sa_type=BigIntId)
    created_at: Optional[datetime] = Field(
        default_factory=_utcnow,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )
