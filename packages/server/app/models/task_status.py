"""Task status model.

A status is scoped to a project, to a department, or to neither. Rows with
``tenant_id`` NULL are system templates readable by every tenant.
"""

from typing import Optional

import sqlalchemy as sa
from sqlalchemy import CheckConstraint, Index
from sqlmodel import Field, SQLModel

from .base import BigIntId, IdMixin, TimestampMixin


class TaskStatus(IdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "task_statuses"
    __table_args__ = (
        CheckConstraint(
            "project_id IS NULL OR department_id IS NULL",
            name="task_status_single_scope",
        ),
        # Partial unique indexes: NULL scope columns would defeat a plain
        # composite unique constraint.
        Index(
            "uq_task_status_project_code",
            "project_id",
            "code",
            unique=True,
            postgresql_where=sa.text("project_id IS NOT NULL"),
            sqlite_where=sa.text("project_id IS NOT NULL"),
        ),
        Index(
            "uq_task_status_department_code",
            "department_id",
            "code",
            unique=True,
            postgresql_where=sa.text("department_id IS NOT NULL"),
            sqlite_where=sa.text("department_id IS NOT NULL"),
        ),
    )

    tenant_id: Optional[int] = Field(default=None, foreign_key="tenants.id", index=True, sa_type=BigIntId)
    project_id: Optional[int] = Field(default=None, foreign_key="projects.id", index=True, sa_type=BigIntId)
    department_id: Optional[int] = Field(default=None, foreign_key="departments.id", index=True, sa_type=BigIntId)
    name: str = Field(nullable=False)
    code: str = Field(nullable=False)
    color: str = Field(nullable=False, default="#64748B")
    sort_order: int = Field(nullable=False, default=0)
    is_default: bool = Field(nullable=False, default=False)
    is_terminal: bool = Field(nullable=False, default=False)
