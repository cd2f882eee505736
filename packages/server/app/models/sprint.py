"""Sprint and sprint template models."""

from datetime import date
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import BigIntId, IdMixin, TimestampMixin


class SprintTemplate(IdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "sprint_templates"

    department_id: int = Field(foreign_key="departments.id", nullable=False, index=True, sa_type=BigIntId)
    name: str = Field(nullable=False)
    name_pattern: Optional[str] = None  # e.g. "Sprint {number}"
    duration_days: int = Field(nullable=False, default=14)
    goal_template: Optional[str] = None
    is_default: bool = Field(nullable=False, default=False)


class Sprint(IdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "sprints"

    project_id: int = Field(foreign_key="projects.id", nullable=False, index=True, sa_type=BigIntId)
    sprint_name: str = Field(nullable=False)
    goal: Optional[str] = None
    start_date: Optional[date] = Field(default=None, sa_type=sa.Date)
    end_date: Optional[date] = Field(default=None, sa_type=sa.Date)
    status: str = Field(nullable=False, default="PLANNING")
