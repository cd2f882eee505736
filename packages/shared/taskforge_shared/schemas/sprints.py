"""Sprint and sprint template schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel, EntityId, SprintStatus

NUMBER_PLACEHOLDER = "{number}"


# ---------------------------------------------------------------------------
# Sprint templates
# ---------------------------------------------------------------------------

class SprintTemplateCreate(CamelModel):
    department_id: EntityId
    name: str = Field(max_length=120)
    name_pattern: Optional[str] = Field(default=None, max_length=200)
    duration_days: Optional[int] = Field(default=None, ge=1, le=365)
    goal_template: Optional[str] = None
    is_default: bool = False


class SprintTemplateUpdate(CamelModel):
    name: Optional[str] = Field(default=None, max_length=120)
    name_pattern: Optional[str] = Field(default=None, max_length=200)
    duration_days: Optional[int] = Field(default=None, ge=1, le=365)
    goal_template: Optional[str] = None
    is_default: Optional[bool] = None


class SprintTemplateRead(CamelModel):
    id: int
    department_id: int
    name: str
    name_pattern: Optional[str] = None
    duration_days: int
    goal_template: Optional[str] = None
    is_default: bool
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Sprints
# ---------------------------------------------------------------------------

class SprintCreate(CamelModel):
    sprint_name: str = Field(max_length=120)
    goal: Optional[str] = None
    project_id: Optional[EntityId] = None  # required on POST /sprints
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: SprintStatus = SprintStatus.PLANNING


class SprintUpdate(CamelModel):
    sprint_name: Optional[str] = Field(default=None, max_length=120)
    goal: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[SprintStatus] = None


class SprintRead(CamelModel):
    id: int
    project_id: int
    sprint_name: str
    goal: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None


class SprintFromTemplate(CamelModel):
    """Request body for POST /projects/{projectId}/sprints/from-template."""
    template_id: EntityId


class SprintTaskAssign(CamelModel):
    sprint_id: EntityId


def render_sprint_name(name_pattern: Optional[str], number: int) -> str:
    """Build a sprint name from a template pattern.

    The first ``{number}`` placeholder is replaced with ``number``. A missing
    or empty pattern falls back to ``"Sprint <number>"``.
    """
    if not name_pattern:
        return f"Sprint {number}"
    return name_pattern.replace(NUMBER_PLACEHOLDER, str(number), 1)
