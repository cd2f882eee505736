"""Task status schemas and the built-in default status set."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import CamelModel, DEFAULT_STATUS_COLOR, EntityId

CODE_PATTERN = r"^[A-Z][A-Z0-9_]*$"
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


# Stamped onto a project the first time its statuses are resolved and
# neither the project nor its department defines any.
DEFAULT_STATUS_SET: list[dict] = [
    {"name": "Not Started", "code": "TODO", "color": DEFAULT_STATUS_COLOR, "sort_order": 0, "is_default": True, "is_terminal": False},
    {"name": "In Progress", "code": "IN_PROGRESS", "color": "#10B981", "sort_order": 1, "is_default": False, "is_terminal": False},
    {"name": "In Review", "code": "IN_REVIEW", "color": "#FBBF24", "sort_order": 2, "is_default": False, "is_terminal": False},
    {"name": "Completed", "code": "DONE", "color": "#F1184C", "sort_order": 3, "is_default": False, "is_terminal": True},
    {"name": "Failed", "code": "FAILED", "color": "#F97316", "sort_order": 4, "is_default": False, "is_terminal": True},
    {"name": "Cancelled", "code": "CANCELLED", "color": "#EF4444", "sort_order": 5, "is_default": False, "is_terminal": True},
]


class TaskStatusCreate(CamelModel):
    project_id: Optional[EntityId] = None
    department_id: Optional[EntityId] = None
    name: str = Field(max_length=100)
    code: str = Field(max_length=50, pattern=CODE_PATTERN)
    color: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_default: bool = False
    is_terminal: bool = False


class TaskStatusUpdate(CamelModel):
    name: Optional[str] = Field(default=None, max_length=100)
    code: Optional[str] = Field(default=None, max_length=50, pattern=CODE_PATTERN)
    color: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_default: Optional[bool] = None
    is_terminal: Optional[bool] = None


class TaskStatusRead(CamelModel):
    id: int
    tenant_id: Optional[int] = None
    project_id: Optional[int] = None
    department_id: Optional[int] = None
    name: str
    code: str
    color: str
    sort_order: int
    is_default: bool
    is_terminal: bool
    created_at: datetime
    updated_at: datetime


class StatusReorder(CamelModel):
    """Request body for POST /task-statuses/reorder."""
    status_ids: List[EntityId]
