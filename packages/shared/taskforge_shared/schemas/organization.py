"""Department and project schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel, EntityId


class DepartmentCreate(CamelModel):
    name: str = Field(max_length=120)
    code: str = Field(max_length=50)
    description: Optional[str] = None
    is_active: bool = True


class DepartmentRead(CamelModel):
    id: int
    tenant_id: int
    name: str
    code: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProjectCreate(CamelModel):
    name: str = Field(max_length=200)
    description: Optional[str] = None
    department_id: Optional[EntityId] = None


class ProjectRead(CamelModel):
    id: int
    tenant_id: int
    department_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
