"""Project model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import BigIntId, IdMixin, TimestampMixin


class Project(IdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "projects"

    tenant_id: int = Field(foreign_key="tenants.id", nullable=False, index=True, sa_type=BigIntId)
    department_id: Optional[int] = Field(
        default=None, foreign_key="departments.id", index=True, sa_type=BigIntId
    )
    name: str = Field(nullable=False)
    description: Optional[str] = None
