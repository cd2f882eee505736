"""Department model."""

from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .base import BigIntId, IdMixin, TimestampMixin


class Department(IdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "departments"
    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_department_tenant_code"),
    )

    tenant_id: int = Field(foreign_key="tenants.id", nullable=False, index=True, sa_type=BigIntId)
    name: str = Field(nullable=False)
    code: str = Field(nullable=False)
    description: Optional[str] = None
    is_active: bool = Field(default=True, nullable=False)
