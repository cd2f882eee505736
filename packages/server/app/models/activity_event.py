"""Activity event model (append-only audit trail)."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import BigIntId, IdMixin, _utcnow


class ActivityEvent(IdMixin, SQLModel, table=True):
    __tablename__ = "activity_events"

    tenant_id: int = Field(foreign_key="tenants.id", nullable=False, index=True, sa_type=BigIntId)
    type: str = Field(nullable=False)  # e.g. task.dependency.added
    payload: dict = Field(default_factory=dict, sa_type=sa.JSON, nullable=False)
    timestamp: Optional[datetime] = Field(
        default_factory=_utcnow,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )
