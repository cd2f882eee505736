"""Tenant model."""

from sqlmodel import Field, SQLModel

from .base import IdMixin, TimestampMixin


class Tenant(IdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "tenants"

    name: str = Field(nullable=False, index=True)
    slug: str = Field(unique=True, nullable=False, index=True)
    status: str = Field(default="active", nullable=False)  # active | suspended
