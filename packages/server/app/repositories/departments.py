"""Department store: every lookup is filtered by ``tenant_id``."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.department import Department


async def get_department(
    session: AsyncSession, tenant_id: int, department_id: int
) -> Optional[Department]:
    result = await session.execute(
        select(Department).where(
            Department.id == department_id,
            Department.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def get_department_by_code(
    session: AsyncSession, tenant_id: int, code: str
) -> Optional[Department]:
    result = await session.execute(
        select(Department).where(
            Department.code == code,
            Department.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def list_departments(
    session: AsyncSession, tenant_id: int, *, offset: int = 0, limit: int = 100
) -> list[Department]:
    result = await session.execute(
        select(Department)
        .where(Department.tenant_id == tenant_id)
        .order_by(Department.id)
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())


async def add_department(session: AsyncSession, department: Department) -> Department:
    session.add(department)
    await session.flush()
    return department
