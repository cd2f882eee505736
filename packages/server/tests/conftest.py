"""
Shared fixtures: in-memory SQLite database, seeded tenants, and an HTTP client
with the session and activity sink dependencies overridden.
"""

import os

# Settings are read at import time; point them at SQLite before the app loads.
os.environ.setdefault("TF_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("TF_NOTIFICATIONS_ENABLED", "false")

from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient

import app.models  # noqa: F401
from app.core.activity import get_activity_sink
from app.core.database import build_engine, build_session_factory, get_session, init_db
from app.main import app
from app.models.department import Department
from app.models.project import Project
from app.models.task import Task
from app.models.tenant import Tenant


class RecordingSink:
    """Activity sink that keeps emitted events in memory."""

    def __init__(self):
        self.events: list[tuple[int, str, dict]] = []

    async def emit(self, tenant_id: int, event_type: str, payload: dict) -> None:
        self.events.append((tenant_id, event_type, payload))

    def types(self) -> list[str]:
        return [event_type for _, event_type, _ in self.events]


@pytest.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite://")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
async def seed(session):
    """Two active tenants and one suspended, each with a department and project.

    Tenant ``acme`` gets three tasks in its project; ``globex`` gets one.
    """
    acme = Tenant(name="Acme Robotics", slug="acme")
    globex = Tenant(name="Globex", slug="globex")
    frozen = Tenant(name="Frozen Co", slug="frozen", status="suspended")
    session.add_all([acme, globex, frozen])
    await session.flush()

    eng = Department(tenant_id=acme.id, name="Engineering", code="ENG")
    ops = Department(tenant_id=globex.id, name="Operations", code="OPS")
    session.add_all([eng, ops])
    await session.flush()

    api = Project(tenant_id=acme.id, department_id=eng.id, name="API Server")
    docs = Project(tenant_id=acme.id, department_id=eng.id, name="Docs Site")
    billing = Project(tenant_id=globex.id, department_id=ops.id, name="Billing")
    session.add_all([api, docs, billing])
    await session.flush()

    t1 = Task(project_id=api.id, title="Design schema")
    t2 = Task(project_id=api.id, title="Build endpoints")
    t3 = Task(project_id=api.id, title="Write tests")
    g1 = Task(project_id=billing.id, title="Invoice export")
    session.add_all([t1, t2, t3, g1])
    await session.commit()

    return SimpleNamespace(
        acme=acme,
        globex=globex,
        frozen=frozen,
        eng=eng,
        ops=ops,
        api=api,
        docs=docs,
        billing=billing,
        tasks=[t1, t2, t3],
        globex_task=g1,
    )


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
async def client(session_factory, sink):
    async def _get_session():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_activity_sink] = lambda: sink
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def headers(seed):
    """Tenant header sets keyed by tenant."""
    return SimpleNamespace(
        acme={"X-Tenant-ID": str(seed.acme.id)},
        globex={"X-Tenant-ID": str(seed.globex.id)},
        frozen={"X-Tenant-ID": str(seed.frozen.id)},
    )
