"""
Dependency graph engine: validates and mutates task-to-task "depends on"
edges inside one tenant.

The graph is never cached. Every ``add_dependency`` rebuilds the tenant's
adjacency list from the store, so accept/reject decisions always see the
committed edge set. On PostgreSQL the check-then-insert runs under a
transaction-scoped advisory lock keyed by tenant, which serialises concurrent
inserts that are individually acyclic but jointly close a cycle.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import dialect_name
from app.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from app.models.dependency import TaskDependency
from app.repositories import dependencies as dependency_repo
from app.repositories import tasks as task_repo

log = structlog.get_logger()

# Namespaces the advisory lock so it cannot collide with other lock users.
_ADVISORY_LOCK_CLASS = 0x7466  # "tf"
_TENANT_KEY_BITS = 47


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------


def build_adjacency(edges: Iterable[tuple[int, int]]) -> dict[int, list[int]]:
    """``task -> [tasks it depends on]``."""
    adj: dict[int, list[int]] = defaultdict(list)
    for task_id, dependent_task_id in edges:
        adj[task_id].append(dependent_task_id)
    return adj


def would_create_cycle(
    edges: Iterable[tuple[int, int]], task_id: int, dependent_task_id: int
) -> bool:
    """True if adding ``task_id -> dependent_task_id`` closes a cycle.

    The proposed edge is added to the existing set, then an iterative DFS runs
    from ``dependent_task_id``. Reaching ``task_id`` means the new edge would
    complete a loop. Each node is expanded at most once, so the walk is
    O(V + E).
    """
    adj = build_adjacency(edges)
    adj[task_id].append(dependent_task_id)

    visited: set[int] = set()
    stack = [dependent_task_id]
    while stack:
        current = stack.pop()
        if current == task_id:
            return True
        if current in visited:
            continue
        visited.add(current)
        stack.extend(n for n in adj.get(current, ()) if n not in visited)
    return False


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def advisory_lock_key(tenant_id: int) -> int:
    """Single bigint lock key for a tenant's dependency graph.

    The class tag occupies the high bits, away from keys other lock users pick;
    tenants that share the low bits only serialize together.
    """
    return (_ADVISORY_LOCK_CLASS << _TENANT_KEY_BITS) | (tenant_id & ((1 << _TENANT_KEY_BITS) - 1))


async def _lock_tenant_graph(session: AsyncSession, tenant_id: int) -> None:
    if dialect_name(session) != "postgresql":
        return
    await session.execute(
        text("SELECT pg_advisory_xact_lock(CAST(:key AS bigint))"),
        {"key": advisory_lock_key(tenant_id)},
    )


async def add_dependency(
    session: AsyncSession,
    tenant_id: int,
    task_id: int,
    dependent_task_id: int,
) -> TaskDependency:
    """Record that ``task_id`` depends on ``dependent_task_id``."""
    # Rejected before any lookup: the answer is the same for every tenant.
    if task_id == dependent_task_id:
        raise InvalidArgumentError("A task cannot depend on itself")

    found = await task_repo.get_tasks(session, tenant_id, [task_id, dependent_task_id])
    if len(found) != 2:
        raise NotFoundError("One or both tasks not found in this tenant")

    await _lock_tenant_graph(session, tenant_id)

    if await dependency_repo.find_edge(session, tenant_id, task_id, dependent_task_id):
        raise ConflictError("This dependency already exists")

    edges = await dependency_repo.list_edges(session, tenant_id)
    if would_create_cycle(edges, task_id, dependent_task_id):
        raise InvalidArgumentError("Adding this dependency would create a circular dependency")

    dep = await dependency_repo.add_dependency(session, task_id, dependent_task_id)
    log.info(
        "dependency.created",
        tenant_id=tenant_id,
        dependency_id=dep.id,
        task_id=task_id,
        dependent_task_id=dependent_task_id,
    )
    return dep


async def remove_dependency(
    session: AsyncSession,
    tenant_id: int,
    dependency_id: int,
    task_id: int | None = None,
) -> TaskDependency:
    """Delete an edge. ``task_id``, when given, must be the edge's owning task."""
    dep = await dependency_repo.get_dependency(session, tenant_id, dependency_id)
    if dep is None or (task_id is not None and dep.task_id != task_id):
        raise NotFoundError("Dependency not found in this tenant")
    await dependency_repo.delete_dependency(session, dep)
    log.info("dependency.removed", tenant_id=tenant_id, dependency_id=dependency_id)
    return dep


async def list_dependencies(
    session: AsyncSession, tenant_id: int, task_id: int
) -> list[TaskDependency]:
    """Edges leaving ``task_id`` (what it depends on), in insertion order."""
    if await task_repo.get_task(session, tenant_id, task_id) is None:
        raise NotFoundError("Task not found in this tenant")
    return await dependency_repo.list_for_task(session, tenant_id, task_id)
