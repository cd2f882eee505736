"""
Dependency graph tests.

Tests cover:
- Pure cycle detection over edge lists
- Service rules: self-loops, duplicates, cross-tenant tasks, cycles
- HTTP surface: status codes, error envelope, activity events
"""

from __future__ import annotations

import pytest

from app.core.errors import ConflictError, InvalidArgumentError, NotFoundError
from app.repositories import dependencies as dependency_repo
from app.services.dependencies import (
    add_dependency,
    advisory_lock_key,
    build_adjacency,
    list_dependencies,
    remove_dependency,
    would_create_cycle,
)
from app.services.tasks import delete_task


# ---------------------------------------------------------------------------
# Unit tests: cycle detection
# ---------------------------------------------------------------------------


class TestCycleDetection:
    def test_empty_graph_has_no_cycle(self):
        assert would_create_cycle([], 1, 2) is False

    def test_direct_back_edge_is_a_cycle(self):
        assert would_create_cycle([(1, 2)], 2, 1) is True

    def test_transitive_back_edge_is_a_cycle(self):
        """1 -> 2 -> 3, adding 3 -> 1 closes the loop."""
        assert would_create_cycle([(1, 2), (2, 3)], 3, 1) is True

    def test_diamond_is_not_a_cycle(self):
        edges = [(1, 2), (1, 3), (2, 4), (3, 4)]
        assert would_create_cycle(edges, 1, 4) is False

    def test_disconnected_components(self):
        edges = [(1, 2), (3, 4)]
        assert would_create_cycle(edges, 2, 3) is False
        assert would_create_cycle(edges + [(2, 3)], 4, 1) is True

    def test_long_chain(self):
        edges = [(i, i + 1) for i in range(1, 500)]
        assert would_create_cycle(edges, 500, 1) is True
        assert would_create_cycle(edges, 1, 500) is False

    def test_adjacency_groups_by_task(self):
        adj = build_adjacency([(1, 2), (1, 3), (2, 3)])
        assert adj[1] == [2, 3]
        assert adj[2] == [3]


class TestAdvisoryLockKey:
    def test_fits_signed_bigint(self):
        for tenant_id in (1, 2**31, 2**47 + 5, 2**63 - 1):
            assert 0 < advisory_lock_key(tenant_id) < 2**63

    def test_distinct_per_tenant(self):
        keys = {advisory_lock_key(tenant_id) for tenant_id in range(1, 1000)}
        assert len(keys) == 999


# ---------------------------------------------------------------------------
# Service tests
# ---------------------------------------------------------------------------


class TestAddDependency:
    async def test_chain_then_cycle_rejected(self, session, seed):
        t1, t2, t3 = (t.id for t in seed.tasks)
        tenant = seed.acme.id

        await add_dependency(session, tenant, t1, t2)
        await add_dependency(session, tenant, t2, t3)
        with pytest.raises(InvalidArgumentError, match="circular"):
            await add_dependency(session, tenant, t3, t1)

        edges = await dependency_repo.list_edges(session, tenant)
        assert sorted(edges) == [(t1, t2), (t2, t3)]

    async def test_self_dependency_rejected_without_mutation(self, session, seed):
        t1 = seed.tasks[0].id
        with pytest.raises(InvalidArgumentError):
            await add_dependency(session, seed.acme.id, t1, t1)
        assert await dependency_repo.list_edges(session, seed.acme.id) == []

    async def test_self_dependency_rejected_for_unknown_task(self, session, seed):
        with pytest.raises(InvalidArgumentError):
            await add_dependency(session, seed.acme.id, 99999, 99999)

    async def test_duplicate_rejected(self, session, seed):
        t1, t2, _ = (t.id for t in seed.tasks)
        await add_dependency(session, seed.acme.id, t1, t2)
        with pytest.raises(ConflictError):
            await add_dependency(session, seed.acme.id, t1, t2)
        assert len(await dependency_repo.list_edges(session, seed.acme.id)) == 1

    async def test_cross_tenant_rejected(self, session, seed):
        with pytest.raises(NotFoundError):
            await add_dependency(session, seed.acme.id, seed.tasks[0].id, seed.globex_task.id)
        with pytest.raises(NotFoundError):
            await add_dependency(session, seed.globex.id, seed.globex_task.id, seed.tasks[0].id)

    async def test_unknown_task_rejected(self, session, seed):
        with pytest.raises(NotFoundError):
            await add_dependency(session, seed.acme.id, seed.tasks[0].id, 99999)

    async def test_deleted_task_cannot_gain_dependencies(self, session, seed):
        t1, t2, _ = (t.id for t in seed.tasks)
        await delete_task(session, seed.acme.id, t2)
        with pytest.raises(NotFoundError):
            await add_dependency(session, seed.acme.id, t1, t2)

    async def test_edges_stay_acyclic(self, session, seed):
        """Every accepted edge set remains a DAG, whatever order edges arrive in."""
        ids = [t.id for t in seed.tasks]
        attempts = [(a, b) for a in ids for b in ids]
        for a, b in attempts:
            try:
                await add_dependency(session, seed.acme.id, a, b)
            except (InvalidArgumentError, ConflictError):
                pass

        edges = await dependency_repo.list_edges(session, seed.acme.id)
        assert edges
        for a, b in edges:
            others = [e for e in edges if e != (a, b)]
            assert would_create_cycle(others, a, b) is False


class TestRemoveAndList:
    async def test_list_in_insertion_order(self, session, seed):
        t1, t2, t3 = (t.id for t in seed.tasks)
        await add_dependency(session, seed.acme.id, t1, t3)
        await add_dependency(session, seed.acme.id, t1, t2)

        deps = await list_dependencies(session, seed.acme.id, t1)
        assert [d.dependent_task_id for d in deps] == [t3, t2]

    async def test_list_for_foreign_task_is_not_found(self, session, seed):
        with pytest.raises(NotFoundError):
            await list_dependencies(session, seed.acme.id, seed.globex_task.id)

    async def test_remove_then_reverse_edge_allowed(self, session, seed):
        t1, t2, _ = (t.id for t in seed.tasks)
        dep = await add_dependency(session, seed.acme.id, t1, t2)
        await remove_dependency(session, seed.acme.id, dep.id)
        reverse = await add_dependency(session, seed.acme.id, t2, t1)
        assert reverse.task_id == t2

    async def test_remove_from_other_tenant_is_not_found(self, session, seed):
        t1, t2, _ = (t.id for t in seed.tasks)
        dep = await add_dependency(session, seed.acme.id, t1, t2)
        with pytest.raises(NotFoundError):
            await remove_dependency(session, seed.globex.id, dep.id)

    async def test_remove_with_mismatched_task_is_not_found(self, session, seed):
        t1, t2, t3 = (t.id for t in seed.tasks)
        dep = await add_dependency(session, seed.acme.id, t1, t2)
        with pytest.raises(NotFoundError):
            await remove_dependency(session, seed.acme.id, dep.id, task_id=t3)


# ---------------------------------------------------------------------------
# HTTP tests
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_dependency_chain_over_http(client, seed, headers, sink):
    t1, t2, t3 = (t.id for t in seed.tasks)

    r = await client.post(f"/api/v1/tasks/{t1}/dependencies", json={"dependentTaskId": t2}, headers=headers.acme)
    assert r.status_code == 201
    body = r.json()
    assert body["taskId"] == t1
    assert body["dependentTaskId"] == t2

    r = await client.post(f"/api/v1/tasks/{t2}/dependencies", json={"dependentTaskId": t3}, headers=headers.acme)
    assert r.status_code == 201

    r = await client.post(f"/api/v1/tasks/{t3}/dependencies", json={"dependentTaskId": t1}, headers=headers.acme)
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "INVALID_ARGUMENT"
    assert "circular" in r.json()["error"]["message"]

    assert sink.types().count("task.dependency.added") == 2


@pytest.mark.asyncio
async def test_self_dependency_over_http(client, seed, headers):
    t1 = seed.tasks[0].id
    r = await client.post(f"/api/v1/tasks/{t1}/dependencies", json={"dependentTaskId": t1}, headers=headers.acme)
    assert r.status_code == 400
    assert r.json()["error"]["status"] == 400


@pytest.mark.asyncio
async def test_duplicate_dependency_over_http(client, seed, headers):
    t1, t2, _ = (t.id for t in seed.tasks)
    url = f"/api/v1/tasks/{t1}/dependencies"
    assert (await client.post(url, json={"dependentTaskId": t2}, headers=headers.acme)).status_code == 201
    r = await client.post(url, json={"dependentTaskId": t2}, headers=headers.acme)
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_cross_tenant_dependency_over_http(client, seed, headers):
    r = await client.post(
        f"/api/v1/tasks/{seed.tasks[0].id}/dependencies",
        json={"dependentTaskId": seed.globex_task.id},
        headers=headers.acme,
    )
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_list_and_remove_over_http(client, seed, headers, sink):
    t1, t2, _ = (t.id for t in seed.tasks)
    created = await client.post(f"/api/v1/tasks/{t1}/dependencies", json={"dependentTaskId": t2}, headers=headers.acme)
    dep_id = created.json()["id"]

    r = await client.get(f"/api/v1/tasks/{t1}/dependencies", headers=headers.acme)
    assert r.status_code == 200
    assert [d["id"] for d in r.json()] == [dep_id]

    # Another tenant cannot see or remove the edge.
    r = await client.delete(f"/api/v1/tasks/{t1}/dependencies/{dep_id}", headers=headers.globex)
    assert r.status_code == 404

    r = await client.delete(f"/api/v1/tasks/{t1}/dependencies/{dep_id}", headers=headers.acme)
    assert r.status_code == 204
    assert "task.dependency.removed" in sink.types()

    r = await client.get(f"/api/v1/tasks/{t1}/dependencies", headers=headers.acme)
    assert r.json() == []


@pytest.mark.asyncio
async def test_out_of_range_task_id_over_http(client, seed, headers):
    r = await client.get("/api/v1/tasks/99999999999999999999/dependencies", headers=headers.acme)
    assert r.status_code == 422

    task_id = seed.tasks[0].id
    r = await client.post(
        f"/api/v1/tasks/{task_id}/dependencies",
        json={"dependentTaskId": 2**63},
        headers=headers.acme,
    )
    assert r.status_code == 422
