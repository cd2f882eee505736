"""
Sprint and sprint template tests.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from app.core.errors import InvalidArgumentError, NotFoundError
from app.repositories import sprints as sprint_repo
from app.services.sprints import (
    assign_task,
    create_sprint,
    create_sprint_from_template,
    create_template,
    update_template,
)
from taskforge_shared.schemas.sprints import (
    SprintCreate,
    SprintTemplateCreate,
    SprintTemplateUpdate,
    render_sprint_name,
)


class TestRenderSprintName:
    def test_replaces_placeholder(self):
        assert render_sprint_name("Sprint {number}", 3) == "Sprint 3"

    def test_replaces_first_placeholder_only(self):
        assert render_sprint_name("S{number}-{number}", 7) == "S7-{number}"

    def test_pattern_without_placeholder(self):
        assert render_sprint_name("Hardening", 2) == "Hardening"

    def test_missing_pattern_falls_back(self):
        assert render_sprint_name(None, 4) == "Sprint 4"
        assert render_sprint_name("", 1) == "Sprint 1"


class TestSprintFromTemplate:
    async def test_third_sprint_from_template(self, session, seed):
        tenant = seed.acme.id
        for n in (1, 2):
            await create_sprint(session, tenant, seed.api.id, SprintCreate(sprint_name=f"Existing {n}"))
        template = await create_template(
            session,
            tenant,
            SprintTemplateCreate(
                department_id=seed.eng.id, name="Fortnight", name_pattern="Sprint {number}", duration_days=14
            ),
        )

        sprint = await create_sprint_from_template(
            session, tenant, seed.api.id, template.id, today=date(2026, 3, 2)
        )

        assert sprint.sprint_name == "Sprint 3"
        assert sprint.start_date == date(2026, 3, 2)
        assert sprint.end_date - sprint.start_date == timedelta(days=14)
        assert sprint.status == "PLANNING"

    async def test_goal_copied_from_template(self, session, seed):
        template = await create_template(
            session,
            seed.acme.id,
            SprintTemplateCreate(department_id=seed.eng.id, name="Goals", goal_template="Ship it", duration_days=7),
        )
        sprint = await create_sprint_from_template(session, seed.acme.id, seed.api.id, template.id)
        assert sprint.goal == "Ship it"
        assert sprint.sprint_name == "Sprint 1"
        assert (sprint.end_date - sprint.start_date).days == 7

    async def test_foreign_template_is_not_found(self, session, seed):
        template = await create_template(
            session, seed.globex.id, SprintTemplateCreate(department_id=seed.ops.id, name="Ops cadence")
        )
        with pytest.raises(NotFoundError):
            await create_sprint_from_template(session, seed.acme.id, seed.api.id, template.id)

    async def test_foreign_project_is_not_found(self, session, seed):
        template = await create_template(
            session, seed.acme.id, SprintTemplateCreate(department_id=seed.eng.id, name="Cadence")
        )
        with pytest.raises(NotFoundError):
            await create_sprint_from_template(session, seed.acme.id, seed.billing.id, template.id)


class TestTemplates:
    async def test_duration_defaults(self, session, seed):
        template = await create_template(
            session, seed.acme.id, SprintTemplateCreate(department_id=seed.eng.id, name="Default length")
        )
        assert template.duration_days == 14

    async def test_single_default_per_department(self, session, seed):
        tenant = seed.acme.id
        first = await create_template(
            session, tenant, SprintTemplateCreate(department_id=seed.eng.id, name="A", is_default=True)
        )
        second = await create_template(
            session, tenant, SprintTemplateCreate(department_id=seed.eng.id, name="B")
        )
        await update_template(session, tenant, second.id, SprintTemplateUpdate(is_default=True))

        await session.refresh(first)
        assert first.is_default is False
        templates = await sprint_repo.list_templates(session, tenant, department_id=seed.eng.id)
        assert [t.id for t in templates if t.is_default] == [second.id]

    async def test_foreign_department_is_not_found(self, session, seed):
        with pytest.raises(NotFoundError):
            await create_template(
                session, seed.acme.id, SprintTemplateCreate(department_id=seed.ops.id, name="Nope")
            )


class TestAssignTask:
    async def test_assign(self, session, seed):
        sprint = await create_sprint(session, seed.acme.id, seed.api.id, SprintCreate(sprint_name="S1"))
        task = await assign_task(session, seed.acme.id, seed.tasks[0].id, sprint.id)
        assert task.sprint_id == sprint.id

    async def test_foreign_sprint_is_not_found(self, session, seed):
        sprint = await create_sprint(session, seed.globex.id, seed.billing.id, SprintCreate(sprint_name="G1"))
        with pytest.raises(NotFoundError):
            await assign_task(session, seed.acme.id, seed.tasks[0].id, sprint.id)

    async def test_sprint_from_other_project_is_rejected(self, session, seed):
        sprint = await create_sprint(session, seed.acme.id, seed.docs.id, SprintCreate(sprint_name="D1"))
        with pytest.raises(InvalidArgumentError):
            await assign_task(session, seed.acme.id, seed.tasks[0].id, sprint.id)
        assert seed.tasks[0].sprint_id is None


# ---------------------------------------------------------------------------
# HTTP tests
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_from_template_over_http(client, seed, headers, sink):
    r = await client.post(
        "/api/v1/sprint-templates",
        json={"departmentId": seed.eng.id, "name": "Fortnight", "namePattern": "ENG {number}", "durationDays": 14},
        headers=headers.acme,
    )
    assert r.status_code == 201
    template_id = r.json()["id"]

    for n in (1, 2):
        r = await client.post(
            f"/api/v1/projects/{seed.api.id}/sprints", json={"sprintName": f"Old {n}"}, headers=headers.acme
        )
        assert r.status_code == 201

    r = await client.post(
        f"/api/v1/projects/{seed.api.id}/sprints/from-template",
        json={"templateId": template_id},
        headers=headers.acme,
    )
    assert r.status_code == 201
    body = r.json()
    assert body["sprintName"] == "ENG 3"
    start, end = date.fromisoformat(body["startDate"]), date.fromisoformat(body["endDate"])
    assert end - start == timedelta(days=14)
    assert "sprint.created_from_template" in sink.types()

    r = await client.get(f"/api/v1/projects/{seed.api.id}/sprints", headers=headers.acme)
    assert len(r.json()) == 3


@pytest.mark.asyncio
async def test_department_templates_over_http(client, seed, headers):
    for name, is_default in (("Plain", False), ("Preferred", True)):
        await client.post(
            "/api/v1/sprint-templates",
            json={"departmentId": seed.eng.id, "name": name, "isDefault": is_default},
            headers=headers.acme,
        )
    r = await client.get(f"/api/v1/departments/{seed.eng.id}/sprint-templates", headers=headers.acme)
    assert r.status_code == 200
    assert [t["name"] for t in r.json()] == ["Preferred", "Plain"]

    r = await client.get(f"/api/v1/departments/{seed.eng.id}/sprint-templates", headers=headers.globex)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_sprint_crud_over_http(client, seed, headers):
    r = await client.post(
        "/api/v1/sprints",
        json={"projectId": seed.api.id, "sprintName": "S1", "startDate": "2026-01-05", "endDate": "2026-01-19"},
        headers=headers.acme,
    )
    assert r.status_code == 201
    sprint_id = r.json()["id"]

    r = await client.patch(f"/api/v1/sprints/{sprint_id}", json={"status": "ACTIVE"}, headers=headers.acme)
    assert r.status_code == 200
    assert r.json()["status"] == "ACTIVE"

    r = await client.patch(
        f"/api/v1/tasks/{seed.tasks[0].id}/sprint", json={"sprintId": sprint_id}, headers=headers.acme
    )
    assert r.status_code == 200
    assert r.json()["sprintId"] == sprint_id

    assert (await client.get(f"/api/v1/sprints/{sprint_id}", headers=headers.globex)).status_code == 404
    assert (await client.delete(f"/api/v1/sprints/{sprint_id}", headers=headers.acme)).status_code == 204


@pytest.mark.asyncio
async def test_sprint_without_project_rejected(client, seed, headers):
    r = await client.post("/api/v1/sprints", json={"sprintName": "Orphan"}, headers=headers.acme)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_assign_sprint_over_http(client, seed, headers, sink):
    task_id = seed.tasks[0].id
    own = await client.post(f"/api/v1/projects/{seed.api.id}/sprints", json={"sprintName": "S1"}, headers=headers.acme)
    other = await client.post(f"/api/v1/projects/{seed.docs.id}/sprints", json={"sprintName": "D1"}, headers=headers.acme)

    r = await client.patch(f"/api/v1/tasks/{task_id}/sprint", json={"sprintId": other.json()["id"]}, headers=headers.acme)
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "INVALID_ARGUMENT"

    r = await client.patch(f"/api/v1/tasks/{task_id}/sprint", json={"sprintId": own.json()["id"]}, headers=headers.acme)
    assert r.status_code == 200
    assert r.json()["sprintId"] == own.json()["id"]
    assert "task.sprint_assigned" in sink.types()
