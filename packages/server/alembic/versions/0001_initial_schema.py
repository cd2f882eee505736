"""Initial schema: tenants, departments, projects, tasks, dependency graph,
scoped task statuses, sprints, activity events.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    ]


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # tenants
    op.create_table(
        "tenants",
        _id(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default="active"),
        *_timestamps(),
    )
    op.create_index("ix_tenants_slug", "tenants", ["slug"], unique=True)
    op.create_index("ix_tenants_name", "tenants", ["name"])

    # departments
    op.create_table(
        "departments",
        _id(),
        sa.Column("tenant_id", sa.BigInteger(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "code", name="uq_department_tenant_code"),
    )
    op.create_index("ix_departments_tenant_id", "departments", ["tenant_id"])

    # projects
    op.create_table(
        "projects",
        _id(),
        sa.Column("tenant_id", sa.BigInteger(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("department_id", sa.BigInteger(), sa.ForeignKey("departments.id"), nullable=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_projects_tenant_id", "projects", ["tenant_id"])
    op.create_index("ix_projects_department_id", "projects", ["department_id"])

    # sprint_templates
    op.create_table(
        "sprint_templates",
        _id(),
        sa.Column("department_id", sa.BigInteger(), sa.ForeignKey("departments.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("name_pattern", sa.Text(), nullable=True),
        sa.Column("duration_days", sa.Integer(), nullable=False, server_default="14"),
        sa.Column("goal_template", sa.Text(), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
    )
    op.create_index("ix_sprint_templates_department_id", "sprint_templates", ["department_id"])

    # sprints
    op.create_table(
        "sprints",
        _id(),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sprint_name", sa.Text(), nullable=False),
        sa.Column("goal", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default="PLANNING"),
        *_timestamps(),
    )
    op.create_index("ix_sprints_project_id", "sprints", ["project_id"])

    # tasks
    op.create_table(
        "tasks",
        _id(),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("parent_task_id", sa.BigInteger(), sa.ForeignKey("tasks.id"), nullable=True),
        sa.Column("sprint_id", sa.BigInteger(), sa.ForeignKey("sprints.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default="TODO"),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_tasks_project_id", "tasks", ["project_id"])
    op.create_index("ix_tasks_sprint_id", "tasks", ["sprint_id"])
    op.create_index(
        "idx_tasks_live", "tasks", ["project_id"], postgresql_where=sa.text("deleted_at IS NULL")
    )

    # task_dependencies
    op.create_table(
        "task_dependencies",
        _id(),
        sa.Column("task_id", sa.BigInteger(), sa.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("dependent_task_id", sa.BigInteger(), sa.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True, server_default=sa.text("now()")),
        sa.CheckConstraint("task_id != dependent_task_id", name="no_self_dependency"),
        sa.UniqueConstraint("task_id", "dependent_task_id", name="uq_task_dependency_edge"),
    )
    op.create_index("ix_task_dependencies_task_id", "task_dependencies", ["task_id"])
    op.create_index("ix_task_dependencies_dependent_task_id", "task_dependencies", ["dependent_task_id"])

    # task_statuses
    op.create_table(
        "task_statuses",
        _id(),
        sa.Column("tenant_id", sa.BigInteger(), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=True),
        sa.Column("department_id", sa.BigInteger(), sa.ForeignKey("departments.id", ondelete="CASCADE"), nullable=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("color", sa.Text(), nullable=False, server_default="#64748B"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_terminal", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.CheckConstraint("project_id IS NULL OR department_id IS NULL", name="task_status_single_scope"),
    )
    op.create_index("ix_task_statuses_tenant_id", "task_statuses", ["tenant_id"])
    op.create_index("ix_task_statuses_project_id", "task_statuses", ["project_id"])
    op.create_index("ix_task_statuses_department_id", "task_statuses", ["department_id"])
    op.create_index(
        "uq_task_status_project_code", "task_statuses", ["project_id", "code"],
        unique=True, postgresql_where=sa.text("project_id IS NOT NULL"),
    )
    op.create_index(
        "uq_task_status_department_code", "task_statuses", ["department_id", "code"],
        unique=True, postgresql_where=sa.text("department_id IS NOT NULL"),
    )

    # activity_events (append-only)
    op.create_table(
        "activity_events",
        _id(),
        sa.Column("tenant_id", sa.BigInteger(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("payload", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True, server_default=sa.text("now()")),
    )
    op.create_index("ix_activity_events_tenant_id", "activity_events", ["tenant_id"])
    op.execute("""
        CREATE OR REPLACE FUNCTION prevent_activity_event_mutation()
        RETURNS TRIGGER AS $$
        BEGIN
            RAISE EXCEPTION 'activity_events is append-only';
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER activity_events_immutable
        BEFORE UPDATE OR DELETE ON activity_events
        FOR EACH ROW EXECUTE FUNCTION prevent_activity_event_mutation();
    """)


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS activity_events_immutable ON activity_events")
    op.execute("DROP FUNCTION IF EXISTS prevent_activity_event_mutation()")
    op.drop_table("activity_events")
    op.drop_table("task_statuses")
    op.drop_table("task_dependencies")
    op.drop_table("tasks")
    op.drop_table("sprints")
    op.drop_table("sprint_templates")
    op.drop_table("projects")
    op.drop_table("departments")
    op.drop_table("tenants")
