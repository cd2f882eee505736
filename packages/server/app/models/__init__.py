# Table definitions; importing the package populates SQLModel.metadata for Alembic.
from .base import IdMixin, TimestampMixin  # noqa: F401
from .tenant import Tenant  # noqa: F401
from .department import Department  # noqa: F401
from .project import Project  # noqa: F401
from .sprint import Sprint, SprintTemplate  # noqa: F401
from .task import Task  # noqa: F401
from .dependency import TaskDependency  # noqa: F401
from .task_status import TaskStatus  # noqa: F401
from .activity_event import ActivityEvent  # noqa: F401
