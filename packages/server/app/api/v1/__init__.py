"""
API v1 Router

All endpoints are tenant-scoped through the tenant header.
"""

from fastapi import APIRouter
from . import projects, sprints, task_statuses, tasks

router = APIRouter()

router.include_router(projects.departments_router, prefix="/departments", tags=["Departments"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
router.include_router(task_statuses.router, prefix="/task-statuses", tags=["Task Statuses"])
router.include_router(sprints.templates_router, prefix="/sprint-templates", tags=["Sprint Templates"])
router.include_router(sprints.router, prefix="/sprints", tags=["Sprints"])


@router.get("/", tags=["API"])
async def api_root():
    """Version and the resource collections under this prefix."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/departments",
            "/projects",
            "/tasks",
            "/task-statuses",
            "/sprint-templates",
            "/sprints",
        ],
    }
