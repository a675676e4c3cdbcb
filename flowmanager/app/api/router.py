"""
API Router.

Aggregates all endpoints mounted under settings.api_prefix.
"""

from fastapi import APIRouter
from flowmanager.app.api.endpoints import (
    auth, users, projects, tasks, work_logs, vacations, expenses, audit
)

router = APIRouter()

router.include_router(auth.router)
router.include_router(users.router)
router.include_router(projects.router)
router.include_router(tasks.router)
router.include_router(work_logs.router)
router.include_router(vacations.router)
router.include_router(expenses.router)
router.include_router(audit.router)
