"""Routers package."""

from hard75.routers.auth import router as auth_router
from hard75.routers.dashboard import router as dashboard_router
from hard75.routers.days import router as days_router
from hard75.routers.tasks import router as tasks_router
from hard75.routers.pms_safe import router as pms_safe_router
from hard75.routers.progress import router as progress_router

__all__ = [
    "auth_router",
    "dashboard_router",
    "days_router",
    "tasks_router",
    "pms_safe_router",
    "progress_router",
]
