"""
API Endpoints Package
Exports routers used by main app
"""
from .auth import router as auth_router
from .jobs import router as jobs_router
from .user import router as user_router
from .employer import router as employer_router
from .admin import router as admin_router
from .saved_jobs import router as saved_jobs_router

__all__ = [
    "auth_router",
    "jobs_router",
    "user_router",
    "employer_router",
    "admin_router",
    "saved_jobs_router",
]
