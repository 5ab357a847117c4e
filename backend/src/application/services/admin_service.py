"""
Admin Service
Platform overview and account removal
"""
from typing import Dict, List, Optional, Tuple, Union
from uuid import UUID

from loguru import logger

from core.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.entities import User
from domain.enums import UserRole, UserStatus
from domain.value_objects import JobStatus
from application.repositories.interfaces import (
    IApplicationRepository,
    IJobRepository,
    ISavedJobRepository,
    IUserRepository,
)


def _parse_enum(enum_cls, field: str, value):
    if value in (None, ""):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationException(field, f"Invalid {field}. Must be one of: {allowed}")


class AdminService:
    """Admin-only reads and the cascading account deletion"""

    def __init__(
        self,
        user_repository: IUserRepository,
        job_repository: IJobRepository,
        application_repository: IApplicationRepository,
        saved_job_repository: ISavedJobRepository,
    ):
        self.user_repo = user_repository
        self.job_repo = job_repository
        self.application_repo = application_repository
        self.saved_job_repo = saved_job_repository

    async def dashboard_stats(self) -> Dict[str, int]:
        return {
            "total_jobseekers": await self.user_repo.count(role=UserRole.JOBSEEKER),
            "total_employers": await self.user_repo.count(
                role=UserRole.EMPLOYER, status=UserStatus.APPROVED
            ),
            "pending_employers": await self.user_repo.count(
                role=UserRole.EMPLOYER, status=UserStatus.PENDING
            ),
            "total_jobs": await self.job_repo.count(status=JobStatus.ACTIVE),
            "total_applications": await self.application_repo.count(),
        }

    async def list_employers(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        return await self.user_repo.list(
            role=UserRole.EMPLOYER,
            status=_parse_enum(UserStatus, "status", status),
            search=search,
            limit=limit,
            offset=offset,
        )

    async def list_users(
        self,
        role: Optional[Union[str, UserRole]] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        return await self.user_repo.list(
            role=_parse_enum(UserRole, "role", role),
            search=search,
            limit=limit,
            offset=offset,
        )

    async def delete_user(self, user_id: UUID, actor: User) -> Dict[str, int]:
        """
        Delete an account and everything hanging off it.

        Employers take their jobs, the applications to those jobs and the
        bookmarks on them. Jobseekers take their applications (the affected
        jobs' counters are reduced accordingly) and their bookmarks.
        Administrators cannot be deleted.
        """
        if not actor.is_admin():
            raise AuthorizationException("Only administrators can delete users")

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundException("User", user_id)
        if user.is_admin():
            raise AuthorizationException("Cannot delete admin users")

        removed = {"jobs": 0, "applications": 0, "saved_jobs": 0}

        if user.is_employer():
            job_ids = await self.job_repo.ids_by_company(user.id)
            removed["applications"] = await self.application_repo.delete_by_employer(user.id)
            removed["saved_jobs"] = await self.saved_job_repo.delete_by_jobs(job_ids)
            removed["jobs"] = await self.job_repo.delete_by_company(user.id)
        else:
            per_job = await self.application_repo.delete_by_applicant(user.id)
            for job_id, count in per_job.items():
                await self.job_repo.decrement_applications(job_id, count)
            removed["applications"] = sum(per_job.values())
            removed["saved_jobs"] = await self.saved_job_repo.delete_by_user(user.id)

        await self.user_repo.delete(user.id)
        logger.info(f"User {user.id} ({user.role.value}) deleted by admin {actor.id}: {removed}")
        return removed
