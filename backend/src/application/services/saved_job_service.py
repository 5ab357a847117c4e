"""
Saved Job Service
Jobseeker bookmarks
"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID, uuid4

from loguru import logger

from core.exceptions import (
    DuplicateResourceException,
    JobNotFoundException,
    ResourceNotFoundException,
)
from domain.entities import Job, SavedJob, User
from application.repositories.interfaces import IJobRepository, ISavedJobRepository, IUserRepository
from application.services.companies import load_companies


class SavedJobService:
    """Save / unsave jobs; one bookmark per (user, job)"""

    def __init__(
        self,
        saved_job_repository: ISavedJobRepository,
        job_repository: IJobRepository,
        user_repository: IUserRepository,
    ):
        self.saved_job_repo = saved_job_repository
        self.job_repo = job_repository
        self.user_repo = user_repository

    async def save(self, user: User, job_id: UUID) -> SavedJob:
        job = await self.job_repo.get_by_id(job_id)
        if not job:
            raise JobNotFoundException(job_id)

        if await self.saved_job_repo.get(user.id, job.id):
            raise DuplicateResourceException("SavedJob", "job_id", job.id, message="Job already saved")

        saved = await self.saved_job_repo.create(SavedJob(
            id=uuid4(),
            user_id=user.id,
            job_id=job.id,
            created_at=datetime.utcnow(),
        ))
        logger.info(f"User {user.id} saved job {job.id}")
        return saved

    async def unsave(self, user: User, job_id: UUID) -> None:
        if not await self.saved_job_repo.delete(user.id, job_id):
            raise ResourceNotFoundException("Saved job", job_id)
        logger.info(f"User {user.id} removed saved job {job_id}")

    async def list(
        self, user: User, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Tuple[SavedJob, Optional[Job]]], int]:
        """Bookmarks with their jobs; a bookmark whose job vanished carries None"""
        saved, total = await self.saved_job_repo.list(user.id, limit=limit, offset=offset)
        items = []
        for entry in saved:
            items.append((entry, await self.job_repo.get_by_id(entry.job_id)))
        return items, total

    async def companies_for(self, jobs: List[Optional[Job]]) -> Dict[UUID, Optional[User]]:
        return await load_companies(self.user_repo, jobs)

    async def is_saved(self, user: User, job_id: UUID) -> bool:
        return await self.saved_job_repo.get(user.id, job_id) is not None
