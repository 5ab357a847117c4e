"""
Saved Job Repository Implementation
SQLAlchemy-based bookmark repository
"""
from typing import Optional, List, Tuple, Iterable
from uuid import UUID

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import SavedJob
from application.repositories.interfaces import ISavedJobRepository
from infrastructure.persistence.models.saved_job import SavedJobModel
from core.exceptions import RepositoryException, DuplicateResourceException


class SQLAlchemySavedJobRepository(ISavedJobRepository):
    """SQLAlchemy implementation of saved job repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: UUID, job_id: UUID) -> Optional[SavedJob]:
        try:
            result = await self.session.execute(
                select(SavedJobModel).where(
                    SavedJobModel.user_id == user_id,
                    SavedJobModel.job_id == job_id,
                )
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get saved job {job_id} for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get saved job: {str(e)}")

    async def create(self, saved_job: SavedJob) -> SavedJob:
        try:
            model = SavedJobModel(
                id=saved_job.id,
                user_id=saved_job.user_id,
                job_id=saved_job.job_id,
            )
            if saved_job.created_at:
                model.created_at = saved_job.created_at
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except IntegrityError:
            raise DuplicateResourceException(
                "SavedJob", "job_id", saved_job.job_id, message="Job already saved"
            )
        except Exception as e:
            logger.error(f"Failed to save job {saved_job.job_id}: {str(e)}")
            raise RepositoryException(f"Failed to save job: {str(e)}")

    async def delete(self, user_id: UUID, job_id: UUID) -> bool:
        try:
            result = await self.session.execute(
                delete(SavedJobModel)
                .where(SavedJobModel.user_id == user_id, SavedJobModel.job_id == job_id)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0

        except Exception as e:
            logger.error(f"Failed to remove saved job {job_id} for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to remove saved job: {str(e)}")

    async def list(
        self, user_id: UUID, limit: int = 20, offset: int = 0
    ) -> Tuple[List[SavedJob], int]:
        try:
            result = await self.session.execute(
                select(SavedJobModel)
                .where(SavedJobModel.user_id == user_id)
                .order_by(SavedJobModel.created_at.desc())
                .limit(limit)
                .offset(offset)
            )
            saved = [self._to_entity(m) for m in result.scalars().all()]

            total = await self.session.scalar(
                select(func.count(SavedJobModel.id)).where(SavedJobModel.user_id == user_id)
            )
            return saved, total or 0

        except Exception as e:
            logger.error(f"Failed to list saved jobs for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list saved jobs: {str(e)}")

    async def delete_by_jobs(self, job_ids: Iterable[UUID]) -> int:
        job_ids = list(job_ids)
        if not job_ids:
            return 0
        try:
            result = await self.session.execute(
                delete(SavedJobModel)
                .where(SavedJobModel.job_id.in_(job_ids))
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

        except Exception as e:
            logger.error(f"Failed to delete saved jobs for {len(job_ids)} job(s): {str(e)}")
            raise RepositoryException(f"Failed to delete saved jobs: {str(e)}")

    async def delete_by_user(self, user_id: UUID) -> int:
        try:
            result = await self.session.execute(
                delete(SavedJobModel)
                .where(SavedJobModel.user_id == user_id)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

        except Exception as e:
            logger.error(f"Failed to delete saved jobs of {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete saved jobs: {str(e)}")

    def _to_entity(self, model: SavedJobModel) -> SavedJob:
        return SavedJob(
            id=model.id,
            user_id=model.user_id,
            job_id=model.job_id,
            created_at=model.created_at,
        )
