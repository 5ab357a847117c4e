"""
Application Repository Implementation
SQLAlchemy-based job application repository
"""
from typing import Optional, List, Dict, Tuple
from uuid import UUID

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Application
from domain.value_objects import ApplicationStatus
from application.repositories.interfaces import IApplicationRepository
from infrastructure.persistence.models.application import ApplicationModel
from core.exceptions import RepositoryException, DuplicateResourceException


class SQLAlchemyApplicationRepository(IApplicationRepository):
    """SQLAlchemy implementation of application repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, application_id: UUID) -> Optional[ApplicationModel]:
        result = await self.session.execute(
            select(ApplicationModel).where(ApplicationModel.id == application_id)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        try:
            model = await self._get_model(application_id)
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to get application: {str(e)}")

    async def get_for_job_and_applicant(
        self, job_id: UUID, applicant_id: UUID
    ) -> Optional[Application]:
        try:
            result = await self.session.execute(
                select(ApplicationModel).where(
                    ApplicationModel.job_id == job_id,
                    ApplicationModel.applicant_id == applicant_id,
                )
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to look up application for job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to get application: {str(e)}")

    async def create(self, application: Application) -> Application:
        try:
            model = self._to_model(application)
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except IntegrityError:
            raise DuplicateResourceException("Application", "job_id", application.job_id)
        except Exception as e:
            logger.error(f"Failed to create application for job {application.job_id}: {str(e)}")
            raise RepositoryException(f"Failed to create application: {str(e)}")

    async def update(self, application: Application) -> Application:
        try:
            model = await self._get_model(application.id)
            if not model:
                raise RepositoryException(f"Application not found: {application.id}")

            self._apply(model, application)
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except RepositoryException:
            raise
        except Exception as e:
            logger.error(f"Failed to update application {application.id}: {str(e)}")
            raise RepositoryException(f"Failed to update application: {str(e)}")

    async def delete(self, application_id: UUID) -> bool:
        try:
            model = await self._get_model(application_id)
            if model:
                await self.session.delete(model)
                await self.session.flush()
                return True
            return False

        except Exception as e:
            logger.error(f"Failed to delete application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete application: {str(e)}")

    def _filtered(self, query, applicant_id, employer_id, job_id, status):
        if applicant_id:
            query = query.where(ApplicationModel.applicant_id == applicant_id)
        if employer_id:
            query = query.where(ApplicationModel.employer_id == employer_id)
        if job_id:
            query = query.where(ApplicationModel.job_id == job_id)
        if status:
            query = query.where(ApplicationModel.status == status.value)
        return query

    async def list(
        self,
        applicant_id: Optional[UUID] = None,
        employer_id: Optional[UUID] = None,
        job_id: Optional[UUID] = None,
        status: Optional[ApplicationStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Application], int]:
        try:
            filters = (applicant_id, employer_id, job_id, status)
            result = await self.session.execute(
                self._filtered(select(ApplicationModel), *filters)
                .order_by(ApplicationModel.created_at.desc())
                .limit(limit)
                .offset(offset)
            )
            applications = [self._to_entity(m) for m in result.scalars().all()]

            total = await self.count(*filters)
            return applications, total

        except RepositoryException:
            raise
        except Exception as e:
            logger.error(f"Failed to list applications: {str(e)}")
            raise RepositoryException(f"Failed to list applications: {str(e)}")

    async def count(
        self,
        applicant_id: Optional[UUID] = None,
        employer_id: Optional[UUID] = None,
        job_id: Optional[UUID] = None,
        status: Optional[ApplicationStatus] = None,
    ) -> int:
        try:
            total = await self.session.scalar(
                self._filtered(
                    select(func.count(ApplicationModel.id)),
                    applicant_id, employer_id, job_id, status,
                )
            )
            return total or 0

        except Exception as e:
            logger.error(f"Failed to count applications: {str(e)}")
            raise RepositoryException(f"Failed to count applications: {str(e)}")

    async def _bulk_delete(self, *conditions) -> int:
        result = await self.session.execute(
            delete(ApplicationModel)
            .where(*conditions)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_by_job(self, job_id: UUID) -> int:
        try:
            return await self._bulk_delete(ApplicationModel.job_id == job_id)
        except Exception as e:
            logger.error(f"Failed to delete applications of job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete applications: {str(e)}")

    async def delete_by_employer(self, employer_id: UUID) -> int:
        try:
            return await self._bulk_delete(ApplicationModel.employer_id == employer_id)
        except Exception as e:
            logger.error(f"Failed to delete applications of employer {employer_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete applications: {str(e)}")

    async def delete_by_applicant(self, applicant_id: UUID) -> Dict[UUID, int]:
        try:
            result = await self.session.execute(
                select(ApplicationModel.job_id, func.count(ApplicationModel.id))
                .where(ApplicationModel.applicant_id == applicant_id)
                .group_by(ApplicationModel.job_id)
            )
            per_job = {job_id: count for job_id, count in result.all()}

            await self._bulk_delete(ApplicationModel.applicant_id == applicant_id)
            return per_job

        except Exception as e:
            logger.error(f"Failed to delete applications of applicant {applicant_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete applications: {str(e)}")

    @staticmethod
    def _apply(model: ApplicationModel, application: Application) -> None:
        model.job_id = application.job_id
        model.applicant_id = application.applicant_id
        model.employer_id = application.employer_id
        model.status = application.status.value
        model.cover_letter = application.cover_letter
        model.resume_url = application.resume_url
        model.notes = application.notes
        model.interview_date = application.interview_date
        model.interview_time = application.interview_time
        model.interview_location = application.interview_location
        model.interview_notes = application.interview_notes
        model.rejection_reason = application.rejection_reason
        if application.updated_at:
            model.updated_at = application.updated_at

    def _to_model(self, application: Application) -> ApplicationModel:
        model = ApplicationModel(id=application.id)
        self._apply(model, application)
        if application.created_at:
            model.created_at = application.created_at
        return model

    def _to_entity(self, model: ApplicationModel) -> Application:
        return Application(
            id=model.id,
            job_id=model.job_id,
            applicant_id=model.applicant_id,
            employer_id=model.employer_id,
            status=ApplicationStatus(model.status),
            cover_letter=model.cover_letter,
            resume_url=model.resume_url,
            notes=model.notes,
            interview_date=model.interview_date,
            interview_time=model.interview_time,
            interview_location=model.interview_location,
            interview_notes=model.interview_notes,
            rejection_reason=model.rejection_reason,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
