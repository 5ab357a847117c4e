"""
Job Repository Implementation
SQLAlchemy-based job repository with atomic counters
"""
from typing import Optional, List, Dict, Tuple
from uuid import UUID

from sqlalchemy import select, update, delete, func, or_, case, cast, String
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Job
from domain.enums import JobType, ExperienceLevel, EducationLevel
from domain.value_objects import SalaryRange, JobStatus
from application.repositories.interfaces import IJobRepository
from infrastructure.persistence.models.job import JobModel
from core.exceptions import RepositoryException


class SQLAlchemyJobRepository(IJobRepository):
    """SQLAlchemy implementation of job repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, job_id: UUID) -> Optional[JobModel]:
        result = await self.session.execute(
            select(JobModel)
            .where(JobModel.id == job_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID"""
        try:
            model = await self._get_model(job_id)
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get job by ID {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to get job: {str(e)}")

    async def create(self, job: Job) -> Job:
        try:
            model = self._to_model(job)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to create job {job.title}: {str(e)}")
            raise RepositoryException(f"Failed to create job: {str(e)}")

    async def update(self, job: Job) -> Job:
        try:
            model = await self._get_model(job.id)
            if not model:
                raise RepositoryException(f"Job not found: {job.id}")

            self._apply(model, job)
            await self.session.flush()
            await self.session.refresh(model)
            return self._to_entity(model)

        except RepositoryException:
            raise
        except Exception as e:
            logger.error(f"Failed to update job {job.id}: {str(e)}")
            raise RepositoryException(f"Failed to update job: {str(e)}")

    async def set_status(self, job_id: UUID, status: JobStatus) -> Optional[Job]:
        try:
            await self.session.execute(
                update(JobModel)
                .where(JobModel.id == job_id)
                .values(status=status.value, updated_at=func.now())
                .execution_options(synchronize_session=False)
            )
            return await self.get_by_id(job_id)

        except RepositoryException:
            raise
        except Exception as e:
            logger.error(f"Failed to set status of job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to update job status: {str(e)}")

    async def delete(self, job_id: UUID) -> bool:
        try:
            result = await self.session.execute(
                delete(JobModel)
                .where(JobModel.id == job_id)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0

        except Exception as e:
            logger.error(f"Failed to delete job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete job: {str(e)}")

    async def _bump(self, job_id: UUID, column, delta_expr, *conditions) -> None:
        await self.session.execute(
            update(JobModel)
            .where(JobModel.id == job_id, *conditions)
            .values({column: delta_expr})
            .execution_options(synchronize_session=False)
        )

    async def increment_views(self, job_id: UUID) -> None:
        try:
            await self._bump(job_id, JobModel.views_count, JobModel.views_count + 1)
        except Exception as e:
            logger.error(f"Failed to record view for job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to record job view: {str(e)}")

    async def increment_applications(self, job_id: UUID) -> None:
        try:
            await self._bump(job_id, JobModel.applications_count, JobModel.applications_count + 1)
        except Exception as e:
            logger.error(f"Failed to increment applications for job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to update application count: {str(e)}")

    async def decrement_applications(self, job_id: UUID, amount: int = 1) -> None:
        try:
            await self._bump(
                job_id,
                JobModel.applications_count,
                case(
                    (JobModel.applications_count > amount, JobModel.applications_count - amount),
                    else_=0,
                ),
            )
        except Exception as e:
            logger.error(f"Failed to decrement applications for job {job_id}: {str(e)}")
            raise RepositoryException(f"Failed to update application count: {str(e)}")

    def _filtered(self, query, status, company_id, search, location, job_type):
        if status:
            query = query.where(JobModel.status == status.value)
        if company_id:
            query = query.where(JobModel.company_id == company_id)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(
                JobModel.title.ilike(pattern),
                JobModel.description.ilike(pattern),
                cast(JobModel.skills, String).ilike(pattern),
            ))
        if location:
            query = query.where(JobModel.location.ilike(f"%{location}%"))
        if job_type:
            query = query.where(JobModel.job_type == job_type)
        return query

    async def search(
        self,
        status: Optional[JobStatus] = None,
        company_id: Optional[UUID] = None,
        search: Optional[str] = None,
        location: Optional[str] = None,
        job_type: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Job], int]:
        try:
            filters = (status, company_id, search, location, job_type)
            column = getattr(JobModel, sort_by, JobModel.created_at)
            ordering = column.asc() if sort_order == "asc" else column.desc()

            result = await self.session.execute(
                self._filtered(select(JobModel), *filters)
                .order_by(ordering)
                .limit(limit)
                .offset(offset)
                .execution_options(populate_existing=True)
            )
            jobs = [self._to_entity(m) for m in result.scalars().all()]

            total = await self.session.scalar(
                self._filtered(select(func.count(JobModel.id)), *filters)
            )
            return jobs, total or 0

        except Exception as e:
            logger.error(f"Failed to search jobs: {str(e)}")
            raise RepositoryException(f"Failed to search jobs: {str(e)}")

    async def most_viewed(self, limit: int = 6) -> List[Job]:
        try:
            result = await self.session.execute(
                select(JobModel)
                .where(JobModel.status == JobStatus.ACTIVE.value)
                .order_by(JobModel.views_count.desc(), JobModel.created_at.desc())
                .limit(limit)
                .execution_options(populate_existing=True)
            )
            return [self._to_entity(m) for m in result.scalars().all()]

        except Exception as e:
            logger.error(f"Failed to get featured jobs: {str(e)}")
            raise RepositoryException(f"Failed to get featured jobs: {str(e)}")

    async def ids_by_company(self, company_id: UUID) -> List[UUID]:
        try:
            result = await self.session.execute(
                select(JobModel.id).where(JobModel.company_id == company_id)
            )
            return list(result.scalars().all())

        except Exception as e:
            logger.error(f"Failed to list job ids for company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to list jobs: {str(e)}")

    async def delete_by_company(self, company_id: UUID) -> int:
        try:
            result = await self.session.execute(
                delete(JobModel)
                .where(JobModel.company_id == company_id)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

        except Exception as e:
            logger.error(f"Failed to delete jobs of company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete jobs: {str(e)}")

    async def count(
        self,
        status: Optional[JobStatus] = None,
        company_id: Optional[UUID] = None,
    ) -> int:
        try:
            total = await self.session.scalar(
                self._filtered(select(func.count(JobModel.id)), status, company_id, None, None, None)
            )
            return total or 0

        except Exception as e:
            logger.error(f"Failed to count jobs: {str(e)}")
            raise RepositoryException(f"Failed to count jobs: {str(e)}")

    async def count_companies(self, status: Optional[JobStatus] = None) -> int:
        try:
            query = select(func.count(func.distinct(JobModel.company_id)))
            if status:
                query = query.where(JobModel.status == status.value)
            return await self.session.scalar(query) or 0

        except Exception as e:
            logger.error(f"Failed to count companies: {str(e)}")
            raise RepositoryException(f"Failed to count companies: {str(e)}")

    async def top_locations(self, limit: int = 5) -> List[Dict]:
        try:
            total = func.count(JobModel.id).label("count")
            result = await self.session.execute(
                select(JobModel.location, total)
                .where(JobModel.status == JobStatus.ACTIVE.value)
                .group_by(JobModel.location)
                .order_by(total.desc(), JobModel.location)
                .limit(limit)
            )
            return [{"location": row.location, "count": row.count} for row in result.all()]

        except Exception as e:
            logger.error(f"Failed to compute top locations: {str(e)}")
            raise RepositoryException(f"Failed to compute job stats: {str(e)}")

    async def sum_counters(self, company_id: UUID) -> Dict[str, int]:
        try:
            result = await self.session.execute(
                select(
                    func.coalesce(func.sum(JobModel.views_count), 0),
                    func.coalesce(func.sum(JobModel.applications_count), 0),
                ).where(JobModel.company_id == company_id)
            )
            views, applications = result.one()
            return {"views": int(views), "applications": int(applications)}

        except Exception as e:
            logger.error(f"Failed to sum counters for company {company_id}: {str(e)}")
            raise RepositoryException(f"Failed to compute job stats: {str(e)}")

    @staticmethod
    def _apply(model: JobModel, job: Job) -> None:
        """Copy editable fields; counters are only touched by atomic updates"""
        model.company_id = job.company_id
        model.title = job.title
        model.description = job.description
        model.requirements = job.requirements
        model.location = job.location
        model.job_type = job.job_type.value
        model.status = job.status.value
        model.salary_min = job.salary.min_salary if job.salary else None
        model.salary_max = job.salary.max_salary if job.salary else None
        model.salary_currency = job.salary.currency if job.salary else None
        model.skills = list(job.skills or [])
        model.benefits = list(job.benefits or [])
        model.experience_level = job.experience_level.value if job.experience_level else None
        model.education_level = job.education_level.value if job.education_level else None
        model.application_deadline = job.application_deadline
        if job.updated_at:
            model.updated_at = job.updated_at

    def _to_model(self, job: Job) -> JobModel:
        model = JobModel(
            id=job.id,
            applications_count=job.applications_count,
            views_count=job.views_count,
        )
        self._apply(model, job)
        if job.created_at:
            model.created_at = job.created_at
        return model

    def _to_entity(self, model: JobModel) -> Job:
        salary = None
        if model.salary_min is not None:
            salary = SalaryRange(
                min_salary=model.salary_min,
                max_salary=model.salary_max,
                currency=model.salary_currency or "USD",
            )

        return Job(
            id=model.id,
            company_id=model.company_id,
            title=model.title,
            description=model.description,
            requirements=model.requirements,
            location=model.location,
            job_type=JobType(model.job_type),
            salary=salary,
            status=JobStatus(model.status),
            skills=list(model.skills or []),
            benefits=list(model.benefits or []),
            experience_level=ExperienceLevel(model.experience_level) if model.experience_level else None,
            education_level=EducationLevel(model.education_level) if model.education_level else None,
            application_deadline=model.application_deadline,
            applications_count=model.applications_count or 0,
            views_count=model.views_count or 0,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
