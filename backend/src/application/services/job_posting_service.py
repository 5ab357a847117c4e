"""
Job Posting Service
Creation, editing, status changes, deletion and public browsing of jobs
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union
from uuid import UUID, uuid4

from loguru import logger

from core.exceptions import (
    AuthorizationException,
    JobNotFoundException,
    ValidationException,
)
from domain.entities import Job, User
from domain.enums import JobType, ExperienceLevel, EducationLevel, UserStatus
from domain.transitions import JOB_TRANSITIONS, ensure_allowed, toggled_job_status
from domain.value_objects import JobStatus, SalaryRange
from application.repositories.interfaces import (
    IApplicationRepository,
    IJobRepository,
    ISavedJobRepository,
    IUserRepository,
)
from application.services.companies import load_companies


SORTABLE_FIELDS = {"created_at", "title", "views_count", "applications_count", "location"}


@dataclass
class JobInput:
    """Editable fields of a posting as submitted by an employer"""

    title: str
    description: str
    requirements: str
    location: str
    job_type: str
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    currency: str = "USD"
    skills: List[str] = field(default_factory=list)
    benefits: List[str] = field(default_factory=list)
    experience_level: Optional[str] = None
    education_level: Optional[str] = None
    application_deadline: Optional[datetime] = None
    status: Optional[str] = None


def _min_length(field_name: str, value: Optional[str], minimum: int, label: str) -> str:
    value = (value or "").strip()
    if len(value) < minimum:
        raise ValidationException(field_name, f"{label} must be at least {minimum} characters")
    return value


def _enum_value(enum_cls, field_name: str, value, label: str):
    if value in (None, ""):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationException(field_name, f"{label} must be one of: {allowed}")


def _clean_list(values: Optional[List[str]]) -> List[str]:
    return [v.strip() for v in (values or []) if v and v.strip()]


def _parse_job_status(status: Union[str, JobStatus]) -> JobStatus:
    try:
        return JobStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in JobStatus)
        raise ValidationException("status", f"Invalid status. Must be one of: {allowed}")


def validate_job_input(data: JobInput) -> dict:
    """Validate a submission and return Job constructor fields"""
    fields = {
        "title": _min_length("title", data.title, 3, "Job title"),
        "description": _min_length("description", data.description, 50, "Job description"),
        "requirements": _min_length("requirements", data.requirements, 20, "Job requirements"),
        "location": _min_length("location", data.location, 2, "Location"),
    }

    job_type = _enum_value(JobType, "job_type", data.job_type, "Job type")
    if job_type is None:
        raise ValidationException("job_type", "Job type is required")
    fields["job_type"] = job_type

    salary = None
    if data.salary_min is not None or data.salary_max is not None:
        try:
            salary = SalaryRange(
                min_salary=data.salary_min or 0,
                max_salary=data.salary_max,
                currency=(data.currency or "USD").upper(),
            )
        except ValueError as e:
            raise ValidationException("salary", str(e))
    fields["salary"] = salary

    fields["skills"] = _clean_list(data.skills)
    fields["benefits"] = _clean_list(data.benefits)
    fields["experience_level"] = _enum_value(
        ExperienceLevel, "experience_level", data.experience_level, "Experience level"
    )
    fields["education_level"] = _enum_value(
        EducationLevel, "education_level", data.education_level, "Education level"
    )
    fields["application_deadline"] = data.application_deadline
    return fields


class JobPostingService:
    """Job lifecycle: draft/active/closed postings owned by approved employers"""

    def __init__(
        self,
        job_repository: IJobRepository,
        application_repository: IApplicationRepository,
        saved_job_repository: ISavedJobRepository,
        user_repository: IUserRepository,
    ):
        self.job_repo = job_repository
        self.application_repo = application_repository
        self.saved_job_repo = saved_job_repository
        self.user_repo = user_repository

    @staticmethod
    def ensure_can_manage_jobs(actor: User) -> None:
        """Admins, or employers whose account is approved"""
        if actor.is_admin():
            return
        if not actor.is_employer():
            raise AuthorizationException("Access denied. Employer role required.")
        if actor.status == UserStatus.PENDING:
            raise AuthorizationException("Account pending approval")
        if not actor.can_post_jobs():
            raise AuthorizationException("Account not approved")

    async def _load_managed(self, job_id: UUID, actor: User) -> Job:
        self.ensure_can_manage_jobs(actor)
        job = await self.job_repo.get_by_id(job_id)
        if not job:
            raise JobNotFoundException(job_id)
        if not actor.is_admin() and not job.is_owned_by(actor.id):
            logger.warning(f"User {actor.id} tried to manage job {job_id} they do not own")
            raise AuthorizationException("You can only manage your own job postings")
        return job

    async def create_job(self, employer: User, data: JobInput) -> Job:
        """Publish a new posting (active unless submitted as draft)"""
        if not employer.is_employer():
            raise AuthorizationException("Only employers can post jobs")
        self.ensure_can_manage_jobs(employer)

        fields = validate_job_input(data)
        status = _parse_job_status(data.status) if data.status else JobStatus.ACTIVE
        if status == JobStatus.CLOSED:
            raise ValidationException("status", "A new job cannot be created closed")

        now = datetime.utcnow()
        job = await self.job_repo.create(Job(
            id=uuid4(),
            company_id=employer.id,
            status=status,
            created_at=now,
            updated_at=now,
            **fields,
        ))
        logger.info(f"Job {job.id} created by employer {employer.id} ({status.value})")
        return job

    async def update_job(self, job_id: UUID, actor: User, data: JobInput) -> Job:
        """Replace the editable fields of a posting"""
        job = await self._load_managed(job_id, actor)
        fields = validate_job_input(data)
        updated = await self.job_repo.update(replace(job, updated_at=datetime.utcnow(), **fields))
        logger.info(f"Job {job_id} updated by {actor.id}")
        return updated

    async def toggle_status(self, job_id: UUID, actor: User) -> Job:
        """Owner switch: active closes, closed or draft re-opens"""
        job = await self._load_managed(job_id, actor)
        target = toggled_job_status(job.status)
        ensure_allowed("job", JOB_TRANSITIONS, job.status, target)
        updated = await self.job_repo.set_status(job.id, target)
        logger.info(f"Job {job_id} {job.status.value} -> {target.value} by {actor.id}")
        return updated

    async def set_status(self, job_id: UUID, status: Union[str, JobStatus], actor: User) -> Job:
        """Admin override to any job status"""
        if not actor.is_admin():
            raise AuthorizationException("Only administrators can set job status directly")
        target = _parse_job_status(status)
        job = await self.job_repo.get_by_id(job_id)
        if not job:
            raise JobNotFoundException(job_id)
        if job.status == target:
            return job
        ensure_allowed("job", JOB_TRANSITIONS, job.status, target)
        updated = await self.job_repo.set_status(job.id, target)
        logger.info(f"Job {job_id} {job.status.value} -> {target.value} by admin {actor.id}")
        return updated

    async def delete_job(self, job_id: UUID, actor: User) -> Dict[str, int]:
        """Delete a job together with its applications and bookmarks"""
        job = await self._load_managed(job_id, actor)

        applications = await self.application_repo.delete_by_job(job.id)
        bookmarks = await self.saved_job_repo.delete_by_jobs([job.id])
        await self.job_repo.delete(job.id)

        logger.info(
            f"Job {job_id} deleted by {actor.id} "
            f"({applications} applications, {bookmarks} bookmarks removed)"
        )
        return {"applications_deleted": applications, "saved_jobs_deleted": bookmarks}

    async def get_job(self, job_id: UUID, record_view: bool = True) -> Job:
        """Fetch a job; each public fetch counts as one view"""
        job = await self.job_repo.get_by_id(job_id)
        if not job:
            raise JobNotFoundException(job_id)
        if record_view:
            await self.job_repo.increment_views(job.id)
            job = await self.job_repo.get_by_id(job.id)
        return job

    async def search_jobs(
        self,
        search: Optional[str] = None,
        location: Optional[str] = None,
        job_type: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Job], int]:
        """Public listing of active jobs"""
        if sort_by not in SORTABLE_FIELDS:
            sort_by = "created_at"
        return await self.job_repo.search(
            status=JobStatus.ACTIVE,
            search=search,
            location=location,
            job_type=job_type,
            sort_by=sort_by,
            sort_order="asc" if sort_order == "asc" else "desc",
            limit=limit,
            offset=offset,
        )

    async def featured_jobs(self, limit: int = 6) -> List[Job]:
        return await self.job_repo.most_viewed(limit)

    async def companies_for(self, jobs: List[Job]) -> Dict[UUID, Optional[User]]:
        """Owning employers of the given jobs, keyed by company_id"""
        return await load_companies(self.user_repo, jobs)

    async def job_stats(self) -> Dict:
        """Public overview numbers"""
        return {
            "total_jobs": await self.job_repo.count(status=JobStatus.ACTIVE),
            "total_companies": await self.job_repo.count_companies(status=JobStatus.ACTIVE),
            "total_applications": await self.application_repo.count(),
            "top_locations": await self.job_repo.top_locations(5),
        }

    async def list_employer_jobs(
        self,
        employer: User,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Job], int]:
        self.ensure_can_manage_jobs(employer)
        return await self.job_repo.search(
            status=_parse_job_status(status) if status else None,
            company_id=employer.id,
            limit=limit,
            offset=offset,
        )

    async def get_employer_job(self, job_id: UUID, employer: User) -> Job:
        return await self._load_managed(job_id, employer)

    async def list_all_jobs(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Job], int]:
        """Admin listing across every status"""
        return await self.job_repo.search(
            status=_parse_job_status(status) if status else None,
            search=search,
            limit=limit,
            offset=offset,
        )
