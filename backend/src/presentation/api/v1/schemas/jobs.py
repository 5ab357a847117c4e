"""
Job Request/Response Schemas
Pydantic v2 models for postings
"""
from datetime import datetime
from typing import Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.entities import Job, User
from domain.enums import JobType
from application.services.job_posting_service import JobInput
from .common import MessageResponse, Pagination


def _split_list(v):
    if v is None:
        return []
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class SalaryResponse(BaseModel):
    min: Optional[int] = None
    max: Optional[int] = None
    currency: str = "USD"


class CompanySummary(BaseModel):
    """Public view of the employer that owns a posting"""

    id: UUID
    company_name: str
    location: Optional[str] = None
    website: Optional[str] = None
    company_description: Optional[str] = None

    @classmethod
    def from_user(cls, employer: Optional[User]) -> Optional["CompanySummary"]:
        if employer is None:
            return None
        return cls(
            id=employer.id,
            company_name=employer.company_name or employer.full_name,
            location=employer.location,
            website=employer.website,
            company_description=employer.company_description,
        )


class JobRequest(BaseModel):
    """Create/update a job posting"""

    title: str = Field(..., max_length=200)
    description: str = Field(..., max_length=20000)
    requirements: str = Field(..., max_length=10000)
    location: str = Field(..., max_length=255)
    job_type: str = Field(..., description=", ".join(t.value for t in JobType))
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    skills: Union[List[str], str, None] = None
    benefits: Union[List[str], str, None] = None
    experience_level: Optional[str] = None
    education_level: Optional[str] = None
    application_deadline: Optional[datetime] = None
    status: Optional[str] = Field(None, description="active or draft on creation")

    @field_validator("skills", "benefits", mode="before")
    @classmethod
    def split_comma_separated(cls, v):
        return _split_list(v)

    @model_validator(mode="after")
    def check_salary(self):
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_max < self.salary_min
        ):
            raise ValueError("salary_max cannot be less than salary_min")
        return self

    def to_input(self) -> JobInput:
        return JobInput(
            title=self.title,
            description=self.description,
            requirements=self.requirements,
            location=self.location,
            job_type=self.job_type,
            salary_min=self.salary_min,
            salary_max=self.salary_max,
            currency=self.currency,
            skills=list(self.skills or []),
            benefits=list(self.benefits or []),
            experience_level=self.experience_level,
            education_level=self.education_level,
            application_deadline=self.application_deadline,
            status=self.status,
        )


class JobStatusRequest(BaseModel):
    status: str


class JobResponse(BaseModel):
    id: UUID
    company_id: UUID
    title: str
    description: str
    requirements: str
    location: str
    job_type: str
    status: str
    salary: Optional[SalaryResponse] = None
    skills: List[str] = []
    benefits: List[str] = []
    experience_level: Optional[str] = None
    education_level: Optional[str] = None
    application_deadline: Optional[datetime] = None
    applications_count: int = 0
    views_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    company: Optional[CompanySummary] = None

    @classmethod
    def from_entity(cls, job: Job, company: Optional[User] = None) -> "JobResponse":
        return cls(
            id=job.id,
            company_id=job.company_id,
            title=job.title,
            description=job.description,
            requirements=job.requirements,
            location=job.location,
            job_type=job.job_type.value,
            status=job.status.value,
            salary=SalaryResponse(**job.salary.to_dict()) if job.salary else None,
            skills=list(job.skills or []),
            benefits=list(job.benefits or []),
            experience_level=job.experience_level.value if job.experience_level else None,
            education_level=job.education_level.value if job.education_level else None,
            application_deadline=job.application_deadline,
            applications_count=job.applications_count,
            views_count=job.views_count,
            created_at=job.created_at,
            updated_at=job.updated_at,
            company=CompanySummary.from_user(company),
        )


class JobEnvelope(MessageResponse):
    job: JobResponse


class JobListResponse(MessageResponse):
    jobs: List[JobResponse]
    pagination: Pagination


class FeaturedJobsResponse(MessageResponse):
    jobs: List[JobResponse]


class LocationCount(BaseModel):
    location: str
    count: int


class JobStatsResponse(MessageResponse):
    total_jobs: int
    total_companies: int
    total_applications: int
    top_locations: List[LocationCount]


class JobDeletedResponse(MessageResponse):
    applications_deleted: int = 0
    saved_jobs_deleted: int = 0


class DashboardStatsResponse(MessageResponse):
    stats: Dict[str, int]
