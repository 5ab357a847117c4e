"""
Application Request/Response Schemas
Pydantic v2 models for job applications
"""
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.entities import Application, Job, User
from .common import MessageResponse, Pagination
from .jobs import CompanySummary


class ApplyRequest(BaseModel):
    cover_letter: Optional[str] = Field(None, max_length=5000)


class ApplicationStatusRequest(BaseModel):
    status: str
    notes: Optional[str] = Field(None, max_length=5000)
    interview_date: Optional[str] = None
    rejection_reason: Optional[str] = Field(None, max_length=2000)


class InterviewNotificationRequest(BaseModel):
    date: str = Field(..., min_length=1)
    time: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1, max_length=500)
    additional_notes: Optional[str] = Field(None, max_length=5000)


class JobSummary(BaseModel):
    id: UUID
    title: str
    location: str
    job_type: str
    status: str
    company: Optional[CompanySummary] = None


class ApplicantSummary(BaseModel):
    id: UUID
    full_name: str
    email: str
    phone: Optional[str] = None
    resume_url: Optional[str] = None
    skills: List[str] = []


class ApplicationResponse(BaseModel):
    id: UUID
    job_id: UUID
    applicant_id: UUID
    employer_id: UUID
    status: str
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    notes: Optional[str] = None
    interview_date: Optional[str] = None
    interview_time: Optional[str] = None
    interview_location: Optional[str] = None
    interview_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    job: Optional[JobSummary] = None
    applicant: Optional[ApplicantSummary] = None

    @classmethod
    def from_entity(
        cls,
        application: Application,
        job: Optional[Job] = None,
        applicant: Optional[User] = None,
        company: Optional[User] = None,
    ) -> "ApplicationResponse":
        return cls(
            id=application.id,
            job_id=application.job_id,
            applicant_id=application.applicant_id,
            employer_id=application.employer_id,
            status=application.status.value,
            cover_letter=application.cover_letter,
            resume_url=application.resume_url,
            notes=application.notes,
            interview_date=application.interview_date,
            interview_time=application.interview_time,
            interview_location=application.interview_location,
            interview_notes=application.interview_notes,
            rejection_reason=application.rejection_reason,
            created_at=application.created_at,
            updated_at=application.updated_at,
            job=JobSummary(
                id=job.id,
                title=job.title,
                location=job.location,
                job_type=job.job_type.value,
                status=job.status.value,
                company=CompanySummary.from_user(company),
            ) if job else None,
            applicant=ApplicantSummary(
                id=applicant.id,
                full_name=applicant.full_name,
                email=str(applicant.email),
                phone=applicant.phone,
                resume_url=applicant.resume_url,
                skills=list(applicant.skills or []),
            ) if applicant else None,
        )

    @classmethod
    def from_described(cls, item: Dict) -> "ApplicationResponse":
        return cls.from_entity(
            item["application"], item.get("job"), item.get("applicant"), item.get("company")
        )


class ApplicationEnvelope(MessageResponse):
    application: ApplicationResponse


class ApplicationListResponse(MessageResponse):
    applications: List[ApplicationResponse]
    pagination: Pagination


class ApplicationStatusCheckResponse(MessageResponse):
    has_applied: bool
    status: Optional[str] = None
    applied_date: Optional[datetime] = None
