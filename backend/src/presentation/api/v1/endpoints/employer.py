"""
Employer Endpoints
/api/employer/* routes; every route requires an approved employer
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from domain.entities import User
from application.services.application_service import ApplicationService
from application.services.job_posting_service import JobPostingService
from presentation.api.v1.container import get_application_service, get_job_posting_service
from presentation.api.v1.dependencies import get_approved_employer
from presentation.api.v1.schemas.applications import (
    ApplicationEnvelope,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusRequest,
    InterviewNotificationRequest,
)
from presentation.api.v1.schemas.common import Pagination
from presentation.api.v1.schemas.jobs import (
    DashboardStatsResponse,
    JobDeletedResponse,
    JobEnvelope,
    JobListResponse,
    JobRequest,
    JobResponse,
)


router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
async def dashboard_stats(
    employer: User = Depends(get_approved_employer),
    application_service: ApplicationService = Depends(get_application_service),
):
    stats = await application_service.employer_stats(employer)
    return DashboardStatsResponse(stats=stats)


# ============================================================================
# Jobs
# ============================================================================

@router.get("/jobs", response_model=JobListResponse)
async def list_jobs(
    job_status: Optional[str] = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    employer: User = Depends(get_approved_employer),
    job_service: JobPostingService = Depends(get_job_posting_service),
):
    """The caller's own postings in every status"""
    jobs, total = await job_service.list_employer_jobs(
        employer, status=job_status, limit=limit, offset=offset
    )
    return JobListResponse(
        jobs=[JobResponse.from_entity(j) for j in jobs],
        pagination=Pagination.of(total, limit, offset),
    )


@router.post("/jobs", response_model=JobEnvelope, status_code=status.HTTP_201_CREATED)
async def create_job(
    body: JobRequest,
    employer: User = Depends(get_approved_employer),
    job_service: JobPostingService = Depends(get_job_posting_service),
):
    job = await job_service.create_job(employer, body.to_input())
    return JobEnvelope(message="Job posted successfully", job=JobResponse.from_entity(job))


@router.get("/jobs/{job_id}", response_model=JobEnvelope)
async def get_job(
    job_id: UUID,
    employer: User = Depends(get_approved_employer),
    job_service: JobPostingService = Depends(get_job_posting_service),
):
    """Owner view; does not count as a view"""
    job = await job_service.get_employer_job(job_id, employer)
    return JobEnvelope(job=JobResponse.from_entity(job))


@router.put("/jobs/{job_id}", response_model=JobEnvelope)
async def update_job(
    job_id: UUID,
    body: JobRequest,
    employer: User = Depends(get_approved_employer),
    job_service: JobPostingService = Depends(get_job_posting_service),
):
    job = await job_service.update_job(job_id, employer, body.to_input())
    return JobEnvelope(message="Job updated successfully", job=JobResponse.from_entity(job))


@router.delete("/jobs/{job_id}", response_model=JobDeletedResponse)
async def delete_job(
    job_id: UUID,
    employer: User = Depends(get_approved_employer),
    job_service: JobPostingService = Depends(get_job_posting_service),
):
    removed = await job_service.delete_job(job_id, employer)
    return JobDeletedResponse(message="Job deleted successfully", **removed)


@router.patch("/jobs/{job_id}/status", response_model=JobEnvelope)
async def toggle_job_status(
    job_id: UUID,
    employer: User = Depends(get_approved_employer),
    job_service: JobPostingService = Depends(get_job_posting_service),
):
    """Active postings close; closed or draft postings re-open"""
    job = await job_service.toggle_status(job_id, employer)
    return JobEnvelope(
        message=f"Job {job.status.value} successfully",
        job=JobResponse.from_entity(job),
    )


# ============================================================================
# Applications
# ============================================================================

@router.get("/applications", response_model=ApplicationListResponse)
async def list_applications(
    application_status: Optional[str] = Query(None, alias="status"),
    job_id: Optional[UUID] = Query(None, alias="jobId"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    employer: User = Depends(get_approved_employer),
    application_service: ApplicationService = Depends(get_application_service),
):
    applications, total = await application_service.list_for_employer(
        employer, status=application_status, job_id=job_id, limit=limit, offset=offset
    )
    described = await application_service.describe(applications)
    return ApplicationListResponse(
        applications=[ApplicationResponse.from_described(item) for item in described],
        pagination=Pagination.of(total, limit, offset),
    )


@router.get("/applications/{application_id}", response_model=ApplicationEnvelope)
async def get_application(
    application_id: UUID,
    employer: User = Depends(get_approved_employer),
    application_service: ApplicationService = Depends(get_application_service),
):
    application = await application_service.get_for_employer(application_id, employer)
    described = await application_service.describe([application])
    return ApplicationEnvelope(application=ApplicationResponse.from_described(described[0]))


@router.patch("/applications/{application_id}/status", response_model=ApplicationEnvelope)
async def update_application_status(
    application_id: UUID,
    body: ApplicationStatusRequest,
    employer: User = Depends(get_approved_employer),
    application_service: ApplicationService = Depends(get_application_service),
):
    application = await application_service.update_status(
        application_id,
        employer,
        body.status,
        notes=body.notes,
        interview_date=body.interview_date,
        rejection_reason=body.rejection_reason,
    )
    return ApplicationEnvelope(
        message="Application status updated successfully",
        application=ApplicationResponse.from_entity(application),
    )


@router.post(
    "/applications/{application_id}/interview-notification",
    response_model=ApplicationEnvelope,
)
async def send_interview_notification(
    application_id: UUID,
    body: InterviewNotificationRequest,
    employer: User = Depends(get_approved_employer),
    application_service: ApplicationService = Depends(get_application_service),
):
    """Email the invitation, then mark the application as interview"""
    application = await application_service.schedule_interview(
        application_id,
        employer,
        date=body.date,
        time=body.time,
        location=body.location,
        additional_notes=body.additional_notes,
    )
    return ApplicationEnvelope(
        message="Interview notification sent successfully",
        application=ApplicationResponse.from_entity(application),
    )
