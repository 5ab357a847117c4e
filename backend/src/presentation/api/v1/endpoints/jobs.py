"""
Public Job Endpoints
/api/jobs/* routes: browsing, featured postings, stats and applying
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from domain.entities import User
from application.services.application_service import ApplicationService
from application.services.job_posting_service import JobPostingService
from presentation.api.v1.container import get_application_service, get_job_posting_service
from presentation.api.v1.dependencies import require_jobseeker
from presentation.api.v1.schemas.applications import (
    ApplicationEnvelope,
    ApplicationResponse,
    ApplicationStatusCheckResponse,
    ApplyRequest,
)
from presentation.api.v1.schemas.common import Pagination
from presentation.api.v1.schemas.jobs import (
    FeaturedJobsResponse,
    JobEnvelope,
    JobListResponse,
    JobResponse,
    JobStatsResponse,
    LocationCount,
)


router = APIRouter()


@router.get("", response_model=JobListResponse)
async def list_jobs(
    search: Optional[str] = Query(None, description="Matches title, description or skills"),
    location: Optional[str] = Query(None),
    job_type: Optional[str] = Query(None, alias="jobType"),
    sort_by: str = Query("created_at", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    job_service: JobPostingService = Depends(get_job_posting_service),
):
    """Active jobs only"""
    jobs, total = await job_service.search_jobs(
        search=search,
        location=location,
        job_type=job_type,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )
    companies = await job_service.companies_for(jobs)
    return JobListResponse(
        jobs=[JobResponse.from_entity(j, companies.get(j.company_id)) for j in jobs],
        pagination=Pagination.of(total, limit, offset),
    )


@router.get("/featured/list", response_model=FeaturedJobsResponse)
async def featured_jobs(job_service: JobPostingService = Depends(get_job_posting_service)):
    jobs = await job_service.featured_jobs()
    companies = await job_service.companies_for(jobs)
    return FeaturedJobsResponse(
        jobs=[JobResponse.from_entity(j, companies.get(j.company_id)) for j in jobs]
    )


@router.get("/stats/overview", response_model=JobStatsResponse)
async def job_stats(job_service: JobPostingService = Depends(get_job_posting_service)):
    stats = await job_service.job_stats()
    return JobStatsResponse(
        total_jobs=stats["total_jobs"],
        total_companies=stats["total_companies"],
        total_applications=stats["total_applications"],
        top_locations=[LocationCount(**row) for row in stats["top_locations"]],
    )


@router.get("/{job_id}", response_model=JobEnvelope)
async def get_job(
    job_id: UUID,
    job_service: JobPostingService = Depends(get_job_posting_service),
):
    """Job details with the posting company; every fetch counts as a view"""
    job = await job_service.get_job(job_id)
    companies = await job_service.companies_for([job])
    return JobEnvelope(job=JobResponse.from_entity(job, companies.get(job.company_id)))


@router.post(
    "/{job_id}/apply",
    response_model=ApplicationEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def apply_for_job(
    job_id: UUID,
    body: Optional[ApplyRequest] = None,
    current_user: User = Depends(require_jobseeker),
    application_service: ApplicationService = Depends(get_application_service),
):
    application = await application_service.apply(
        job_id, current_user, cover_letter=body.cover_letter if body else None
    )
    return ApplicationEnvelope(
        message="Application submitted successfully",
        application=ApplicationResponse.from_entity(application),
    )


@router.get("/{job_id}/application-status", response_model=ApplicationStatusCheckResponse)
async def application_status(
    job_id: UUID,
    current_user: User = Depends(require_jobseeker),
    application_service: ApplicationService = Depends(get_application_service),
):
    result = await application_service.application_status(job_id, current_user)
    return ApplicationStatusCheckResponse(**result)
