"""
Saved Job Endpoints
/api/saved-jobs/* routes (jobseekers)
"""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from domain.entities import User
from application.services.saved_job_service import SavedJobService
from presentation.api.v1.container import get_saved_job_service
from presentation.api.v1.dependencies import require_jobseeker
from presentation.api.v1.schemas.common import MessageResponse, Pagination
from presentation.api.v1.schemas.jobs import JobResponse
from presentation.api.v1.schemas.saved_jobs import (
    SavedJobEnvelope,
    SavedJobListResponse,
    SavedJobResponse,
    SavedStatusResponse,
)


router = APIRouter()


@router.get("", response_model=SavedJobListResponse)
async def list_saved_jobs(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(require_jobseeker),
    saved_job_service: SavedJobService = Depends(get_saved_job_service),
):
    items, total = await saved_job_service.list(current_user, limit=limit, offset=offset)
    companies = await saved_job_service.companies_for([job for _, job in items])
    return SavedJobListResponse(
        saved_jobs=[
            SavedJobResponse(
                id=saved.id,
                job_id=saved.job_id,
                saved_at=saved.created_at,
                job=JobResponse.from_entity(job, companies.get(job.company_id)) if job else None,
            )
            for saved, job in items
        ],
        pagination=Pagination.of(total, limit, offset),
    )


@router.post("/{job_id}", response_model=SavedJobEnvelope, status_code=status.HTTP_201_CREATED)
async def save_job(
    job_id: UUID,
    current_user: User = Depends(require_jobseeker),
    saved_job_service: SavedJobService = Depends(get_saved_job_service),
):
    saved = await saved_job_service.save(current_user, job_id)
    return SavedJobEnvelope(
        message="Job saved successfully",
        saved_job=SavedJobResponse(id=saved.id, job_id=saved.job_id, saved_at=saved.created_at),
    )


@router.delete("/{job_id}", response_model=MessageResponse)
async def unsave_job(
    job_id: UUID,
    current_user: User = Depends(require_jobseeker),
    saved_job_service: SavedJobService = Depends(get_saved_job_service),
):
    await saved_job_service.unsave(current_user, job_id)
    return MessageResponse(message="Job removed from saved jobs")


@router.get("/{job_id}/status", response_model=SavedStatusResponse)
async def saved_status(
    job_id: UUID,
    current_user: User = Depends(require_jobseeker),
    saved_job_service: SavedJobService = Depends(get_saved_job_service),
):
    return SavedStatusResponse(is_saved=await saved_job_service.is_saved(current_user, job_id))
