"""
Admin Endpoints
/api/admin/* routes: employer approval, user and job moderation
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from domain.entities import User
from application.services.admin_service import AdminService
from application.services.employer_approval_service import EmployerApprovalService
from application.services.job_posting_service import JobPostingService
from presentation.api.v1.container import (
    get_admin_service,
    get_employer_approval_service,
    get_job_posting_service,
)
from presentation.api.v1.dependencies import require_admin
from presentation.api.v1.schemas.admin import (
    EmployerStatusRequest,
    EmployerStatusResponse,
    UserDeletedResponse,
    UserListResponse,
)
from presentation.api.v1.schemas.common import Pagination
from presentation.api.v1.schemas.jobs import (
    DashboardStatsResponse,
    JobDeletedResponse,
    JobEnvelope,
    JobListResponse,
    JobResponse,
    JobStatusRequest,
)
from presentation.api.v1.schemas.users import UserResponse


router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
async def dashboard_stats(
    admin: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
):
    return DashboardStatsResponse(stats=await admin_service.dashboard_stats())


@router.get("/employers", response_model=UserListResponse)
async def list_employers(
    employer_status: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    admin: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
):
    employers, total = await admin_service.list_employers(
        status=employer_status, search=search, limit=limit, offset=offset
    )
    return UserListResponse(
        users=[UserResponse.from_entity(u) for u in employers],
        pagination=Pagination.of(total, limit, offset),
    )


@router.patch("/employers/{employer_id}/status", response_model=EmployerStatusResponse)
async def update_employer_status(
    employer_id: UUID,
    body: EmployerStatusRequest,
    admin: User = Depends(require_admin),
    approval_service: EmployerApprovalService = Depends(get_employer_approval_service),
):
    """
    Approve, reject, suspend or re-open an employer

    Setting the status the employer already has succeeds without side effects.
    """
    employer, changed = await approval_service.set_status(
        employer_id, body.status, admin, reason=body.reason
    )
    message = (
        f"Employer {employer.status.value} successfully"
        if changed else f"Employer is already {employer.status.value}"
    )
    return EmployerStatusResponse(
        message=message,
        employer=UserResponse.from_entity(employer),
        changed=changed,
    )


@router.get("/users", response_model=UserListResponse)
async def list_users(
    role: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    admin: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
):
    users, total = await admin_service.list_users(
        role=role, search=search, limit=limit, offset=offset
    )
    return UserListResponse(
        users=[UserResponse.from_entity(u) for u in users],
        pagination=Pagination.of(total, limit, offset),
    )


@router.delete("/users/{user_id}", response_model=UserDeletedResponse)
async def delete_user(
    user_id: UUID,
    admin: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
):
    removed = await admin_service.delete_user(user_id, admin)
    return UserDeletedResponse(
        message="User deleted successfully",
        jobs_deleted=removed["jobs"],
        applications_deleted=removed["applications"],
        saved_jobs_deleted=removed["saved_jobs"],
    )


@router.get("/jobs", response_model=JobListResponse)
async def list_jobs(
    job_status: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    admin: User = Depends(require_admin),
    job_service: JobPostingService = Depends(get_job_posting_service),
):
    jobs, total = await job_service.list_all_jobs(
        status=job_status, search=search, limit=limit, offset=offset
    )
    return JobListResponse(
        jobs=[JobResponse.from_entity(j) for j in jobs],
        pagination=Pagination.of(total, limit, offset),
    )


@router.delete("/jobs/{job_id}", response_model=JobDeletedResponse)
async def delete_job(
    job_id: UUID,
    admin: User = Depends(require_admin),
    job_service: JobPostingService = Depends(get_job_posting_service),
):
    removed = await job_service.delete_job(job_id, admin)
    return JobDeletedResponse(message="Job deleted successfully", **removed)


@router.patch("/jobs/{job_id}/status", response_model=JobEnvelope)
async def set_job_status(
    job_id: UUID,
    body: JobStatusRequest,
    admin: User = Depends(require_admin),
    job_service: JobPostingService = Depends(get_job_posting_service),
):
    job = await job_service.set_status(job_id, body.status, admin)
    return JobEnvelope(message="Job status updated successfully", job=JobResponse.from_entity(job))
