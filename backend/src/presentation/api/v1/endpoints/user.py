"""
Jobseeker Account Endpoints
/api/user/* routes: profile, resume, own applications, password
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile

from domain.entities import User
from application.services.application_service import ApplicationService
from application.services.auth.interfaces import IAuthService
from application.services.profile_service import ProfileService
from presentation.api.v1.container import (
    get_application_service,
    get_auth_service,
    get_profile_service,
)
from presentation.api.v1.dependencies import get_current_user, require_jobseeker
from presentation.api.v1.schemas.applications import (
    ApplicationEnvelope,
    ApplicationListResponse,
    ApplicationResponse,
)
from presentation.api.v1.schemas.common import MessageResponse, Pagination
from presentation.api.v1.schemas.jobs import DashboardStatsResponse
from presentation.api.v1.schemas.users import (
    ChangePasswordRequest,
    ProfileUpdateRequest,
    UserEnvelope,
    UserResponse,
)


router = APIRouter()


@router.get("/profile", response_model=UserEnvelope)
async def get_profile(current_user: User = Depends(get_current_user)):
    return UserEnvelope(user=UserResponse.from_entity(current_user))


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    body: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """Update the caller's profile; fields not applicable to the role are ignored"""
    user = await profile_service.update_profile(current_user, body.model_dump(exclude_unset=True))
    return UserEnvelope(message="Profile updated successfully", user=UserResponse.from_entity(user))


@router.post("/resume", response_model=UserEnvelope)
async def upload_resume(
    resume: Optional[UploadFile] = File(None),
    current_user: User = Depends(require_jobseeker),
    profile_service: ProfileService = Depends(get_profile_service),
):
    user = await profile_service.update_resume(current_user, resume)
    return UserEnvelope(message="Resume uploaded successfully", user=UserResponse.from_entity(user))


@router.get("/applications", response_model=ApplicationListResponse)
async def list_applications(
    status: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(require_jobseeker),
    application_service: ApplicationService = Depends(get_application_service),
):
    applications, total = await application_service.list_for_applicant(
        current_user, status=status, limit=limit, offset=offset
    )
    described = await application_service.describe(applications)
    return ApplicationListResponse(
        applications=[ApplicationResponse.from_described(item) for item in described],
        pagination=Pagination.of(total, limit, offset),
    )


@router.get("/applications/{application_id}", response_model=ApplicationEnvelope)
async def get_application(
    application_id: UUID,
    current_user: User = Depends(require_jobseeker),
    application_service: ApplicationService = Depends(get_application_service),
):
    application = await application_service.get_for_applicant(application_id, current_user)
    described = await application_service.describe([application])
    return ApplicationEnvelope(application=ApplicationResponse.from_described(described[0]))


@router.delete("/applications/{application_id}", response_model=MessageResponse)
async def withdraw_application(
    application_id: UUID,
    current_user: User = Depends(require_jobseeker),
    application_service: ApplicationService = Depends(get_application_service),
):
    await application_service.withdraw(application_id, current_user)
    return MessageResponse(message="Application withdrawn successfully")


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
async def dashboard_stats(
    current_user: User = Depends(require_jobseeker),
    application_service: ApplicationService = Depends(get_application_service),
):
    stats = await application_service.applicant_stats(current_user)
    return DashboardStatsResponse(stats=stats)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    auth_service: IAuthService = Depends(get_auth_service),
):
    await auth_service.change_password(current_user, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")
