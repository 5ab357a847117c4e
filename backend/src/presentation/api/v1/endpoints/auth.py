"""
Authentication Endpoints
/api/auth/* routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from loguru import logger

from domain.entities import User
from application.services.auth.interfaces import IAuthService
from presentation.api.v1.container import get_auth_service
from presentation.api.v1.dependencies import get_current_user, limiter
from presentation.api.v1.schemas.auth import (
    EmployerRegistrationResponse,
    LoginRequest,
    TokenResponse,
)
from presentation.api.v1.schemas.common import MessageResponse
from presentation.api.v1.schemas.users import UserEnvelope, UserResponse


router = APIRouter()


@router.post(
    "/register/jobseeker",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_jobseeker(
    full_name: str = Form(..., alias="fullName"),
    email: str = Form(...),
    phone: str = Form(...),
    password: str = Form(...),
    resume: Optional[UploadFile] = File(None),
    auth_service: IAuthService = Depends(get_auth_service),
):
    """
    Register a jobseeker (multipart form, optional resume upload)

    The account is active immediately and a token is returned.
    """
    user, token = await auth_service.register_jobseeker(
        full_name=full_name,
        email=email,
        phone=phone,
        password=password,
        resume=resume,
    )
    return TokenResponse(
        message="Registration successful",
        token=token,
        user=UserResponse.from_entity(user),
    )


@router.post(
    "/register/employer",
    response_model=EmployerRegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_employer(
    full_name: str = Form(..., alias="fullName"),
    email: str = Form(...),
    phone: str = Form(...),
    password: str = Form(...),
    location: str = Form(...),
    business_license: Optional[UploadFile] = File(None, alias="businessLicense"),
    auth_service: IAuthService = Depends(get_auth_service),
):
    """Register an employer; the account waits for admin approval"""
    user, message = await auth_service.register_employer(
        full_name=full_name,
        email=email,
        phone=phone,
        password=password,
        location=location,
        business_license=business_license,
    )
    return EmployerRegistrationResponse(message=message, user=UserResponse.from_entity(user))


@router.post("/login", response_model=TokenResponse)
@limiter.limit("20/minute")
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: IAuthService = Depends(get_auth_service),
):
    """Email + password login"""
    user, token = await auth_service.login(body.email, body.password)
    return TokenResponse(
        message="Login successful",
        token=token,
        user=UserResponse.from_entity(user),
    )


@router.get("/me", response_model=UserEnvelope)
async def me(current_user: User = Depends(get_current_user)):
    return UserEnvelope(user=UserResponse.from_entity(current_user))


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy"""
    logger.info(f"User logged out: {current_user.id}")
    return MessageResponse(message="Logged out successfully")
