"""
User Request/Response Schemas
Pydantic v2 models for accounts and profiles
"""
from datetime import datetime
from typing import List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from domain.entities import User
from .common import MessageResponse


class UserResponse(BaseModel):
    """Public view of an account (never the password hash)"""

    id: UUID
    email: str
    full_name: str
    phone: Optional[str] = None
    role: str
    status: str
    resume_url: Optional[str] = None
    skills: List[str] = []
    experience: Optional[str] = None
    education: Optional[str] = None
    company_name: Optional[str] = None
    location: Optional[str] = None
    business_license_url: Optional[str] = None
    company_description: Optional[str] = None
    website: Optional[str] = None
    profile_picture_url: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=str(user.email),
            full_name=user.full_name,
            phone=user.phone,
            role=user.role.value,
            status=user.status.value,
            resume_url=user.resume_url,
            skills=list(user.skills or []),
            experience=user.experience,
            education=user.education,
            company_name=user.company_name,
            location=user.location,
            business_license_url=user.business_license_url,
            company_description=user.company_description,
            website=user.website,
            profile_picture_url=user.profile_picture_url,
            last_login=user.last_login,
            created_at=user.created_at,
        )


class UserEnvelope(MessageResponse):
    user: UserResponse


class ProfileUpdateRequest(BaseModel):
    """Editable profile fields; keys irrelevant to the caller's role are ignored"""

    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    profile_picture_url: Optional[str] = None
    skills: Optional[Union[List[str], str]] = None
    experience: Optional[str] = None
    education: Optional[str] = None
    company_name: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    company_description: Optional[str] = Field(None, max_length=2000)
    website: Optional[str] = Field(None, max_length=500)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)

    @field_validator("new_password")
    @classmethod
    def differs_from_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("New password cannot be blank")
        return v
