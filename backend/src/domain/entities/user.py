"""
User Domain Entity
Immutable account business object shared by all roles
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from ..value_objects import Email
from ..enums import UserRole, UserStatus


@dataclass(frozen=True)
class User:
    """User domain entity - immutable"""

    id: UUID
    email: Email
    password_hash: str
    full_name: str
    role: UserRole
    status: UserStatus
    phone: Optional[str] = None

    # Jobseeker profile
    resume_url: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    experience: Optional[str] = None
    education: Optional[str] = None

    # Employer profile
    company_name: Optional[str] = None
    location: Optional[str] = None
    business_license_url: Optional[str] = None
    company_description: Optional[str] = None
    website: Optional[str] = None

    profile_picture_url: Optional[str] = None
    last_login: Optional[datetime] = None

    # Timestamps
    created_at: datetime = None
    updated_at: datetime = None

    def __post_init__(self):
        """Validate user data"""
        if not self.full_name or len(self.full_name.strip()) == 0:
            raise ValueError("Full name cannot be empty")

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def is_employer(self) -> bool:
        return self.role == UserRole.EMPLOYER

    def is_jobseeker(self) -> bool:
        return self.role == UserRole.JOBSEEKER

    def is_suspended(self) -> bool:
        return self.status == UserStatus.SUSPENDED

    def can_post_jobs(self) -> bool:
        """Only approved employers may publish or manage postings"""
        return self.is_employer() and self.status == UserStatus.APPROVED

    def __str__(self) -> str:
        return f"User({self.email}, {self.role.value})"
