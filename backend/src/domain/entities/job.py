"""
Job Domain Entity
Immutable job posting business object
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from ..value_objects import SalaryRange, JobStatus
from ..enums import JobType, ExperienceLevel, EducationLevel


@dataclass(frozen=True)
class Job:
    """Job posting domain entity - immutable"""

    id: UUID
    company_id: UUID
    title: str
    description: str
    requirements: str
    location: str
    job_type: JobType

    salary: Optional[SalaryRange] = None
    status: JobStatus = JobStatus.ACTIVE

    skills: List[str] = field(default_factory=list)
    benefits: List[str] = field(default_factory=list)
    experience_level: Optional[ExperienceLevel] = None
    education_level: Optional[EducationLevel] = None
    application_deadline: Optional[datetime] = None

    # Counters, maintained by the store
    applications_count: int = 0
    views_count: int = 0

    # Timestamps
    created_at: datetime = None
    updated_at: datetime = None

    def __post_init__(self):
        """Validate job data"""
        if not self.title or len(self.title.strip()) == 0:
            raise ValueError("Job title cannot be empty")

    def is_accepting_applications(self) -> bool:
        return self.status == JobStatus.ACTIVE

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.company_id == user_id

    def __str__(self) -> str:
        return f"Job({self.title}, status={self.status.value})"
