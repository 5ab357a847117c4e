"""
Application Domain Entity
Immutable job application business object
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from ..value_objects import ApplicationStatus
from ..transitions import TERMINAL_APPLICATION_STATUSES, can_withdraw


@dataclass(frozen=True)
class Application:
    """Job application domain entity - immutable"""

    id: UUID
    job_id: UUID
    applicant_id: UUID
    employer_id: UUID

    status: ApplicationStatus = ApplicationStatus.APPLIED

    cover_letter: Optional[str] = None
    # Resume reference copied from the applicant profile at apply time
    resume_url: Optional[str] = None

    # Employer side
    notes: Optional[str] = None
    interview_date: Optional[str] = None
    interview_time: Optional[str] = None
    interview_location: Optional[str] = None
    interview_notes: Optional[str] = None
    rejection_reason: Optional[str] = None

    # Timestamps
    created_at: datetime = None
    updated_at: datetime = None

    def is_terminal(self) -> bool:
        """Check if application is in terminal state"""
        return self.status in TERMINAL_APPLICATION_STATUSES

    def can_withdraw(self) -> bool:
        return can_withdraw(self.status)

    def __str__(self) -> str:
        return f"Application({self.id}, status={self.status.value})"
