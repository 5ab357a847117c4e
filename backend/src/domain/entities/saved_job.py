"""
SavedJob Domain Entity
Bookmark of a job by a jobseeker
"""
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class SavedJob:
    """Saved job domain entity - immutable"""

    id: UUID
    user_id: UUID
    job_id: UUID
    created_at: datetime = None
