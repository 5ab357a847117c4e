"""
Saved Job Response Schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from .common import MessageResponse, Pagination
from .jobs import JobResponse


class SavedJobResponse(BaseModel):
    id: UUID
    job_id: UUID
    saved_at: Optional[datetime] = None
    job: Optional[JobResponse] = None


class SavedJobEnvelope(MessageResponse):
    saved_job: SavedJobResponse


class SavedJobListResponse(MessageResponse):
    saved_jobs: List[SavedJobResponse]
    pagination: Pagination


class SavedStatusResponse(MessageResponse):
    is_saved: bool
