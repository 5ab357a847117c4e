"""
Admin Request/Response Schemas
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import MessageResponse, Pagination
from .users import UserResponse


class EmployerStatusRequest(BaseModel):
    status: str
    reason: Optional[str] = Field(None, max_length=2000)


class EmployerStatusResponse(MessageResponse):
    employer: UserResponse
    changed: bool


class UserListResponse(MessageResponse):
    users: List[UserResponse]
    pagination: Pagination


class UserDeletedResponse(MessageResponse):
    jobs_deleted: int = 0
    applications_deleted: int = 0
    saved_jobs_deleted: int = 0
