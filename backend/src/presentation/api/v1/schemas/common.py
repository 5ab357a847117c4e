"""
Common Response Schemas
Envelope pieces shared by every endpoint
"""
from typing import List, Optional
from pydantic import BaseModel


class FieldError(BaseModel):
    field: str
    message: str


class MessageResponse(BaseModel):
    """Plain success/failure answer"""

    success: bool = True
    message: Optional[str] = None


class ErrorResponse(MessageResponse):
    success: bool = False
    errors: Optional[List[FieldError]] = None


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int

    @classmethod
    def of(cls, total: int, limit: int, offset: int) -> "Pagination":
        return cls(total=total, limit=limit, offset=offset)
