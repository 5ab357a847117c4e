"""
Authentication Request/Response Schemas
Pydantic v2 models with strict validation
"""
from pydantic import BaseModel, EmailStr, Field

from .common import MessageResponse
from .users import UserResponse


class LoginRequest(BaseModel):
    """Email + password login"""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(MessageResponse):
    """Issued access token with the signed-in user"""

    token: str
    user: UserResponse


class EmployerRegistrationResponse(MessageResponse):
    """Employer accounts get no token until approved"""

    user: UserResponse
