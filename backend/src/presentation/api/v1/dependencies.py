"""
FastAPI Dependencies
Current user, role guards, rate limiting
"""
from typing import Optional

from fastapi import Depends, HTTPException, status, Header
from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import AuthenticationException, AuthorizationException
from domain.entities import User
from domain.enums import UserRole
from application.services.auth.interfaces import IAuthService
from application.services.job_posting_service import JobPostingService
from .container import get_auth_service


# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def get_current_user(
    authorization: Optional[str] = Header(None),
    auth_service: IAuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            ...
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token, authorization denied",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Extract token from "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await auth_service.verify_access_token(parts[1])

    except AuthenticationException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_roles(*roles: UserRole):
    """Build a dependency admitting only the given roles"""

    async def _guard(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            allowed = " or ".join(r.value for r in roles)
            raise AuthorizationException(f"Access denied. {allowed.capitalize()} role required.")
        return current_user

    return _guard


require_jobseeker = require_roles(UserRole.JOBSEEKER)
require_admin = require_roles(UserRole.ADMIN)


async def get_approved_employer(
    current_user: User = Depends(require_roles(UserRole.EMPLOYER))
) -> User:
    """Employer whose account has been approved by an administrator"""
    JobPostingService.ensure_can_manage_jobs(current_user)
    return current_user
