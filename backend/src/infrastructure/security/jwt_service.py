"""
JWT Service Implementation
HS256 with the configured secret, or RS256 when a key pair is configured
"""
from datetime import datetime, timedelta
from typing import Dict, Optional
from uuid import UUID

from jose import jwt, JWTError
from loguru import logger

from core.config import settings
from core.exceptions import AuthenticationException
from application.services.auth.interfaces import IJwtService
from domain.enums import UserRole


class JwtService(IJwtService):
    """JWT access token service"""

    def __init__(self, secret_key: Optional[str] = None, expire_minutes: Optional[int] = None):
        self.expire_minutes = expire_minutes or settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

        if settings.JWT_PRIVATE_KEY and settings.JWT_PUBLIC_KEY:
            self.algorithm = "RS256"
            self.signing_key = settings.JWT_PRIVATE_KEY
            self.verifying_key = settings.JWT_PUBLIC_KEY
        else:
            self.algorithm = settings.JWT_ALGORITHM
            self.signing_key = self.verifying_key = secret_key or settings.JWT_SECRET_KEY
            if self.signing_key == "your-secret-key-change-in-production":
                logger.warning("JWT_SECRET_KEY is the default value; set it outside development!")

    def create_access_token(self, user_id: UUID, role: UserRole) -> str:
        """Create access token"""
        now = datetime.utcnow()
        payload = {
            "sub": str(user_id),
            "role": role.value if isinstance(role, UserRole) else str(role),
            "exp": now + timedelta(minutes=self.expire_minutes),
            "iat": now,
            "type": "access",
        }
        return jwt.encode(payload, self.signing_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict:
        """Verify and decode token"""
        try:
            return jwt.decode(token, self.verifying_key, algorithms=[self.algorithm])

        except JWTError as e:
            logger.warning(f"JWT verification failed: {str(e)}")
            raise AuthenticationException("Token is not valid")
