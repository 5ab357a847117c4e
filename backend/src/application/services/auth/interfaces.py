"""
Authentication Service Interfaces
Abstract base classes for authentication services
"""
from abc import ABC, abstractmethod
from typing import Optional, Tuple
from uuid import UUID

from fastapi import UploadFile

from domain.entities import User
from domain.enums import UserRole


class IPasswordHasher(ABC):
    """Password hashing interface"""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """Hash a plain password"""
        pass

    @abstractmethod
    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify password against hash"""
        pass


class IJwtService(ABC):
    """JWT token service interface"""

    @abstractmethod
    def create_access_token(self, user_id: UUID, role: UserRole) -> str:
        """Create access token"""
        pass

    @abstractmethod
    def verify_token(self, token: str) -> dict:
        """Verify and decode token; raises AuthenticationException"""
        pass


class IAuthService(ABC):
    """Authentication service interface"""

    @abstractmethod
    async def register_jobseeker(
        self,
        full_name: str,
        email: str,
        phone: str,
        password: str,
        resume: Optional[UploadFile] = None,
    ) -> Tuple[User, str]:
        """
        Register an active jobseeker account

        Returns:
            Tuple of (User, access token)
        """
        pass

    @abstractmethod
    async def register_employer(
        self,
        full_name: str,
        email: str,
        phone: str,
        password: str,
        location: str,
        business_license: Optional[UploadFile] = None,
    ) -> Tuple[User, str]:
        """
        Register an employer account awaiting approval

        Returns:
            Tuple of (User, message)
        """
        pass

    @abstractmethod
    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate user

        Returns:
            Tuple of (User, access token)
        """
        pass

    @abstractmethod
    async def verify_access_token(self, token: str) -> User:
        """Resolve a bearer token to its (non-suspended) user"""
        pass

    @abstractmethod
    async def change_password(
        self, user: User, current_password: str, new_password: str
    ) -> None:
        """Replace a user's password after checking the current one"""
        pass
