"""
Authentication Service Implementation
Concrete implementation of IAuthService
"""
from dataclasses import replace
from datetime import datetime
from typing import Tuple, Optional
from uuid import UUID, uuid4

from fastapi import UploadFile
from loguru import logger

from domain.entities import User
from domain.enums import UserRole, UserStatus, NotificationTemplate
from domain.value_objects import Email
from core.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DuplicateResourceException,
    ValidationException,
)
from application.repositories.interfaces import IUserRepository
from application.services.notifications import IBestEffortNotifier, Notification
from application.services.storage import IFileStorageService, FileKind
from .interfaces import IAuthService, IPasswordHasher, IJwtService


MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2


def _require_min_length(field: str, value: Optional[str], minimum: int, label: str) -> str:
    value = (value or "").strip()
    if len(value) < minimum:
        raise ValidationException(field, f"{label} must be at least {minimum} characters")
    return value


def _parse_email(email: str) -> Email:
    try:
        return Email(email)
    except ValueError:
        raise ValidationException("email", "Please provide a valid email")


def _validate_password(field: str, password: Optional[str]) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationException(
            field, f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    return password


class AuthService(IAuthService):
    """Authentication service implementation"""

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        jwt_service: IJwtService,
        file_storage: Optional[IFileStorageService] = None,
        notifier: Optional[IBestEffortNotifier] = None,
    ):
        self.user_repo = user_repository
        self.password_hasher = password_hasher
        self.jwt_service = jwt_service
        self.file_storage = file_storage
        self.notifier = notifier

    async def _check_new_account(self, full_name: str, email: str, phone: str, password: str):
        full_name = _require_min_length("full_name", full_name, MIN_NAME_LENGTH, "Full name")
        email_vo = _parse_email(email)
        phone = _require_min_length("phone", phone, 1, "Phone number")
        _validate_password("password", password)

        if await self.user_repo.exists_by_email(str(email_vo)):
            raise DuplicateResourceException(
                "User", "email", str(email_vo), message="User already exists with this email"
            )
        return full_name, email_vo, phone

    async def _store_upload(
        self, owner_id: UUID, upload: Optional[UploadFile], kind: FileKind
    ) -> Optional[str]:
        if upload is None or not upload.filename or self.file_storage is None:
            return None
        return await self.file_storage.save_file(owner_id, upload, kind)

    async def _create_with_upload(self, user: User, upload_url: Optional[str]) -> User:
        """Persist ``user``; an upload stored for it is removed if that fails"""
        try:
            return await self.user_repo.create(user)
        except Exception:
            if upload_url:
                logger.warning(f"Registration of {user.email} failed, removing upload {upload_url}")
                await self.file_storage.delete_file(upload_url)
            raise

    async def register_jobseeker(
        self,
        full_name: str,
        email: str,
        phone: str,
        password: str,
        resume: Optional[UploadFile] = None,
    ) -> Tuple[User, str]:
        """Register an active jobseeker and sign them in"""

        logger.info(f"Registering jobseeker: {email}")
        full_name, email_vo, phone = await self._check_new_account(full_name, email, phone, password)

        user_id = uuid4()
        resume_url = await self._store_upload(user_id, resume, FileKind.RESUME)

        now = datetime.utcnow()
        user = await self._create_with_upload(User(
            id=user_id,
            email=email_vo,
            password_hash=self.password_hasher.hash_password(password),
            full_name=full_name,
            phone=phone,
            role=UserRole.JOBSEEKER,
            status=UserStatus.ACTIVE,
            resume_url=resume_url,
            created_at=now,
            updated_at=now,
        ), resume_url)

        if self.notifier:
            await self.notifier.notify(Notification(
                recipient=str(user.email),
                template=NotificationTemplate.WELCOME_JOBSEEKER,
                context={"name": user.full_name},
                idempotency_key=f"{NotificationTemplate.WELCOME_JOBSEEKER.value}:{user.id}",
            ))

        logger.info(f"Jobseeker registered: {user.id}")
        return user, self.jwt_service.create_access_token(user.id, user.role)

    async def register_employer(
        self,
        full_name: str,
        email: str,
        phone: str,
        password: str,
        location: str,
        business_license: Optional[UploadFile] = None,
    ) -> Tuple[User, str]:
        """Register an employer in pending state; no token until approved"""

        logger.info(f"Registering employer: {email}")
        full_name, email_vo, phone = await self._check_new_account(full_name, email, phone, password)
        location = _require_min_length("location", location, MIN_NAME_LENGTH, "Location")

        user_id = uuid4()
        license_url = await self._store_upload(user_id, business_license, FileKind.BUSINESS_LICENSE)

        now = datetime.utcnow()
        user = await self._create_with_upload(User(
            id=user_id,
            email=email_vo,
            password_hash=self.password_hasher.hash_password(password),
            full_name=full_name,
            phone=phone,
            role=UserRole.EMPLOYER,
            status=UserStatus.PENDING,
            company_name=full_name,
            location=location,
            business_license_url=license_url,
            created_at=now,
            updated_at=now,
        ), license_url)

        logger.info(f"Employer registered, awaiting approval: {user.id}")
        return user, (
            "Employer registration submitted successfully. "
            "Your account is pending admin approval."
        )

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """Authenticate user"""

        logger.info(f"Login attempt: {email}")

        user = await self.user_repo.get_by_email((email or "").strip().lower())
        if not user:
            logger.warning(f"Login failed: User not found - {email}")
            raise AuthenticationException("Invalid credentials")

        if not self.password_hasher.verify_password(password or "", user.password_hash):
            logger.warning(f"Login failed: Invalid password - {email}")
            raise AuthenticationException("Invalid credentials")

        if user.is_suspended():
            logger.warning(f"Login refused for suspended account: {user.id}")
            raise AuthorizationException("Account suspended. Please contact support.")

        user = await self.user_repo.update(replace(user, last_login=datetime.utcnow()))

        logger.info(f"User logged in successfully: {user.id}")
        return user, self.jwt_service.create_access_token(user.id, user.role)

    async def verify_access_token(self, token: str) -> User:
        """Resolve bearer token to user"""
        payload = self.jwt_service.verify_token(token)

        if payload.get("type") != "access":
            raise AuthenticationException("Invalid token type")

        try:
            user_id = UUID(payload.get("sub", ""))
        except (TypeError, ValueError):
            raise AuthenticationException("Invalid token subject")

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise AuthenticationException("Token is not valid")

        if user.is_suspended():
            raise AuthorizationException("Account suspended")

        return user

    async def change_password(
        self, user: User, current_password: str, new_password: str
    ) -> None:
        """Replace password after verifying the current one"""
        if not self.password_hasher.verify_password(current_password or "", user.password_hash):
            raise ValidationException("current_password", "Current password is incorrect")

        _validate_password("new_password", new_password)

        await self.user_repo.update(replace(
            user,
            password_hash=self.password_hasher.hash_password(new_password),
            updated_at=datetime.utcnow(),
        ))
        logger.info(f"Password changed for user {user.id}")
