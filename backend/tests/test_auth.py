"""
Tests for AuthService, JwtService and the password hasher
"""
import io
from dataclasses import replace
from datetime import datetime
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
from fastapi import UploadFile

from core.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DuplicateResourceException,
    RepositoryException,
    ValidationException,
)
from domain.enums import NotificationTemplate, UserRole, UserStatus
from application.services.auth.impl import AuthService
from infrastructure.external.file_storage_service import LocalFileStorageService
from infrastructure.security.jwt_service import JwtService
from conftest import create_user


@pytest.fixture
def jwt_service():
    return JwtService(secret_key="unit-test-secret", expire_minutes=5)


@pytest.fixture
def auth_service(user_repo, hasher, jwt_service, best_effort):
    return AuthService(user_repo, hasher, jwt_service, file_storage=None, notifier=best_effort)


class TestPasswordHasher:

    def test_hash_and_verify(self, hasher):
        hashed = hasher.hash_password("s3cret!")
        assert hashed != "s3cret!"
        assert hasher.verify_password("s3cret!", hashed)
        assert not hasher.verify_password("wrong", hashed)

    def test_garbage_hash_does_not_verify(self, hasher):
        assert not hasher.verify_password("s3cret!", "plain-text")


class TestJwtService:

    def test_round_trip_claims(self, jwt_service):
        user_id = uuid4()
        payload = jwt_service.verify_token(jwt_service.create_access_token(user_id, UserRole.EMPLOYER))

        assert payload["sub"] == str(user_id)
        assert payload["role"] == "employer"
        assert payload["type"] == "access"

    def test_tampered_token(self, jwt_service):
        header, _, signature = jwt_service.create_access_token(uuid4(), UserRole.JOBSEEKER).split(".")
        _, forged_payload, _ = jwt_service.create_access_token(uuid4(), UserRole.ADMIN).split(".")
        with pytest.raises(AuthenticationException):
            jwt_service.verify_token(".".join([header, forged_payload, signature]))

    def test_other_secret_is_rejected(self, jwt_service):
        token = JwtService(secret_key="someone-else").create_access_token(uuid4(), UserRole.ADMIN)
        with pytest.raises(AuthenticationException):
            jwt_service.verify_token(token)

    def test_expired_token(self):
        service = JwtService(secret_key="unit-test-secret", expire_minutes=-1)
        token = service.create_access_token(uuid4(), UserRole.JOBSEEKER)
        with pytest.raises(AuthenticationException):
            service.verify_token(token)


class TestRegistration:

    @pytest.mark.asyncio
    async def test_jobseeker_is_active_and_signed_in(self, auth_service, jwt_service, best_effort):
        user, token = await auth_service.register_jobseeker(
            full_name="Jane Seeker",
            email="Jane@Example.com",
            phone="555-0101",
            password="secret1",
        )

        assert user.role == UserRole.JOBSEEKER
        assert user.status == UserStatus.ACTIVE
        assert str(user.email) == "jane@example.com"
        assert jwt_service.verify_token(token)["sub"] == str(user.id)
        assert best_effort.templates() == [NotificationTemplate.WELCOME_JOBSEEKER.value]

    @pytest.mark.asyncio
    async def test_employer_starts_pending(self, auth_service, best_effort):
        user, message = await auth_service.register_employer(
            full_name="Acme Corp",
            email="hr@acme.example.com",
            phone="555-0102",
            password="secret1",
            location="Berlin",
        )

        assert user.role == UserRole.EMPLOYER
        assert user.status == UserStatus.PENDING
        assert user.company_name == "Acme Corp"
        assert "pending" in message.lower()
        assert best_effort.sent == []

    @pytest.mark.asyncio
    async def test_duplicate_email(self, auth_service):
        await auth_service.register_jobseeker("Jane Seeker", "jane@example.com", "555", "secret1")
        with pytest.raises(DuplicateResourceException) as exc_info:
            await auth_service.register_jobseeker("Jane Again", "JANE@example.com", "555", "secret1")
        assert exc_info.value.message == "User already exists with this email"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("full_name,email,phone,password,field", [
        ("J", "jane@example.com", "555", "secret1", "full_name"),
        ("Jane", "not-an-email", "555", "secret1", "email"),
        ("Jane", "jane@example.com", "", "secret1", "phone"),
        ("Jane", "jane@example.com", "555", "short", "password"),
    ])
    async def test_validation(self, auth_service, full_name, email, phone, password, field):
        with pytest.raises(ValidationException) as exc_info:
            await auth_service.register_jobseeker(full_name, email, phone, password)
        assert exc_info.value.field == field

    @pytest.mark.asyncio
    async def test_duplicate_insert_keeps_earlier_users(self, user_repo):
        first = await create_user(user_repo, email="first@example.com")
        await create_user(user_repo, email="taken@example.com")

        with pytest.raises(DuplicateResourceException):
            await create_user(user_repo, email="taken@example.com")

        assert (await user_repo.get_by_id(first.id)).email.value == "first@example.com"
        assert await user_repo.get_by_email("taken@example.com") is not None

    @pytest.mark.asyncio
    async def test_failed_jobseeker_insert_removes_resume(self, hasher, jwt_service, tmp_path):
        broken_repo = Mock()
        broken_repo.exists_by_email = AsyncMock(return_value=False)
        broken_repo.create = AsyncMock(side_effect=RepositoryException("connection reset"))
        storage = LocalFileStorageService(base_path=str(tmp_path), url_prefix="/uploads")
        service = AuthService(broken_repo, hasher, jwt_service, file_storage=storage)
        resume = UploadFile(file=io.BytesIO(b"%PDF-1.4 resume"), filename="cv.pdf")

        with pytest.raises(RepositoryException):
            await service.register_jobseeker("Jane Seeker", "jane@example.com", "555", "secret1", resume)

        assert [p for p in tmp_path.rglob("*") if p.is_file()] == []

    @pytest.mark.asyncio
    async def test_failed_employer_insert_removes_license(self, hasher, jwt_service, tmp_path):
        broken_repo = Mock()
        broken_repo.exists_by_email = AsyncMock(return_value=False)
        broken_repo.create = AsyncMock(side_effect=RepositoryException("connection reset"))
        storage = LocalFileStorageService(base_path=str(tmp_path), url_prefix="/uploads")
        service = AuthService(broken_repo, hasher, jwt_service, file_storage=storage)
        license_scan = UploadFile(file=io.BytesIO(b"\x89PNG"), filename="license.png")

        with pytest.raises(RepositoryException):
            await service.register_employer(
                "Acme Corp", "hr@acme.example.com", "555", "secret1", "Berlin", license_scan
            )

        assert [p for p in tmp_path.rglob("*") if p.is_file()] == []


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_and_verify(self, auth_service):
        registered, _ = await auth_service.register_jobseeker("Jane Seeker", "jane@example.com", "555", "secret1")

        user, token = await auth_service.login("JANE@example.com", "secret1")

        assert user.id == registered.id
        assert user.last_login is not None
        assert (await auth_service.verify_access_token(token)).id == registered.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, auth_service):
        await auth_service.register_jobseeker("Jane Seeker", "jane@example.com", "555", "secret1")

        with pytest.raises(AuthenticationException) as wrong_password:
            await auth_service.login("jane@example.com", "nope-nope")
        with pytest.raises(AuthenticationException) as unknown_email:
            await auth_service.login("ghost@example.com", "secret1")

        assert wrong_password.value.message == unknown_email.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_suspended_account_cannot_sign_in(self, auth_service, user_repo):
        user, token = await auth_service.register_jobseeker("Jane Seeker", "jane@example.com", "555", "secret1")
        await user_repo.update(replace(user, status=UserStatus.SUSPENDED, updated_at=datetime.utcnow()))

        with pytest.raises(AuthorizationException):
            await auth_service.login("jane@example.com", "secret1")
        with pytest.raises(AuthorizationException):
            await auth_service.verify_access_token(token)

    @pytest.mark.asyncio
    async def test_token_for_deleted_user(self, auth_service, user_repo):
        user, token = await auth_service.register_jobseeker("Jane Seeker", "jane@example.com", "555", "secret1")
        await user_repo.delete(user.id)

        with pytest.raises(AuthenticationException):
            await auth_service.verify_access_token(token)


class TestChangePassword:

    @pytest.mark.asyncio
    async def test_change_password(self, auth_service):
        user, _ = await auth_service.register_jobseeker("Jane Seeker", "jane@example.com", "555", "secret1")

        await auth_service.change_password(user, "secret1", "secret2")

        await auth_service.login("jane@example.com", "secret2")
        with pytest.raises(AuthenticationException):
            await auth_service.login("jane@example.com", "secret1")

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, auth_service):
        user, _ = await auth_service.register_jobseeker("Jane Seeker", "jane@example.com", "555", "secret1")
        with pytest.raises(ValidationException) as exc_info:
            await auth_service.change_password(user, "guess", "secret2")
        assert exc_info.value.field == "current_password"
