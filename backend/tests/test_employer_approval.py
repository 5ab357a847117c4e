"""
Tests for EmployerApprovalService
"""
import pytest
import pytest_asyncio

from core.exceptions import (
    AuthorizationException,
    InvalidStatusTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.enums import NotificationTemplate, UserRole, UserStatus
from application.services.employer_approval_service import EmployerApprovalService
from conftest import create_user


class TestEmployerApprovalService:

    @pytest.fixture
    def service(self, user_repo, best_effort):
        return EmployerApprovalService(user_repo, best_effort)

    @pytest_asyncio.fixture
    async def pending_employer(self, user_repo):
        return await create_user(user_repo, role=UserRole.EMPLOYER, full_name="Pending Co")

    @pytest.mark.asyncio
    async def test_approve_pending_employer(self, service, admin, pending_employer, best_effort):
        employer, changed = await service.set_status(pending_employer.id, "approved", admin)

        assert changed is True
        assert employer.status == UserStatus.APPROVED
        assert best_effort.templates() == [NotificationTemplate.EMPLOYER_APPROVED.value]
        assert best_effort.sent[0].recipient == str(pending_employer.email)

    @pytest.mark.asyncio
    async def test_reject_includes_reason(self, service, admin, pending_employer, best_effort):
        employer = await service.reject(pending_employer.id, admin, reason="License unreadable")

        assert employer.status == UserStatus.REJECTED
        assert best_effort.sent[0].template == NotificationTemplate.EMPLOYER_REJECTED
        assert best_effort.sent[0].context["reason"] == "License unreadable"

    @pytest.mark.asyncio
    async def test_same_status_is_a_silent_no_op(self, service, admin, employer, best_effort):
        result, changed = await service.set_status(employer.id, UserStatus.APPROVED, admin)

        assert changed is False
        assert result.status == UserStatus.APPROVED
        assert best_effort.sent == []

    @pytest.mark.asyncio
    async def test_suspend_and_reinstate(self, service, admin, employer, best_effort):
        suspended = await service.suspend(employer.id, admin)
        assert suspended.status == UserStatus.SUSPENDED
        # Suspension sends no email
        assert best_effort.sent == []

        reinstated = await service.approve(employer.id, admin)
        assert reinstated.status == UserStatus.APPROVED

    @pytest.mark.asyncio
    async def test_cannot_suspend_pending_employer(self, service, admin, pending_employer, user_repo):
        with pytest.raises(InvalidStatusTransitionException):
            await service.set_status(pending_employer.id, UserStatus.SUSPENDED, admin)

        stored = await user_repo.get_by_id(pending_employer.id)
        assert stored.status == UserStatus.PENDING

    @pytest.mark.asyncio
    async def test_unknown_status(self, service, admin, pending_employer):
        with pytest.raises(ValidationException):
            await service.set_status(pending_employer.id, "active", admin)

    @pytest.mark.asyncio
    async def test_only_admin_may_change_status(self, service, employer, pending_employer):
        with pytest.raises(AuthorizationException):
            await service.set_status(pending_employer.id, UserStatus.APPROVED, employer)

    @pytest.mark.asyncio
    async def test_target_must_be_an_employer(self, service, admin, jobseeker):
        with pytest.raises(ResourceNotFoundException):
            await service.set_status(jobseeker.id, UserStatus.APPROVED, admin)


class TestApprovalWithUnreachableMail:

    @pytest.fixture
    def service(self, user_repo, failing_best_effort):
        return EmployerApprovalService(user_repo, failing_best_effort)

    @pytest.mark.asyncio
    async def test_approve_persists_when_mail_fails(
        self, service, admin, user_repo, failing_best_effort, unreachable_mail_sender
    ):
        pending = await create_user(user_repo, role=UserRole.EMPLOYER)

        employer = await service.approve(pending.id, admin)
        await failing_best_effort.drain(timeout=1)

        assert employer.status == UserStatus.APPROVED
        assert (await user_repo.get_by_id(pending.id)).status == UserStatus.APPROVED
        assert unreachable_mail_sender.send.await_count == 2
        assert failing_best_effort.pending_count == 0

    @pytest.mark.asyncio
    async def test_reject_persists_when_mail_fails(
        self, service, admin, user_repo, failing_best_effort
    ):
        pending = await create_user(user_repo, role=UserRole.EMPLOYER)

        employer = await service.reject(pending.id, admin, reason="Incomplete license")
        await failing_best_effort.drain(timeout=1)

        assert employer.status == UserStatus.REJECTED
        assert (await user_repo.get_by_id(pending.id)).status == UserStatus.REJECTED
