"""
Tests for ApplicationService
"""
from uuid import uuid4

import pytest
import pytest_asyncio

from core.exceptions import (
    AlreadyAppliedException,
    AuthorizationException,
    InvalidStatusTransitionException,
    JobClosedException,
    JobNotFoundException,
    NotificationDeliveryException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.enums import NotificationTemplate, UserRole, UserStatus
from domain.value_objects import ApplicationStatus, JobStatus
from application.services.application_service import ApplicationService
from conftest import RecordingNotifier, create_job, create_user


@pytest.fixture
def service(application_repo, job_repo, user_repo, best_effort, required):
    return ApplicationService(application_repo, job_repo, user_repo, best_effort, required)


@pytest_asyncio.fixture
async def application(service, active_job, jobseeker):
    return await service.apply(active_job.id, jobseeker, cover_letter="Hello there")


class TestApply:

    @pytest.mark.asyncio
    async def test_apply_creates_application_and_counts_it(self, service, active_job, jobseeker, job_repo):
        application = await service.apply(active_job.id, jobseeker, cover_letter="  Keen to join  ")

        assert application.status == ApplicationStatus.APPLIED
        assert application.employer_id == active_job.company_id
        assert application.cover_letter == "Keen to join"
        assert (await job_repo.get_by_id(active_job.id)).applications_count == 1

    @pytest.mark.asyncio
    async def test_second_application_is_refused(self, service, application, active_job, jobseeker, job_repo):
        with pytest.raises(AlreadyAppliedException):
            await service.apply(active_job.id, jobseeker)

        assert (await job_repo.get_by_id(active_job.id)).applications_count == 1

    @pytest.mark.asyncio
    async def test_closed_job_refuses_applications(self, service, job_repo, employer, jobseeker):
        job = await create_job(job_repo, employer, status=JobStatus.CLOSED)
        with pytest.raises(JobClosedException):
            await service.apply(job.id, jobseeker)

    @pytest.mark.asyncio
    async def test_draft_job_refuses_applications(self, service, job_repo, employer, jobseeker):
        job = await create_job(job_repo, employer, status=JobStatus.DRAFT)
        with pytest.raises(JobClosedException):
            await service.apply(job.id, jobseeker)

    @pytest.mark.asyncio
    async def test_unknown_job(self, service, jobseeker):
        with pytest.raises(JobNotFoundException):
            await service.apply(uuid4(), jobseeker)

    @pytest.mark.asyncio
    async def test_only_jobseekers_apply(self, service, active_job, employer):
        with pytest.raises(AuthorizationException):
            await service.apply(active_job.id, employer)

    @pytest.mark.asyncio
    async def test_application_status(self, service, application, active_job, jobseeker, user_repo):
        status = await service.application_status(active_job.id, jobseeker)
        assert status["has_applied"] is True
        assert status["status"] == "applied"

        other = await create_user(user_repo, role=UserRole.JOBSEEKER)
        assert (await service.application_status(active_job.id, other))["has_applied"] is False


class TestWithdraw:

    @pytest.mark.asyncio
    async def test_withdraw_removes_and_decrements(self, service, application, jobseeker, job_repo, application_repo):
        await service.withdraw(application.id, jobseeker)

        assert await application_repo.get_by_id(application.id) is None
        assert (await job_repo.get_by_id(application.job_id)).applications_count == 0

    @pytest.mark.asyncio
    async def test_cannot_withdraw_after_interview(self, service, application, employer, jobseeker):
        await service.schedule_interview(application.id, employer, "2026-11-02", "10:00", "HQ")

        with pytest.raises(InvalidStatusTransitionException) as exc_info:
            await service.withdraw(application.id, jobseeker)
        assert exc_info.value.message == "Cannot withdraw application at this stage"

    @pytest.mark.asyncio
    async def test_can_withdraw_rejected_application(self, service, application, employer, jobseeker):
        await service.update_status(application.id, employer, "rejected", rejection_reason="Filled")
        await service.withdraw(application.id, jobseeker)

    @pytest.mark.asyncio
    async def test_cannot_withdraw_someone_elses(self, service, application, user_repo):
        other = await create_user(user_repo, role=UserRole.JOBSEEKER)
        with pytest.raises(ResourceNotFoundException):
            await service.withdraw(application.id, other)


class TestEmployerReview:

    @pytest.mark.asyncio
    async def test_update_status_notifies_applicant(self, service, application, employer, best_effort):
        updated = await service.update_status(application.id, employer, "review", notes="Strong CV")

        assert updated.status == ApplicationStatus.REVIEW
        assert updated.notes == "Strong CV"
        assert best_effort.templates() == [NotificationTemplate.APPLICATION_STATUS_UPDATE.value]
        assert best_effort.sent[0].context["status"] == "review"

    @pytest.mark.asyncio
    async def test_same_status_sends_nothing(self, service, application, employer, best_effort):
        await service.update_status(application.id, employer, "applied", notes="Seen")
        assert best_effort.sent == []

    @pytest.mark.asyncio
    async def test_invalid_transition(self, service, application, employer, application_repo):
        with pytest.raises(InvalidStatusTransitionException):
            await service.update_status(application.id, employer, "hired")

        assert (await application_repo.get_by_id(application.id)).status == ApplicationStatus.APPLIED

    @pytest.mark.asyncio
    async def test_unknown_status(self, service, application, employer):
        with pytest.raises(ValidationException):
            await service.update_status(application.id, employer, "shortlisted")

    @pytest.mark.asyncio
    async def test_other_employer_is_forbidden(self, service, application, user_repo):
        rival = await create_user(user_repo, role=UserRole.EMPLOYER, status=UserStatus.APPROVED)
        with pytest.raises(AuthorizationException):
            await service.update_status(application.id, rival, "review")

    @pytest.mark.asyncio
    async def test_full_hiring_path(self, service, application, employer):
        await service.update_status(application.id, employer, "review")
        await service.schedule_interview(application.id, employer, "2026-11-02", "10:00", "HQ")
        hired = await service.update_status(application.id, employer, "hired")

        assert hired.status == ApplicationStatus.HIRED
        assert hired.is_terminal()


class TestScheduleInterview:

    @pytest.mark.asyncio
    async def test_sends_invitation_then_moves_to_interview(self, service, application, employer, required):
        updated = await service.schedule_interview(
            application.id, employer, "2026-11-02", "10:00", "Main office", "Bring ID"
        )

        assert updated.status == ApplicationStatus.INTERVIEW
        assert updated.interview_location == "Main office"
        assert updated.interview_notes == "Bring ID"
        assert required.templates() == [NotificationTemplate.INTERVIEW_INVITATION.value]

    @pytest.mark.asyncio
    async def test_failed_delivery_leaves_status_untouched(
        self, application_repo, job_repo, user_repo, best_effort, application, employer
    ):
        service = ApplicationService(
            application_repo, job_repo, user_repo, best_effort, RecordingNotifier(fail=True)
        )

        with pytest.raises(NotificationDeliveryException):
            await service.schedule_interview(application.id, employer, "2026-11-02", "10:00", "HQ")

        stored = await application_repo.get_by_id(application.id)
        assert stored.status == ApplicationStatus.APPLIED
        assert stored.interview_date is None

    @pytest.mark.asyncio
    async def test_requires_date_time_and_location(self, service, application, employer, required):
        with pytest.raises(ValidationException):
            await service.schedule_interview(application.id, employer, "2026-11-02", " ", "HQ")
        assert required.sent == []

    @pytest.mark.asyncio
    async def test_not_from_terminal_status(self, service, application, employer, required):
        await service.update_status(application.id, employer, "rejected")
        with pytest.raises(InvalidStatusTransitionException):
            await service.schedule_interview(application.id, employer, "2026-11-02", "10:00", "HQ")
        assert required.sent == []


class TestStats:

    @pytest.mark.asyncio
    async def test_applicant_stats(self, service, application, jobseeker):
        stats = await service.applicant_stats(jobseeker)
        assert stats["applied"] == 1
        assert stats["total"] == 1

    @pytest.mark.asyncio
    async def test_employer_stats(self, service, application, employer, job_repo):
        await job_repo.increment_views(application.job_id)
        stats = await service.employer_stats(employer)

        assert stats["total_jobs"] == 1
        assert stats["active_jobs"] == 1
        assert stats["total_applications"] == 1
        assert stats["new_applications"] == 1
        assert stats["total_views"] == 1

    @pytest.mark.asyncio
    async def test_describe_attaches_job_and_applicant(self, service, application, jobseeker, employer):
        described = await service.describe([application])
        assert described[0]["job"].id == application.job_id
        assert described[0]["applicant"].id == jobseeker.id
        assert described[0]["company"].id == employer.id
