"""
Tests for AdminService
"""
from uuid import uuid4

import pytest

from core.exceptions import AuthorizationException, ResourceNotFoundException
from domain.enums import UserRole, UserStatus
from application.services.admin_service import AdminService
from application.services.application_service import ApplicationService
from application.services.saved_job_service import SavedJobService
from conftest import create_job, create_user


@pytest.fixture
def service(user_repo, job_repo, application_repo, saved_job_repo):
    return AdminService(user_repo, job_repo, application_repo, saved_job_repo)


@pytest.fixture
def applications(application_repo, job_repo, user_repo, best_effort, required):
    return ApplicationService(application_repo, job_repo, user_repo, best_effort, required)


@pytest.fixture
def bookmarks(saved_job_repo, job_repo, user_repo):
    return SavedJobService(saved_job_repo, job_repo, user_repo)


class TestDashboard:

    @pytest.mark.asyncio
    async def test_counts(self, service, user_repo, admin, employer, jobseeker, active_job):
        await create_user(user_repo, role=UserRole.EMPLOYER, status=UserStatus.PENDING)

        stats = await service.dashboard_stats()

        assert stats == {
            "total_jobseekers": 1,
            "total_employers": 1,
            "pending_employers": 1,
            "total_jobs": 1,
            "total_applications": 0,
        }

    @pytest.mark.asyncio
    async def test_list_employers_by_status(self, service, user_repo, employer):
        await create_user(user_repo, role=UserRole.EMPLOYER, status=UserStatus.PENDING)

        pending, total = await service.list_employers(status="pending")
        assert total == 1
        assert pending[0].status == UserStatus.PENDING

        everyone, total = await service.list_employers()
        assert total == 2

    @pytest.mark.asyncio
    async def test_list_users_search(self, service, jobseeker, employer):
        users, total = await service.list_users(search="jane")
        assert total == 1
        assert users[0].id == jobseeker.id


class TestDeleteUser:

    @pytest.mark.asyncio
    async def test_delete_employer_takes_jobs_applications_and_bookmarks(
        self, service, applications, bookmarks, admin, employer, jobseeker, active_job,
        user_repo, job_repo, application_repo, saved_job_repo,
    ):
        await applications.apply(active_job.id, jobseeker)
        await bookmarks.save(jobseeker, active_job.id)

        removed = await service.delete_user(employer.id, admin)

        assert removed == {"jobs": 1, "applications": 1, "saved_jobs": 1}
        assert await user_repo.get_by_id(employer.id) is None
        assert await job_repo.get_by_id(active_job.id) is None
        assert await application_repo.count(applicant_id=jobseeker.id) == 0
        assert await saved_job_repo.get(jobseeker.id, active_job.id) is None
        # The jobseeker account itself survives
        assert await user_repo.get_by_id(jobseeker.id) is not None

    @pytest.mark.asyncio
    async def test_delete_jobseeker_repairs_job_counters(
        self, service, applications, bookmarks, admin, employer, jobseeker, job_repo, user_repo,
    ):
        first = await create_job(job_repo, employer, title="First")
        second = await create_job(job_repo, employer, title="Second")
        other = await create_user(user_repo, role=UserRole.JOBSEEKER)
        await applications.apply(first.id, jobseeker)
        await applications.apply(second.id, jobseeker)
        await applications.apply(first.id, other)
        await bookmarks.save(jobseeker, second.id)

        removed = await service.delete_user(jobseeker.id, admin)

        assert removed == {"jobs": 0, "applications": 2, "saved_jobs": 1}
        assert (await job_repo.get_by_id(first.id)).applications_count == 1
        assert (await job_repo.get_by_id(second.id)).applications_count == 0

    @pytest.mark.asyncio
    async def test_admins_cannot_be_deleted(self, service, admin, user_repo):
        other_admin = await create_user(user_repo, role=UserRole.ADMIN)
        with pytest.raises(AuthorizationException) as exc_info:
            await service.delete_user(other_admin.id, admin)
        assert exc_info.value.message == "Cannot delete admin users"

    @pytest.mark.asyncio
    async def test_only_admins_delete(self, service, employer, jobseeker):
        with pytest.raises(AuthorizationException):
            await service.delete_user(jobseeker.id, employer)

    @pytest.mark.asyncio
    async def test_missing_user(self, service, admin):
        with pytest.raises(ResourceNotFoundException):
            await service.delete_user(uuid4(), admin)
