"""
Tests for JobPostingService and the job repository
"""
from uuid import uuid4

import pytest

from core.exceptions import (
    AuthorizationException,
    JobNotFoundException,
    ValidationException,
)
from domain.enums import JobType, UserRole, UserStatus
from domain.value_objects import JobStatus
from application.services.application_service import ApplicationService
from application.services.job_posting_service import JobInput, JobPostingService
from application.services.saved_job_service import SavedJobService
from conftest import JOB_DESCRIPTION, JOB_REQUIREMENTS, create_job, create_user


def job_input(**overrides) -> JobInput:
    fields = dict(
        title="Data Engineer",
        description=JOB_DESCRIPTION,
        requirements=JOB_REQUIREMENTS,
        location="Lisbon",
        job_type=JobType.CONTRACT.value,
        salary_min=40000,
        salary_max=60000,
        skills=[" spark ", "", "python"],
    )
    fields.update(overrides)
    return JobInput(**fields)


@pytest.fixture
def service(job_repo, application_repo, saved_job_repo, user_repo):
    return JobPostingService(job_repo, application_repo, saved_job_repo, user_repo)


class TestCreateJob:

    @pytest.mark.asyncio
    async def test_create_active_by_default(self, service, employer):
        job = await service.create_job(employer, job_input())

        assert job.status == JobStatus.ACTIVE
        assert job.company_id == employer.id
        assert job.skills == ["spark", "python"]
        assert job.salary.to_dict() == {"min": 40000, "max": 60000, "currency": "USD"}
        assert job.applications_count == 0
        assert job.views_count == 0

    @pytest.mark.asyncio
    async def test_create_as_draft(self, service, employer):
        job = await service.create_job(employer, job_input(status="draft"))
        assert job.status == JobStatus.DRAFT

    @pytest.mark.asyncio
    async def test_cannot_create_closed(self, service, employer):
        with pytest.raises(ValidationException):
            await service.create_job(employer, job_input(status="closed"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides,field", [
        ({"title": "QA"}, "title"),
        ({"description": "Too short"}, "description"),
        ({"requirements": "Python"}, "requirements"),
        ({"job_type": "Gig"}, "job_type"),
        ({"salary_min": 90000, "salary_max": 10000}, "salary"),
    ])
    async def test_validation(self, service, employer, overrides, field):
        with pytest.raises(ValidationException) as exc_info:
            await service.create_job(employer, job_input(**overrides))
        assert exc_info.value.field == field

    @pytest.mark.asyncio
    async def test_pending_employer_cannot_post(self, service, user_repo):
        pending = await create_user(user_repo, role=UserRole.EMPLOYER, status=UserStatus.PENDING)
        with pytest.raises(AuthorizationException) as exc_info:
            await service.create_job(pending, job_input())
        assert exc_info.value.message == "Account pending approval"

    @pytest.mark.asyncio
    async def test_jobseeker_cannot_post(self, service, jobseeker):
        with pytest.raises(AuthorizationException):
            await service.create_job(jobseeker, job_input())


class TestManageJob:

    @pytest.mark.asyncio
    async def test_update_by_owner(self, service, active_job, employer):
        updated = await service.update_job(active_job.id, employer, job_input(title="Senior Data Engineer"))
        assert updated.title == "Senior Data Engineer"
        assert updated.status == JobStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_update_by_other_employer_is_forbidden(self, service, active_job, user_repo):
        rival = await create_user(user_repo, role=UserRole.EMPLOYER, status=UserStatus.APPROVED)
        with pytest.raises(AuthorizationException):
            await service.update_job(active_job.id, rival, job_input())

    @pytest.mark.asyncio
    async def test_toggle_closes_then_reopens(self, service, active_job, employer):
        closed = await service.toggle_status(active_job.id, employer)
        assert closed.status == JobStatus.CLOSED

        reopened = await service.toggle_status(active_job.id, employer)
        assert reopened.status == JobStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_toggle_publishes_draft(self, service, job_repo, employer):
        draft = await create_job(job_repo, employer, status=JobStatus.DRAFT)
        assert (await service.toggle_status(draft.id, employer)).status == JobStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_admin_sets_any_status(self, service, active_job, admin):
        assert (await service.set_status(active_job.id, "draft", admin)).status == JobStatus.DRAFT

    @pytest.mark.asyncio
    async def test_set_status_requires_admin(self, service, active_job, employer):
        with pytest.raises(AuthorizationException):
            await service.set_status(active_job.id, "closed", employer)

    @pytest.mark.asyncio
    async def test_delete_cascades(
        self, service, active_job, employer, jobseeker,
        application_repo, job_repo, user_repo, saved_job_repo, best_effort, required,
    ):
        applications = ApplicationService(application_repo, job_repo, user_repo, best_effort, required)
        bookmarks = SavedJobService(saved_job_repo, job_repo, user_repo)
        await applications.apply(active_job.id, jobseeker)
        await bookmarks.save(jobseeker, active_job.id)

        removed = await service.delete_job(active_job.id, employer)

        assert removed == {"applications_deleted": 1, "saved_jobs_deleted": 1}
        assert await job_repo.get_by_id(active_job.id) is None
        assert await application_repo.count(job_id=active_job.id) == 0
        assert await saved_job_repo.get(jobseeker.id, active_job.id) is None


class TestBrowse:

    @pytest.mark.asyncio
    async def test_get_job_counts_views(self, service, active_job):
        first = await service.get_job(active_job.id)
        second = await service.get_job(active_job.id)

        assert first.views_count == 1
        assert second.views_count == 2

    @pytest.mark.asyncio
    async def test_missing_job(self, service):
        with pytest.raises(JobNotFoundException):
            await service.get_job(uuid4())

    @pytest.mark.asyncio
    async def test_search_lists_only_active_jobs(self, service, job_repo, employer):
        await create_job(job_repo, employer, title="Active Python Role")
        await create_job(job_repo, employer, title="Closed Python Role", status=JobStatus.CLOSED)
        await create_job(job_repo, employer, title="Draft Python Role", status=JobStatus.DRAFT)

        jobs, total = await service.search_jobs(search="python")

        assert total == 1
        assert [j.title for j in jobs] == ["Active Python Role"]

    @pytest.mark.asyncio
    async def test_search_by_location(self, service, job_repo, employer):
        await create_job(job_repo, employer, location="Berlin")
        await create_job(job_repo, employer, location="Madrid")

        jobs, total = await service.search_jobs(location="madr")
        assert total == 1
        assert jobs[0].location == "Madrid"

    @pytest.mark.asyncio
    async def test_featured_orders_by_views(self, service, job_repo, employer):
        quiet = await create_job(job_repo, employer, title="Quiet")
        popular = await create_job(job_repo, employer, title="Popular")
        for _ in range(3):
            await job_repo.increment_views(popular.id)
        await job_repo.increment_views(quiet.id)

        featured = await service.featured_jobs()
        assert [j.title for j in featured[:2]] == ["Popular", "Quiet"]

    @pytest.mark.asyncio
    async def test_companies_keyed_by_employer(self, service, job_repo, user_repo, employer):
        first = await create_job(job_repo, employer, title="First")
        second = await create_job(job_repo, employer, title="Second")
        other = await create_user(
            user_repo, role=UserRole.EMPLOYER, status=UserStatus.APPROVED, full_name="Globex"
        )
        third = await create_job(job_repo, other, title="Third")

        companies = await service.companies_for([first, second, third])

        assert set(companies) == {employer.id, other.id}
        assert companies[employer.id].company_name == "Acme Corp"
        assert companies[other.id].company_name == "Globex"

    @pytest.mark.asyncio
    async def test_job_stats(self, service, job_repo, employer):
        await create_job(job_repo, employer, location="Berlin")
        await create_job(job_repo, employer, location="Berlin")
        await create_job(job_repo, employer, location="Oslo")
        await create_job(job_repo, employer, location="Oslo", status=JobStatus.CLOSED)

        stats = await service.job_stats()

        assert stats["total_jobs"] == 3
        assert stats["total_companies"] == 1
        assert stats["top_locations"][0] == {"location": "Berlin", "count": 2}

    @pytest.mark.asyncio
    async def test_employer_listing_includes_every_status(self, service, job_repo, employer):
        await create_job(job_repo, employer, status=JobStatus.DRAFT)
        await create_job(job_repo, employer, status=JobStatus.CLOSED)

        jobs, total = await service.list_employer_jobs(employer)
        assert total == 2
