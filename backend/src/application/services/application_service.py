"""
Application Service
Jobseeker applications and the employer-side review workflow
"""
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union
from uuid import UUID, uuid4

from loguru import logger

from core.exceptions import (
    AlreadyAppliedException,
    AuthorizationException,
    DuplicateResourceException,
    InvalidStatusTransitionException,
    JobClosedException,
    JobNotFoundException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.entities import Application, Job, User
from domain.enums import NotificationTemplate
from domain.transitions import APPLICATION_TRANSITIONS, ensure_allowed
from domain.value_objects import ApplicationStatus, JobStatus
from application.repositories.interfaces import (
    IApplicationRepository,
    IJobRepository,
    IUserRepository,
)
from application.services.notifications import (
    IBestEffortNotifier,
    IRequiredNotifier,
    Notification,
)


def _parse_application_status(status: Union[str, ApplicationStatus]) -> ApplicationStatus:
    try:
        return ApplicationStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise ValidationException("status", f"Invalid status. Must be one of: {allowed}")


class ApplicationService:
    """
    Application lifecycle.

    applied -> review -> interview -> hired, with rejection possible from
    any non-terminal state. Applicants may withdraw until an interview is
    scheduled. The counters on Job are adjusted in the same unit of work.
    """

    def __init__(
        self,
        application_repository: IApplicationRepository,
        job_repository: IJobRepository,
        user_repository: IUserRepository,
        best_effort_notifier: IBestEffortNotifier,
        required_notifier: IRequiredNotifier,
    ):
        self.application_repo = application_repository
        self.job_repo = job_repository
        self.user_repo = user_repository
        self.best_effort_notifier = best_effort_notifier
        self.required_notifier = required_notifier

    # ------------------------------------------------------------------
    # Jobseeker side
    # ------------------------------------------------------------------

    async def apply(
        self, job_id: UUID, applicant: User, cover_letter: Optional[str] = None
    ) -> Application:
        """Submit an application to an active job"""
        if not applicant.is_jobseeker():
            raise AuthorizationException("Only jobseekers can apply for jobs")

        job = await self.job_repo.get_by_id(job_id)
        if not job:
            raise JobNotFoundException(job_id)
        if not job.is_accepting_applications():
            raise JobClosedException(job_id)

        if await self.application_repo.get_for_job_and_applicant(job.id, applicant.id):
            raise AlreadyAppliedException(job.id, applicant.id)

        now = datetime.utcnow()
        try:
            application = await self.application_repo.create(Application(
                id=uuid4(),
                job_id=job.id,
                applicant_id=applicant.id,
                employer_id=job.company_id,
                status=ApplicationStatus.APPLIED,
                cover_letter=(cover_letter or "").strip() or None,
                resume_url=applicant.resume_url,
                created_at=now,
                updated_at=now,
            ))
        except DuplicateResourceException:
            # Lost a race with a concurrent submission
            raise AlreadyAppliedException(job.id, applicant.id)

        await self.job_repo.increment_applications(job.id)

        logger.info(f"User {applicant.id} applied to job {job.id} ({application.id})")
        return application

    async def application_status(self, job_id: UUID, applicant: User) -> Dict:
        application = await self.application_repo.get_for_job_and_applicant(job_id, applicant.id)
        return {
            "has_applied": application is not None,
            "status": application.status.value if application else None,
            "applied_date": application.created_at if application else None,
        }

    async def withdraw(self, application_id: UUID, applicant: User) -> None:
        """Delete one's own application unless it reached interview or hired"""
        application = await self.get_for_applicant(application_id, applicant)

        if not application.can_withdraw():
            raise InvalidStatusTransitionException(
                "application",
                application.status.value,
                "withdrawn",
                message="Cannot withdraw application at this stage",
            )

        await self.application_repo.delete(application.id)
        await self.job_repo.decrement_applications(application.job_id)
        logger.info(f"Application {application.id} withdrawn by {applicant.id}")

    async def get_for_applicant(self, application_id: UUID, applicant: User) -> Application:
        application = await self.application_repo.get_by_id(application_id)
        if not application or application.applicant_id != applicant.id:
            raise ResourceNotFoundException("Application", application_id)
        return application

    async def list_for_applicant(
        self,
        applicant: User,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Application], int]:
        return await self.application_repo.list(
            applicant_id=applicant.id,
            status=_parse_application_status(status) if status else None,
            limit=limit,
            offset=offset,
        )

    async def applicant_stats(self, applicant: User) -> Dict[str, int]:
        counts = {
            status.value: await self.application_repo.count(
                applicant_id=applicant.id, status=status
            )
            for status in ApplicationStatus
        }
        counts["total"] = sum(counts.values())
        return counts

    # ------------------------------------------------------------------
    # Employer side
    # ------------------------------------------------------------------

    async def get_for_employer(self, application_id: UUID, employer: User) -> Application:
        application = await self.application_repo.get_by_id(application_id)
        if not application:
            raise ResourceNotFoundException("Application", application_id)
        if application.employer_id != employer.id:
            logger.warning(
                f"Employer {employer.id} tried to access application {application_id} of another employer"
            )
            raise AuthorizationException("You can only manage applications to your own jobs")
        return application

    async def list_for_employer(
        self,
        employer: User,
        status: Optional[str] = None,
        job_id: Optional[UUID] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Application], int]:
        return await self.application_repo.list(
            employer_id=employer.id,
            job_id=job_id,
            status=_parse_application_status(status) if status else None,
            limit=limit,
            offset=offset,
        )

    async def update_status(
        self,
        application_id: UUID,
        employer: User,
        status: Union[str, ApplicationStatus],
        notes: Optional[str] = None,
        interview_date: Optional[str] = None,
        rejection_reason: Optional[str] = None,
    ) -> Application:
        """Move an application along the review workflow"""
        target = _parse_application_status(status)
        application = await self.get_for_employer(application_id, employer)

        ensure_allowed("application", APPLICATION_TRANSITIONS, application.status, target)
        changed = application.status != target

        updated = replace(
            application,
            status=target,
            notes=notes if notes is not None else application.notes,
            interview_date=interview_date if interview_date is not None else application.interview_date,
            rejection_reason=(
                rejection_reason if rejection_reason is not None else application.rejection_reason
            ),
            updated_at=datetime.utcnow(),
        )
        updated = await self.application_repo.update(updated)

        if changed:
            logger.info(
                f"Application {application.id} {application.status.value} -> {target.value} "
                f"by employer {employer.id}"
            )
            await self._notify_status_change(updated)
        return updated

    async def schedule_interview(
        self,
        application_id: UUID,
        employer: User,
        date: str,
        time: str,
        location: str,
        additional_notes: Optional[str] = None,
    ) -> Application:
        """
        Invite the applicant to an interview.

        The invitation is delivered first; the application only moves to
        ``interview`` once delivery succeeded, so a failed send leaves it
        untouched.
        """
        for field_name, value in (("date", date), ("time", time), ("location", location)):
            if not (value or "").strip():
                raise ValidationException(field_name, f"Interview {field_name} is required")

        application = await self.get_for_employer(application_id, employer)
        ensure_allowed(
            "application", APPLICATION_TRANSITIONS, application.status, ApplicationStatus.INTERVIEW
        )

        applicant, job = await self._load_parties(application)
        if not applicant:
            raise ResourceNotFoundException("Applicant", application.applicant_id)

        await self.required_notifier.notify(Notification(
            recipient=str(applicant.email),
            template=NotificationTemplate.INTERVIEW_INVITATION,
            context={
                "applicant_name": applicant.full_name,
                "job_title": job.title if job else "",
                "company_name": employer.company_name or employer.full_name,
                "date": date.strip(),
                "time": time.strip(),
                "location": location.strip(),
                "additional_notes": (additional_notes or "").strip(),
            },
            idempotency_key=(
                f"{NotificationTemplate.INTERVIEW_INVITATION.value}:{application.id}:"
                f"{date.strip()}T{time.strip()}"
            ),
        ))

        updated = await self.application_repo.update(replace(
            application,
            status=ApplicationStatus.INTERVIEW,
            interview_date=date.strip(),
            interview_time=time.strip(),
            interview_location=location.strip(),
            interview_notes=(additional_notes or "").strip() or application.interview_notes,
            updated_at=datetime.utcnow(),
        ))
        logger.info(f"Interview scheduled for application {application.id} on {date} {time}")
        return updated

    async def employer_stats(self, employer: User) -> Dict[str, int]:
        counters = await self.job_repo.sum_counters(employer.id)
        return {
            "total_jobs": await self.job_repo.count(company_id=employer.id),
            "active_jobs": await self.job_repo.count(
                company_id=employer.id, status=JobStatus.ACTIVE
            ),
            "total_applications": await self.application_repo.count(employer_id=employer.id),
            "new_applications": await self.application_repo.count(
                employer_id=employer.id, status=ApplicationStatus.APPLIED
            ),
            "interviews": await self.application_repo.count(
                employer_id=employer.id, status=ApplicationStatus.INTERVIEW
            ),
            "hired": await self.application_repo.count(
                employer_id=employer.id, status=ApplicationStatus.HIRED
            ),
            "total_views": counters.get("views", 0),
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load_parties(self, application: Application) -> Tuple[Optional[User], Optional[Job]]:
        applicant = await self.user_repo.get_by_id(application.applicant_id)
        job = await self.job_repo.get_by_id(application.job_id)
        return applicant, job

    async def _notify_status_change(self, application: Application) -> None:
        applicant, job = await self._load_parties(application)
        if not applicant:
            return
        employer = await self.user_repo.get_by_id(application.employer_id)
        await self.best_effort_notifier.notify(Notification(
            recipient=str(applicant.email),
            template=NotificationTemplate.APPLICATION_STATUS_UPDATE,
            context={
                "applicant_name": applicant.full_name,
                "job_title": job.title if job else "",
                "company_name": (employer.company_name or employer.full_name) if employer else "",
                "status": application.status.value,
            },
            idempotency_key=(
                f"{NotificationTemplate.APPLICATION_STATUS_UPDATE.value}:"
                f"{application.id}:{application.status.value}"
            ),
        ))

    async def describe(self, applications: List[Application]) -> List[Dict]:
        """Attach job, company and applicant summaries, loading each once"""
        jobs: Dict[UUID, Optional[Job]] = {}
        users: Dict[UUID, Optional[User]] = {}
        described = []
        for application in applications:
            if application.job_id not in jobs:
                jobs[application.job_id] = await self.job_repo.get_by_id(application.job_id)
            for user_id in (application.applicant_id, application.employer_id):
                if user_id not in users:
                    users[user_id] = await self.user_repo.get_by_id(user_id)
            described.append({
                "application": application,
                "job": jobs[application.job_id],
                "company": users[application.employer_id],
                "applicant": users[application.applicant_id],
            })
        return described