"""
Dependency Injection Container
Manages service and repository instances
"""
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends

from core.database import get_db
from application.repositories.interfaces import (
    IApplicationRepository,
    IJobRepository,
    ISavedJobRepository,
    IUserRepository,
)
from application.services.auth.interfaces import IAuthService, IJwtService, IPasswordHasher
from application.services.notifications import (
    IBestEffortNotifier,
    IEmailSender,
    IRequiredNotifier,
)
from application.services.notifications.dispatch import (
    BestEffortNotifier,
    NotificationDispatcher,
    RequiredNotifier,
)
from application.services.storage import IFileStorageService
from application.services.admin_service import AdminService
from application.services.application_service import ApplicationService
from application.services.employer_approval_service import EmployerApprovalService
from application.services.job_posting_service import JobPostingService
from application.services.profile_service import ProfileService
from application.services.saved_job_service import SavedJobService
from infrastructure.external.email_templates import EmailTemplateRenderer
from infrastructure.external.file_storage_service import LocalFileStorageService
from infrastructure.external.smtp_email_sender import SmtpEmailSender
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository
from infrastructure.persistence.repositories.job import SQLAlchemyJobRepository
from infrastructure.persistence.repositories.saved_job import SQLAlchemySavedJobRepository
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.security.jwt_service import JwtService
from infrastructure.security.password_hasher import BcryptPasswordHasher


# Singleton instances
_password_hasher: IPasswordHasher | None = None
_jwt_service: IJwtService | None = None
_file_storage: IFileStorageService | None = None
_email_sender: IEmailSender | None = None
_dispatcher: NotificationDispatcher | None = None
_best_effort_notifier: BestEffortNotifier | None = None
_required_notifier: IRequiredNotifier | None = None


def get_password_hasher() -> IPasswordHasher:
    """Get password hasher instance (singleton)"""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = BcryptPasswordHasher()
    return _password_hasher


def get_jwt_service() -> IJwtService:
    """Get JWT service instance (singleton)"""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JwtService()
    return _jwt_service


def get_file_storage() -> IFileStorageService:
    """Get file storage instance (singleton)"""
    global _file_storage
    if _file_storage is None:
        _file_storage = LocalFileStorageService()
    return _file_storage


def get_email_sender() -> IEmailSender:
    """Get SMTP sender instance (singleton)"""
    global _email_sender
    if _email_sender is None:
        _email_sender = SmtpEmailSender()
    return _email_sender


def get_notification_dispatcher() -> NotificationDispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = NotificationDispatcher(get_email_sender(), EmailTemplateRenderer())
    return _dispatcher


def get_best_effort_notifier() -> IBestEffortNotifier:
    """Fire-and-forget notifier (singleton; owns in-flight deliveries)"""
    global _best_effort_notifier
    if _best_effort_notifier is None:
        _best_effort_notifier = BestEffortNotifier(get_notification_dispatcher())
    return _best_effort_notifier


def get_required_notifier() -> IRequiredNotifier:
    """Synchronous notifier (singleton)"""
    global _required_notifier
    if _required_notifier is None:
        _required_notifier = RequiredNotifier(get_notification_dispatcher())
    return _required_notifier


async def drain_notifications(timeout: float = 10.0) -> None:
    """Let background deliveries finish before shutdown"""
    if _best_effort_notifier is not None:
        await _best_effort_notifier.drain(timeout=timeout)


# ============================================================================
# Per-request repositories
# ============================================================================

def get_user_repository(
    session: AsyncSession = Depends(get_db)
) -> IUserRepository:
    """Get user repository instance (per-request)"""
    return SQLAlchemyUserRepository(session)


def get_job_repository(
    session: AsyncSession = Depends(get_db)
) -> IJobRepository:
    return SQLAlchemyJobRepository(session)


def get_application_repository(
    session: AsyncSession = Depends(get_db)
) -> IApplicationRepository:
    return SQLAlchemyApplicationRepository(session)


def get_saved_job_repository(
    session: AsyncSession = Depends(get_db)
) -> ISavedJobRepository:
    return SQLAlchemySavedJobRepository(session)


# ============================================================================
# Per-request services
# ============================================================================

def get_auth_service(
    user_repo: IUserRepository = Depends(get_user_repository),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    jwt_service: IJwtService = Depends(get_jwt_service),
    file_storage: IFileStorageService = Depends(get_file_storage),
    notifier: IBestEffortNotifier = Depends(get_best_effort_notifier),
) -> IAuthService:
    """Get auth service instance (per-request)"""
    from application.services.auth.impl import AuthService
    return AuthService(user_repo, password_hasher, jwt_service, file_storage, notifier)


def get_employer_approval_service(
    user_repo: IUserRepository = Depends(get_user_repository),
    notifier: IBestEffortNotifier = Depends(get_best_effort_notifier),
) -> EmployerApprovalService:
    return EmployerApprovalService(user_repo, notifier)


def get_job_posting_service(
    job_repo: IJobRepository = Depends(get_job_repository),
    application_repo: IApplicationRepository = Depends(get_application_repository),
    saved_job_repo: ISavedJobRepository = Depends(get_saved_job_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
) -> JobPostingService:
    return JobPostingService(job_repo, application_repo, saved_job_repo, user_repo)


def get_application_service(
    application_repo: IApplicationRepository = Depends(get_application_repository),
    job_repo: IJobRepository = Depends(get_job_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
    best_effort: IBestEffortNotifier = Depends(get_best_effort_notifier),
    required: IRequiredNotifier = Depends(get_required_notifier),
) -> ApplicationService:
    return ApplicationService(application_repo, job_repo, user_repo, best_effort, required)


def get_saved_job_service(
    saved_job_repo: ISavedJobRepository = Depends(get_saved_job_repository),
    job_repo: IJobRepository = Depends(get_job_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
) -> SavedJobService:
    return SavedJobService(saved_job_repo, job_repo, user_repo)


def get_admin_service(
    user_repo: IUserRepository = Depends(get_user_repository),
    job_repo: IJobRepository = Depends(get_job_repository),
    application_repo: IApplicationRepository = Depends(get_application_repository),
    saved_job_repo: ISavedJobRepository = Depends(get_saved_job_repository),
) -> AdminService:
    return AdminService(user_repo, job_repo, application_repo, saved_job_repo)


def get_profile_service(
    user_repo: IUserRepository = Depends(get_user_repository),
    file_storage: IFileStorageService = Depends(get_file_storage),
) -> ProfileService:
    return ProfileService(user_repo, file_storage)
