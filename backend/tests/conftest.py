"""
Shared test fixtures
In-memory SQLite database, real repositories and recording notifiers
"""
import os
import tempfile

# Settings are read at import time; point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_TO_FILE"] = "false"
os.environ["LOG_JSON_FORMAT"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["MAIL_ENABLED"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="jobboard-uploads-")
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

from datetime import datetime
from typing import List, Optional
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.database import Base, enable_sqlite_savepoints
from core.exceptions import DependencyException, NotificationDeliveryException
from domain.entities import Job, User
from domain.enums import JobType, UserRole, UserStatus
from domain.value_objects import Email, JobStatus, SalaryRange
from application.services.notifications import (
    IBestEffortNotifier,
    IRequiredNotifier,
    Notification,
)
from application.services.notifications.dispatch import (
    BestEffortNotifier,
    NotificationDispatcher,
    RetryPolicy,
)
from infrastructure.external.email_templates import EmailTemplateRenderer
import infrastructure.persistence.models  # noqa: F401
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository
from infrastructure.persistence.repositories.job import SQLAlchemyJobRepository
from infrastructure.persistence.repositories.saved_job import SQLAlchemySavedJobRepository
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.security.password_hasher import BcryptPasswordHasher


JOB_DESCRIPTION = (
    "Build and maintain the services behind our job marketplace, "
    "working closely with product and design."
)
JOB_REQUIREMENTS = "Three years of Python and SQL experience."


class RecordingNotifier(IBestEffortNotifier, IRequiredNotifier):
    """Captures notifications instead of sending them"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[Notification] = []

    async def notify(self, notification: Notification) -> None:
        if self.fail:
            raise NotificationDeliveryException(
                notification.template.value, notification.recipient, 3
            )
        self.sent.append(notification)

    def templates(self) -> List[str]:
        return [n.template.value for n in self.sent]


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )

    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def user_repo(session):
    return SQLAlchemyUserRepository(session)


@pytest.fixture
def job_repo(session):
    return SQLAlchemyJobRepository(session)


@pytest.fixture
def application_repo(session):
    return SQLAlchemyApplicationRepository(session)


@pytest.fixture
def saved_job_repo(session):
    return SQLAlchemySavedJobRepository(session)


@pytest.fixture
def hasher():
    # Minimum work factor keeps the suite fast
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def best_effort():
    return RecordingNotifier()


@pytest.fixture
def required():
    return RecordingNotifier()


@pytest.fixture
def unreachable_mail_sender():
    sender = Mock()
    sender.send = AsyncMock(side_effect=DependencyException("SMTP relay unreachable"))
    return sender


@pytest.fixture
def failing_best_effort(unreachable_mail_sender):
    """Real background notifier whose every delivery attempt fails"""
    dispatcher = NotificationDispatcher(
        unreachable_mail_sender,
        EmailTemplateRenderer(),
        RetryPolicy(max_attempts=2),
        sleep=AsyncMock(),
    )
    return BestEffortNotifier(dispatcher)


async def create_user(
    user_repo,
    role: UserRole = UserRole.JOBSEEKER,
    status: Optional[UserStatus] = None,
    email: Optional[str] = None,
    password_hash: str = "not-a-real-hash",
    full_name: str = "Test User",
) -> User:
    if status is None:
        status = UserStatus.PENDING if role == UserRole.EMPLOYER else UserStatus.ACTIVE
    now = datetime.utcnow()
    return await user_repo.create(User(
        id=uuid4(),
        email=Email(email or f"{role.value}-{uuid4().hex[:8]}@example.com"),
        password_hash=password_hash,
        full_name=full_name,
        role=role,
        status=status,
        phone="555-0100",
        company_name=full_name if role == UserRole.EMPLOYER else None,
        created_at=now,
        updated_at=now,
    ))


async def create_job(
    job_repo,
    employer: User,
    status: JobStatus = JobStatus.ACTIVE,
    title: str = "Backend Engineer",
    location: str = "Berlin",
) -> Job:
    now = datetime.utcnow()
    return await job_repo.create(Job(
        id=uuid4(),
        company_id=employer.id,
        title=title,
        description=JOB_DESCRIPTION,
        requirements=JOB_REQUIREMENTS,
        location=location,
        job_type=JobType.FULL_TIME,
        salary=SalaryRange(min_salary=50000, max_salary=70000),
        status=status,
        skills=["python", "sql"],
        created_at=now,
        updated_at=now,
    ))


@pytest_asyncio.fixture
async def admin(user_repo):
    return await create_user(user_repo, role=UserRole.ADMIN, full_name="Site Admin")


@pytest_asyncio.fixture
async def employer(user_repo):
    return await create_user(
        user_repo, role=UserRole.EMPLOYER, status=UserStatus.APPROVED, full_name="Acme Corp"
    )


@pytest_asyncio.fixture
async def jobseeker(user_repo):
    return await create_user(user_repo, role=UserRole.JOBSEEKER, full_name="Jane Seeker")


@pytest_asyncio.fixture
async def active_job(job_repo, employer):
    return await create_job(job_repo, employer)
