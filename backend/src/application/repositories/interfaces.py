"""
Repository Interfaces (Abstract Base Classes)
Define contracts for data access without implementation details
"""
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Tuple, Iterable
from uuid import UUID

from domain.entities import User, Job, Application, SavedJob
from domain.enums import UserRole, UserStatus
from domain.value_objects import JobStatus, ApplicationStatus


class IUserRepository(ABC):
    """User repository interface"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Check if user exists by email"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create new user; raises DuplicateResourceException on taken email"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool:
        """Delete user"""
        pass

    @abstractmethod
    async def list(
        self,
        role: Optional[UserRole] = None,
        status: Optional[UserStatus] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        """List users matching filters, newest first, with total count"""
        pass

    @abstractmethod
    async def count(
        self,
        role: Optional[UserRole] = None,
        status: Optional[UserStatus] = None,
    ) -> int:
        """Count users by role/status"""
        pass


class IJobRepository(ABC):
    """Job repository interface"""

    @abstractmethod
    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID"""
        pass

    @abstractmethod
    async def create(self, job: Job) -> Job:
        """Create new job"""
        pass

    @abstractmethod
    async def update(self, job: Job) -> Job:
        """Update editable job fields (never the counters)"""
        pass

    @abstractmethod
    async def set_status(self, job_id: UUID, status: JobStatus) -> Optional[Job]:
        """Persist a new job status"""
        pass

    @abstractmethod
    async def delete(self, job_id: UUID) -> bool:
        """Delete job"""
        pass

    @abstractmethod
    async def increment_views(self, job_id: UUID) -> None:
        """Atomically add one view"""
        pass

    @abstractmethod
    async def increment_applications(self, job_id: UUID) -> None:
        """Atomically add one application"""
        pass

    @abstractmethod
    async def decrement_applications(self, job_id: UUID, amount: int = 1) -> None:
        """Atomically subtract applications, never below zero"""
        pass

    @abstractmethod
    async def search(
        self,
        status: Optional[JobStatus] = None,
        company_id: Optional[UUID] = None,
        search: Optional[str] = None,
        location: Optional[str] = None,
        job_type: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Job], int]:
        """Search jobs with filters, returns page and total count"""
        pass

    @abstractmethod
    async def most_viewed(self, limit: int = 6) -> List[Job]:
        """Active jobs ordered by views"""
        pass

    @abstractmethod
    async def ids_by_company(self, company_id: UUID) -> List[UUID]:
        """IDs of every job owned by an employer"""
        pass

    @abstractmethod
    async def delete_by_company(self, company_id: UUID) -> int:
        """Delete every job owned by an employer"""
        pass

    @abstractmethod
    async def count(
        self,
        status: Optional[JobStatus] = None,
        company_id: Optional[UUID] = None,
    ) -> int:
        """Count jobs"""
        pass

    @abstractmethod
    async def count_companies(self, status: Optional[JobStatus] = None) -> int:
        """Number of distinct employers with jobs"""
        pass

    @abstractmethod
    async def top_locations(self, limit: int = 5) -> List[Dict]:
        """Most common locations among active jobs"""
        pass

    @abstractmethod
    async def sum_counters(self, company_id: UUID) -> Dict[str, int]:
        """Total views and applications over an employer's jobs"""
        pass


class IApplicationRepository(ABC):
    """Application repository interface"""

    @abstractmethod
    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        """Get application by ID"""
        pass

    @abstractmethod
    async def get_for_job_and_applicant(
        self, job_id: UUID, applicant_id: UUID
    ) -> Optional[Application]:
        """Get the single application of an applicant for a job"""
        pass

    @abstractmethod
    async def create(self, application: Application) -> Application:
        """Create application; DuplicateResourceException on (job, applicant) clash"""
        pass

    @abstractmethod
    async def update(self, application: Application) -> Application:
        """Update application"""
        pass

    @abstractmethod
    async def delete(self, application_id: UUID) -> bool:
        """Delete application"""
        pass

    @abstractmethod
    async def list(
        self,
        applicant_id: Optional[UUID] = None,
        employer_id: Optional[UUID] = None,
        job_id: Optional[UUID] = None,
        status: Optional[ApplicationStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Application], int]:
        """List applications, newest first, with total count"""
        pass

    @abstractmethod
    async def count(
        self,
        applicant_id: Optional[UUID] = None,
        employer_id: Optional[UUID] = None,
        job_id: Optional[UUID] = None,
        status: Optional[ApplicationStatus] = None,
    ) -> int:
        """Count applications"""
        pass

    @abstractmethod
    async def delete_by_job(self, job_id: UUID) -> int:
        """Delete all applications to a job"""
        pass

    @abstractmethod
    async def delete_by_employer(self, employer_id: UUID) -> int:
        """Delete all applications addressed to an employer"""
        pass

    @abstractmethod
    async def delete_by_applicant(self, applicant_id: UUID) -> Dict[UUID, int]:
        """Delete an applicant's applications; returns removed count per job"""
        pass


class ISavedJobRepository(ABC):
    """Saved job repository interface"""

    @abstractmethod
    async def get(self, user_id: UUID, job_id: UUID) -> Optional[SavedJob]:
        """Get bookmark"""
        pass

    @abstractmethod
    async def create(self, saved_job: SavedJob) -> SavedJob:
        """Create bookmark; DuplicateResourceException on (user, job) clash"""
        pass

    @abstractmethod
    async def delete(self, user_id: UUID, job_id: UUID) -> bool:
        """Delete bookmark"""
        pass

    @abstractmethod
    async def list(
        self, user_id: UUID, limit: int = 20, offset: int = 0
    ) -> Tuple[List[SavedJob], int]:
        """A user's bookmarks, newest first, with total count"""
        pass

    @abstractmethod
    async def delete_by_jobs(self, job_ids: Iterable[UUID]) -> int:
        """Delete bookmarks pointing at any of the jobs"""
        pass

    @abstractmethod
    async def delete_by_user(self, user_id: UUID) -> int:
        """Delete a user's bookmarks"""
        pass
