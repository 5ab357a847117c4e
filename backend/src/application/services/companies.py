"""
Company Lookup
Owning employers of jobs, loaded once per response
"""
from typing import Dict, Iterable, Optional
from uuid import UUID

from domain.entities import Job, User
from application.repositories.interfaces import IUserRepository


async def load_companies(
    user_repo: IUserRepository, jobs: Iterable[Optional[Job]]
) -> Dict[UUID, Optional[User]]:
    """Map company_id -> employer for the given jobs (None when the account is gone)"""
    companies: Dict[UUID, Optional[User]] = {}
    for job in jobs:
        if job is not None and job.company_id not in companies:
            companies[job.company_id] = await user_repo.get_by_id(job.company_id)
    return companies
