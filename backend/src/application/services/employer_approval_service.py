"""
Employer Approval Service
Admin-driven moderation of employer accounts
"""
from dataclasses import replace
from datetime import datetime
from typing import Optional, Tuple, Union
from uuid import UUID

from loguru import logger

from core.config import settings
from core.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.entities import User
from domain.enums import UserStatus, NotificationTemplate
from domain.transitions import EMPLOYER_STATUSES, EMPLOYER_TRANSITIONS, ensure_allowed
from application.repositories.interfaces import IUserRepository
from application.services.notifications import IBestEffortNotifier, Notification


class EmployerApprovalService:
    """
    Moves employer accounts through pending / approved / rejected / suspended.

    Only admins may act. Approval and rejection e-mails are sent
    best-effort after the new status is persisted, and only when the
    status actually changed.
    """

    def __init__(self, user_repository: IUserRepository, notifier: IBestEffortNotifier):
        self.user_repo = user_repository
        self.notifier = notifier

    @staticmethod
    def _parse_status(status: Union[str, UserStatus]) -> UserStatus:
        try:
            parsed = UserStatus(status)
        except ValueError:
            parsed = None
        if parsed not in EMPLOYER_STATUSES:
            allowed = ", ".join(sorted(s.value for s in EMPLOYER_STATUSES))
            raise ValidationException("status", f"Invalid status. Must be one of: {allowed}")
        return parsed

    async def set_status(
        self,
        employer_id: UUID,
        status: Union[str, UserStatus],
        acting_admin: User,
        reason: Optional[str] = None,
    ) -> Tuple[User, bool]:
        """
        Change an employer's status

        Returns:
            Tuple of (employer, changed) where ``changed`` is False for a
            same-status no-op
        """
        if not acting_admin.is_admin():
            raise AuthorizationException("Only administrators can change employer status")

        target = self._parse_status(status)

        employer = await self.user_repo.get_by_id(employer_id)
        if not employer or not employer.is_employer():
            raise ResourceNotFoundException("Employer", employer_id)

        if employer.status == target:
            logger.info(f"Employer {employer.id} already {target.value}; nothing to do")
            return employer, False

        ensure_allowed("employer", EMPLOYER_TRANSITIONS, employer.status, target)

        previous = employer.status
        employer = await self.user_repo.update(
            replace(employer, status=target, updated_at=datetime.utcnow())
        )
        logger.info(
            f"Employer {employer.id} status {previous.value} -> {target.value} "
            f"by admin {acting_admin.id}"
        )

        await self._notify(employer, target, reason)
        return employer, True

    async def approve(self, employer_id: UUID, acting_admin: User) -> User:
        employer, _ = await self.set_status(employer_id, UserStatus.APPROVED, acting_admin)
        return employer

    async def reject(
        self, employer_id: UUID, acting_admin: User, reason: Optional[str] = None
    ) -> User:
        employer, _ = await self.set_status(
            employer_id, UserStatus.REJECTED, acting_admin, reason=reason
        )
        return employer

    async def suspend(self, employer_id: UUID, acting_admin: User) -> User:
        employer, _ = await self.set_status(employer_id, UserStatus.SUSPENDED, acting_admin)
        return employer

    async def _notify(self, employer: User, status: UserStatus, reason: Optional[str]) -> None:
        if status == UserStatus.APPROVED:
            template = NotificationTemplate.EMPLOYER_APPROVED
            context = {
                "company_name": employer.company_name or employer.full_name,
                "login_url": f"{settings.FRONTEND_URL}/login",
            }
        elif status == UserStatus.REJECTED:
            template = NotificationTemplate.EMPLOYER_REJECTED
            context = {
                "company_name": employer.company_name or employer.full_name,
                "reason": reason or "",
            }
        else:
            return

        stamp = employer.updated_at.isoformat() if employer.updated_at else ""
        await self.notifier.notify(Notification(
            recipient=str(employer.email),
            template=template,
            context=context,
            idempotency_key=f"{template.value}:{employer.id}:{stamp}",
        ))
