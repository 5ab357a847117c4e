"""
Lifecycle Transition Tables
Single source of truth for every status change the system performs.

Each table maps a current status to the set of statuses it may move to.
Moving to the current status is always a no-op and is not listed.
"""
from typing import Dict, FrozenSet, TypeVar

from core.exceptions import InvalidStatusTransitionException
from .enums import UserStatus
from .value_objects import JobStatus, ApplicationStatus


S = TypeVar("S")


EMPLOYER_TRANSITIONS: Dict[UserStatus, FrozenSet[UserStatus]] = {
    UserStatus.PENDING: frozenset({UserStatus.APPROVED, UserStatus.REJECTED}),
    UserStatus.REJECTED: frozenset({UserStatus.APPROVED, UserStatus.PENDING}),
    UserStatus.APPROVED: frozenset({UserStatus.SUSPENDED}),
    UserStatus.SUSPENDED: frozenset({UserStatus.APPROVED}),
}

# Values an administrator may assign to an employer account
EMPLOYER_STATUSES: FrozenSet[UserStatus] = frozenset(EMPLOYER_TRANSITIONS)

JOB_TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.ACTIVE: frozenset({JobStatus.CLOSED, JobStatus.DRAFT}),
    JobStatus.CLOSED: frozenset({JobStatus.ACTIVE, JobStatus.DRAFT}),
    JobStatus.DRAFT: frozenset({JobStatus.ACTIVE, JobStatus.CLOSED}),
}

APPLICATION_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.APPLIED: frozenset({
        ApplicationStatus.REVIEW,
        ApplicationStatus.INTERVIEW,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.REVIEW: frozenset({
        ApplicationStatus.INTERVIEW,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.INTERVIEW: frozenset({
        ApplicationStatus.HIRED,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.HIRED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
}

# Statuses from which the applicant may withdraw (delete) an application
WITHDRAWABLE_STATUSES: FrozenSet[ApplicationStatus] = frozenset({
    ApplicationStatus.APPLIED,
    ApplicationStatus.REVIEW,
    ApplicationStatus.REJECTED,
})

TERMINAL_APPLICATION_STATUSES: FrozenSet[ApplicationStatus] = frozenset(
    status for status, targets in APPLICATION_TRANSITIONS.items() if not targets
)


def is_allowed(table: Dict[S, FrozenSet[S]], current: S, target: S) -> bool:
    """True when ``current -> target`` is listed, or is a same-state no-op"""
    if current == target:
        return True
    return target in table.get(current, frozenset())


def ensure_allowed(entity: str, table: Dict[S, FrozenSet[S]], current: S, target: S) -> None:
    """Raise InvalidStatusTransitionException unless the move is allowed"""
    if not is_allowed(table, current, target):
        raise InvalidStatusTransitionException(
            entity,
            getattr(current, "value", str(current)),
            getattr(target, "value", str(target)),
        )


def toggled_job_status(current: JobStatus) -> JobStatus:
    """Owner toggle: an active job closes, anything else re-opens"""
    return JobStatus.CLOSED if current == JobStatus.ACTIVE else JobStatus.ACTIVE


def can_withdraw(status: ApplicationStatus) -> bool:
    return status in WITHDRAWABLE_STATUSES
