"""
Job Status Enums
Status enumerations for jobs and applications
"""
from enum import Enum


class JobStatus(str, Enum):
    """Job posting status"""
    ACTIVE = "active"
    CLOSED = "closed"
    DRAFT = "draft"


class ApplicationStatus(str, Enum):
    """Job application status"""
    APPLIED = "applied"
    REVIEW = "review"
    INTERVIEW = "interview"
    HIRED = "hired"
    REJECTED = "rejected"
