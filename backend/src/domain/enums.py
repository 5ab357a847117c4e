"""
Domain Enums
Business enumerations for the application
"""
from enum import Enum


class UserRole(str, Enum):
    """Account roles"""
    JOBSEEKER = "jobseeker"
    EMPLOYER = "employer"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """Account status.

    Jobseekers and admins are ``active`` on creation, employers start
    ``pending`` and move through the approval workflow.
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"
    SUSPENDED = "suspended"


class JobType(str, Enum):
    """Employment type of a posting"""
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    INTERNSHIP = "Internship"


class ExperienceLevel(str, Enum):
    """Required experience"""
    ENTRY_LEVEL = "Entry Level"
    ONE_TO_THREE = "1-3 years"
    THREE_TO_FIVE = "3-5 years"
    FIVE_TO_TEN = "5-10 years"
    TEN_PLUS = "10+ years"


class EducationLevel(str, Enum):
    """Required education"""
    HIGH_SCHOOL = "High School"
    ASSOCIATE = "Associate Degree"
    BACHELOR = "Bachelor Degree"
    MASTER = "Master Degree"
    PHD = "PhD"


class NotificationTemplate(str, Enum):
    """Outbound e-mail templates"""
    EMPLOYER_APPROVED = "employerApproved"
    EMPLOYER_REJECTED = "employerRejected"
    APPLICATION_STATUS_UPDATE = "applicationStatusUpdate"
    INTERVIEW_INVITATION = "interviewInvitation"
    WELCOME_JOBSEEKER = "welcomeJobSeeker"
