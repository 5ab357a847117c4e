"""Domain Entities - Core business objects"""

from .user import User
from .job import Job
from .application import Application
from .saved_job import SavedJob
__all__ = ["User", "Job", "Application", "SavedJob"]
