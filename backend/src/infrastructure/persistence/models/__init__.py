"""ORM Models Package"""

from .application import ApplicationModel
from .job import JobModel
from .saved_job import SavedJobModel
from .user import UserModel

__all__ = [
    "ApplicationModel",
    "JobModel",
    "SavedJobModel",
    "UserModel",
]
