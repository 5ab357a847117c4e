"""
Custom Exception Hierarchy
Domain and application-level exceptions
"""
from typing import Optional


class DomainException(Exception):
    """Base exception for all domain errors"""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class AuthenticationException(DomainException):
    """Authentication failed"""
    pass


class AuthorizationException(DomainException):
    """User not authorized for this operation"""
    pass


class ValidationException(DomainException):
    """Data validation failed"""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)
        self.errors = [{"field": field, "message": message}]


class InvalidStatusTransitionException(DomainException):
    """Requested status change is not allowed by the lifecycle table"""

    def __init__(self, entity: str, current: str, target: str, message: Optional[str] = None):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(message or f"Cannot change {entity} status from '{current}' to '{target}'")


class JobClosedException(DomainException):
    """Job is not accepting applications"""

    def __init__(self, job_id):
        self.job_id = job_id
        super().__init__("Job is no longer accepting applications")


class ResourceNotFoundException(DomainException):
    """Requested resource not found"""

    def __init__(self, resource_type: str, identifier):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found")


class JobNotFoundException(ResourceNotFoundException):
    """Job does not exist"""

    def __init__(self, job_id):
        super().__init__("Job", job_id)


class DuplicateResourceException(DomainException):
    """Resource already exists"""

    def __init__(self, resource_type: str, field: str, value, message: Optional[str] = None):
        self.resource_type = resource_type
        self.field = field
        self.value = value
        super().__init__(message or f"{resource_type} with {field}='{value}' already exists")


class AlreadyAppliedException(DuplicateResourceException):
    """Applicant already has an application for this job"""

    def __init__(self, job_id, applicant_id):
        super().__init__(
            "Application",
            "job_id",
            job_id,
            message="You have already applied for this job",
        )
        self.applicant_id = applicant_id


class DependencyException(DomainException):
    """An external dependency (store, mail, disk) failed"""
    pass


class RepositoryException(DependencyException):
    """Database operation failed"""
    pass


class NotificationDeliveryException(DependencyException):
    """Notification could not be delivered"""

    def __init__(self, template: str, recipient: str, attempts: int):
        self.template = template
        self.recipient = recipient
        self.attempts = attempts
        super().__init__(f"Failed to send {template} notification after {attempts} attempt(s)")


class FileStorageException(DependencyException):
    """File could not be stored"""
    pass
