"""
Notification Service Interfaces
Outbound e-mail and the two delivery policies built on top of it
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from domain.enums import NotificationTemplate


@dataclass(frozen=True)
class Notification:
    """A single templated message to one recipient"""

    recipient: str
    template: NotificationTemplate
    context: Dict[str, Any] = field(default_factory=dict)
    # Same key for every retry of the same logical message
    idempotency_key: str = ""


class IEmailSender(ABC):
    """Transport for rendered e-mail"""

    @abstractmethod
    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        idempotency_key: str = "",
    ) -> None:
        """Send one message; raises DependencyException on transport failure"""
        pass


class IEmailTemplateRenderer(ABC):
    """Turns a template name and context into subject and HTML body"""

    @abstractmethod
    def render(
        self, template: NotificationTemplate, context: Dict[str, Any]
    ) -> Tuple[str, str]:
        """Render a template; raises ValidationException for unknown templates"""
        pass


class IBestEffortNotifier(ABC):
    """Fire-and-forget delivery: never blocks on or fails the caller"""

    @abstractmethod
    async def notify(self, notification: Notification) -> None:
        """Schedule delivery and return immediately"""
        pass


class IRequiredNotifier(ABC):
    """Synchronous delivery: the caller's outcome depends on it"""

    @abstractmethod
    async def notify(self, notification: Notification) -> None:
        """
        Deliver before returning

        Raises:
            NotificationDeliveryException: every attempt failed
        """
        pass


__all__ = [
    "Notification",
    "IEmailSender",
    "IEmailTemplateRenderer",
    "IBestEffortNotifier",
    "IRequiredNotifier",
]
