"""
Notification Dispatch
Retry with exponential backoff, and the best-effort / required policies
"""
import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Set

from loguru import logger

from core.config import settings
from core.exceptions import DependencyException, NotificationDeliveryException
from . import (
    Notification,
    IEmailSender,
    IEmailTemplateRenderer,
    IBestEffortNotifier,
    IRequiredNotifier,
)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with exponential backoff between attempts"""

    max_attempts: int = 3
    initial_backoff_seconds: float = 1.0
    backoff_multiplier: float = 2.0
    max_backoff_seconds: float = 30.0

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=settings.NOTIFY_MAX_ATTEMPTS,
            initial_backoff_seconds=settings.NOTIFY_INITIAL_BACKOFF_SECONDS,
            backoff_multiplier=settings.NOTIFY_BACKOFF_MULTIPLIER,
            max_backoff_seconds=settings.NOTIFY_MAX_BACKOFF_SECONDS,
        )

    def delay_for(self, attempt: int) -> float:
        """Delay after the given zero-based failed attempt"""
        delay = self.initial_backoff_seconds * (self.backoff_multiplier ** attempt)
        return min(delay, self.max_backoff_seconds)


class NotificationDispatcher:
    """Renders a notification and sends it, retrying transport failures"""

    def __init__(
        self,
        sender: IEmailSender,
        renderer: IEmailTemplateRenderer,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.sender = sender
        self.renderer = renderer
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self._sleep = sleep

    async def deliver(self, notification: Notification) -> None:
        """
        Deliver with retry

        Raises:
            ValidationException: unknown template (not retried)
            NotificationDeliveryException: all attempts failed
        """
        subject, html = self.renderer.render(notification.template, notification.context)
        policy = self.retry_policy
        template = notification.template.value

        for attempt in range(policy.max_attempts):
            try:
                await self.sender.send(
                    notification.recipient,
                    subject,
                    html,
                    idempotency_key=notification.idempotency_key,
                )
                logger.info(
                    f"Sent {template} to {notification.recipient} "
                    f"(attempt {attempt + 1}/{policy.max_attempts})"
                )
                return
            except DependencyException as e:
                logger.warning(
                    f"Sending {template} to {notification.recipient} failed "
                    f"(attempt {attempt + 1}/{policy.max_attempts}): {e}"
                )
                if attempt + 1 < policy.max_attempts:
                    await self._sleep(policy.delay_for(attempt))

        raise NotificationDeliveryException(template, notification.recipient, policy.max_attempts)


class RequiredNotifier(IRequiredNotifier):
    """Awaits delivery; failures propagate to the caller"""

    def __init__(self, dispatcher: NotificationDispatcher):
        self.dispatcher = dispatcher

    async def notify(self, notification: Notification) -> None:
        await self.dispatcher.deliver(notification)


class BestEffortNotifier(IBestEffortNotifier):
    """Delivers in a background task; failures are logged and dropped"""

    def __init__(self, dispatcher: NotificationDispatcher):
        self.dispatcher = dispatcher
        self._pending: Set[asyncio.Task] = set()

    async def notify(self, notification: Notification) -> None:
        try:
            task = asyncio.create_task(self._deliver_quietly(notification))
        except RuntimeError as e:
            logger.error(f"Could not schedule {notification.template.value} notification: {e}")
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver_quietly(self, notification: Notification) -> None:
        try:
            await self.dispatcher.deliver(notification)
        except Exception as e:
            logger.error(
                f"Best-effort {notification.template.value} notification to "
                f"{notification.recipient} dropped: {e}"
            )

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight deliveries, e.g. on shutdown"""
        if not self._pending:
            return
        done, not_done = await asyncio.wait(set(self._pending), timeout=timeout)
        for task in not_done:
            task.cancel()
        if not_done:
            logger.warning(f"Cancelled {len(not_done)} undelivered notification(s) on shutdown")
