"""
Tests for notification dispatch, templates and the SMTP sender
"""
import asyncio
import smtplib
from unittest.mock import AsyncMock, Mock, patch

import pytest

from core.exceptions import (
    DependencyException,
    NotificationDeliveryException,
    ValidationException,
)
from domain.enums import NotificationTemplate
from application.services.notifications import Notification
from application.services.notifications.dispatch import (
    BestEffortNotifier,
    NotificationDispatcher,
    RequiredNotifier,
    RetryPolicy,
)
from infrastructure.external.email_templates import EmailTemplateRenderer
from infrastructure.external.smtp_email_sender import SmtpEmailSender


def interview_notification(**overrides) -> Notification:
    fields = dict(
        recipient="jane@example.com",
        template=NotificationTemplate.INTERVIEW_INVITATION,
        context={
            "applicant_name": "Jane",
            "job_title": "Backend Engineer",
            "company_name": "Acme Corp",
            "date": "2026-11-02",
            "time": "10:00",
            "location": "Main office",
        },
        idempotency_key="interviewInvitation:abc:2026-11-02T10:00",
    )
    fields.update(overrides)
    return Notification(**fields)


class TestRetryPolicy:

    def test_exponential_backoff(self):
        policy = RetryPolicy(max_attempts=5, initial_backoff_seconds=1.0, backoff_multiplier=2.0)
        assert [policy.delay_for(i) for i in range(4)] == [1.0, 2.0, 4.0, 8.0]

    def test_backoff_is_capped(self):
        policy = RetryPolicy(initial_backoff_seconds=10.0, backoff_multiplier=10.0, max_backoff_seconds=30.0)
        assert policy.delay_for(3) == 30.0


class TestNotificationDispatcher:

    @pytest.fixture
    def sender(self):
        sender = Mock()
        sender.send = AsyncMock()
        return sender

    @pytest.fixture
    def sleep(self):
        return AsyncMock()

    @pytest.fixture
    def dispatcher(self, sender, sleep):
        policy = RetryPolicy(max_attempts=3, initial_backoff_seconds=1.0, backoff_multiplier=2.0)
        return NotificationDispatcher(sender, EmailTemplateRenderer(), policy, sleep=sleep)

    @pytest.mark.asyncio
    async def test_delivers_once_on_success(self, dispatcher, sender, sleep):
        await dispatcher.deliver(interview_notification())

        sender.send.assert_awaited_once()
        args, kwargs = sender.send.call_args
        assert args[0] == "jane@example.com"
        assert "Backend Engineer" in args[1]
        assert kwargs["idempotency_key"] == "interviewInvitation:abc:2026-11-02T10:00"
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, dispatcher, sender, sleep):
        sender.send.side_effect = [DependencyException("timeout"), None]

        await dispatcher.deliver(interview_notification())

        assert sender.send.await_count == 2
        sleep.assert_awaited_once_with(1.0)

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, dispatcher, sender, sleep):
        sender.send.side_effect = DependencyException("connection refused")

        with pytest.raises(NotificationDeliveryException) as exc_info:
            await dispatcher.deliver(interview_notification())

        assert sender.send.await_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]
        assert exc_info.value.attempts == 3

    @pytest.mark.asyncio
    async def test_same_idempotency_key_on_every_attempt(self, dispatcher, sender):
        sender.send.side_effect = DependencyException("busy")

        with pytest.raises(NotificationDeliveryException):
            await dispatcher.deliver(interview_notification())

        keys = {c.kwargs["idempotency_key"] for c in sender.send.await_args_list}
        assert keys == {"interviewInvitation:abc:2026-11-02T10:00"}

    @pytest.mark.asyncio
    async def test_unknown_template_is_not_retried(self, sender, sleep):
        renderer = Mock()
        renderer.render.side_effect = ValidationException("template", "Unknown email template: nope")
        dispatcher = NotificationDispatcher(sender, renderer, RetryPolicy(), sleep=sleep)

        with pytest.raises(ValidationException):
            await dispatcher.deliver(interview_notification())
        sender.send.assert_not_awaited()


class TestNotifierPolicies:

    @pytest.fixture
    def failing_dispatcher(self):
        dispatcher = Mock()
        dispatcher.deliver = AsyncMock(
            side_effect=NotificationDeliveryException("interviewInvitation", "jane@example.com", 3)
        )
        return dispatcher

    @pytest.mark.asyncio
    async def test_required_notifier_propagates_failure(self, failing_dispatcher):
        notifier = RequiredNotifier(failing_dispatcher)
        with pytest.raises(NotificationDeliveryException):
            await notifier.notify(interview_notification())

    @pytest.mark.asyncio
    async def test_best_effort_notifier_swallows_failure(self, failing_dispatcher):
        notifier = BestEffortNotifier(failing_dispatcher)

        await notifier.notify(interview_notification())
        await notifier.drain(timeout=1)

        failing_dispatcher.deliver.assert_awaited_once()
        assert notifier.pending_count == 0

    @pytest.mark.asyncio
    async def test_best_effort_notifier_does_not_block_caller(self):
        release = asyncio.Event()

        async def slow_deliver(notification):
            await release.wait()

        dispatcher = Mock()
        dispatcher.deliver = AsyncMock(side_effect=slow_deliver)
        notifier = BestEffortNotifier(dispatcher)

        await notifier.notify(interview_notification())
        assert notifier.pending_count == 1

        release.set()
        await notifier.drain(timeout=1)
        assert notifier.pending_count == 0


class TestEmailTemplates:

    @pytest.fixture
    def renderer(self):
        return EmailTemplateRenderer()

    @pytest.mark.parametrize("template", list(NotificationTemplate))
    def test_every_template_renders(self, renderer, template):
        subject, html = renderer.render(template, {})
        assert subject
        assert html.strip().startswith("<div")

    def test_status_update_mentions_status(self, renderer):
        _, html = renderer.render(
            NotificationTemplate.APPLICATION_STATUS_UPDATE,
            {"applicant_name": "Jane", "job_title": "Backend Engineer", "status": "review"},
        )
        assert "Backend Engineer" in html

    def test_unknown_template(self, renderer):
        with pytest.raises(ValidationException):
            renderer.render("doesNotExist", {})


class TestSmtpEmailSender:

    def test_message_id_derived_from_idempotency_key(self):
        sender = SmtpEmailSender(enabled=True)
        first = sender.build_message("a@example.com", "Hi", "<p>x</p>", idempotency_key="k1")
        second = sender.build_message("a@example.com", "Hi", "<p>x</p>", idempotency_key="k1")
        other = sender.build_message("a@example.com", "Hi", "<p>x</p>", idempotency_key="k2")

        assert first["Message-ID"] == second["Message-ID"]
        assert first["Message-ID"] != other["Message-ID"]

    @pytest.mark.asyncio
    async def test_disabled_sender_does_not_connect(self):
        sender = SmtpEmailSender(enabled=False)
        with patch("smtplib.SMTP") as smtp:
            await sender.send("a@example.com", "Hi", "<p>x</p>")
        smtp.assert_not_called()

    @pytest.mark.asyncio
    async def test_transport_error_becomes_dependency_exception(self):
        sender = SmtpEmailSender(enabled=True)
        with patch("smtplib.SMTP", side_effect=smtplib.SMTPConnectError(421, b"unavailable")):
            with pytest.raises(DependencyException):
                await sender.send("a@example.com", "Hi", "<p>x</p>")
