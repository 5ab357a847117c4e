"""
SMTP E-mail Sender
Blocking smtplib delivery run in a worker thread
"""
import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from hashlib import sha256
from typing import Optional

from loguru import logger

from core.config import settings
from core.exceptions import DependencyException
from application.services.notifications import IEmailSender


class SmtpEmailSender(IEmailSender):
    """Sends HTML e-mail through the configured SMTP relay"""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        enabled: Optional[bool] = None,
    ):
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.username = username if username is not None else settings.SMTP_USERNAME
        self.password = password if password is not None else settings.SMTP_PASSWORD
        self.use_tls = settings.SMTP_USE_TLS if use_tls is None else use_tls
        self.enabled = settings.MAIL_ENABLED if enabled is None else enabled
        self.sender = formataddr((settings.MAIL_FROM_NAME, settings.MAIL_FROM))

    def build_message(self, to: str, subject: str, html: str, idempotency_key: str = "") -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        domain = settings.MAIL_FROM.split("@")[-1]
        if idempotency_key:
            # Stable Message-ID so receivers can drop duplicate retries
            digest = sha256(idempotency_key.encode("utf-8")).hexdigest()[:32]
            msg["Message-ID"] = f"<{digest}@{domain}>"
        else:
            msg["Message-ID"] = make_msgid(domain=domain)
        msg.attach(MIMEText(html, "html"))
        return msg

    def _send_sync(self, to: str, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=settings.SMTP_TIMEOUT_SECONDS) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(settings.MAIL_FROM, [to], msg.as_string())

    async def send(self, to: str, subject: str, html: str, idempotency_key: str = "") -> None:
        if not self.enabled:
            logger.info(f"Mail disabled; not sending '{subject}' to {to}")
            return

        msg = self.build_message(to, subject, html, idempotency_key)
        try:
            await asyncio.to_thread(self._send_sync, to, msg)
        except (smtplib.SMTPException, OSError) as e:
            raise DependencyException(f"SMTP delivery to {to} failed: {e}")
