# app/core/mailer.py
import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool

from app.core.errors import NotificationError
from app.core.settings import Settings

log = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class Notification:
    subject: str
    html: str


class NotificationDispatcher:
    """
    Best-effort staff email over SMTP.

    Disabled (every notify() is a no-op) unless both the account user and
    password are configured. Delivery runs in a worker thread so a slow
    SMTP server only holds up the request that triggered it.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        recipient: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[Callable[[MIMEMultipart], None]] = None,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender or user
        self.recipient = recipient or user
        self.timeout = timeout
        self._transport = transport or self._send_smtp

    @classmethod
    def from_settings(cls, s: Settings) -> "NotificationDispatcher":
        return cls(
            host=s.email_host,
            port=s.email_port,
            user=s.email_user,
            password=s.email_password,
            sender=s.email_from,
            recipient=s.email_notify_to,
            timeout=s.email_timeout_seconds,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.user and self.password)

    def build_message(self, notification: Notification) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        # header values cannot carry line breaks
        msg["Subject"] = " ".join(notification.subject.split())
        msg["From"] = self.sender or ""
        msg["To"] = self.recipient or ""
        msg.attach(MIMEText(notification.html, "html"))
        return msg

    async def notify(self, notification: Notification) -> bool:
        """Send one notification. Returns False when email is not configured."""
        if not self.enabled:
            log.debug("[mailer] email not configured; skipping %r", notification.subject)
            return False
        msg = self.build_message(notification)
        try:
            await run_in_threadpool(self._transport, msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(
                "Failed to send notification email",
                detail=f"{type(exc).__name__}: {exc}",
            ) from exc
        return True

    def _send_smtp(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.ehlo()
            if server.has_extn("starttls"):
                server.starttls()
                server.ehlo()
            server.login(self.user, self.password)
            server.send_message(msg)
