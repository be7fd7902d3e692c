"""
Verification-code mail delivery.

``SmtpMailer`` logs in to the configured relay with the service's own
account (``MAIL_USER`` / ``MAIL_PASSWORD``) and sends a plain-text message.
The blocking ``smtplib`` calls are offloaded to a thread via
``asyncio.to_thread()`` so they never block the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.mime.text import MIMEText

from auth.exceptions import MailDispatchError
from config.settings import Settings

logger = logging.getLogger(__name__)

SUBJECT = "User verification"


def build_message(sender: str, to: str, code: int) -> MIMEText:
    msg = MIMEText(f"Your verification code is: {code}", "plain")
    msg["From"] = sender
    msg["To"] = to
    msg["Subject"] = SUBJECT
    return msg


class SmtpMailer:
    def __init__(self, settings: Settings) -> None:
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.use_ssl = settings.smtp_use_ssl
        self.timeout = settings.smtp_timeout
        self.user = settings.mail_user
        self._password = settings.mail_password
        self.sender = settings.sender_address

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        conn = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        conn.starttls()
        return conn

    def _send_sync(self, msg: MIMEText) -> None:
        with self._connect() as conn:
            conn.login(self.user, self._password)
            conn.send_message(msg)

    async def send(self, to_address: str, code: int) -> None:
        """
        Deliver ``code`` to ``to_address``.

        Raises
        ------
        MailDispatchError
            If the relay cannot be reached or rejects the login/message.
        """
        msg = build_message(self.sender, to_address, code)
        try:
            await asyncio.to_thread(self._send_sync, msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("SMTP delivery to %s via %s:%d failed: %s", to_address, self.host, self.port, exc)
            raise MailDispatchError() from exc
        logger.info("Email sent to %s", to_address)


class ConsoleMailer:
    """Writes the code to the log instead of sending it (local development)."""

    async def send(self, to_address: str, code: int) -> None:
        logger.info("[VERIFICATION] Email: %s Code: %s", to_address, code)
