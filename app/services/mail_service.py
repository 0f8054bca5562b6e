"""
Mail Service - delivers registration OTPs.

Two senders:
- SmtpOtpMailer: real delivery through an SMTP relay, bounded by a timeout
- ConsoleOtpMailer: development fallback that logs the code

Delivery failures are NOT swallowed here. They propagate to the request,
which then fails with a server error.
"""

import logging
import smtplib
from email.message import EmailMessage
from functools import lru_cache
from typing import Tuple

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

OTP_SUBJECT = "Email verification OTP"


def build_otp_message(otp: str, expire_minutes: int) -> Tuple[str, str]:
    """Return (plain text, html) bodies for an OTP email."""
    text = (
        f"Your OTP code is: {otp}\n"
        f"This OTP is valid for {expire_minutes} minutes.\n"
    )
    html = (
        f"<h2>Your OTP code is: <strong>{otp}</strong></h2>\n"
        f"<p>This OTP is valid for {expire_minutes} minutes.</p>\n"
    )
    return text, html


class OtpMailer:
    """Interface: send a one-time password to an email address."""

    def send_otp(self, email: str, otp: str) -> None:
        raise NotImplementedError


class SmtpOtpMailer(OtpMailer):
    def __init__(self, settings: Settings):
        self.settings = settings

    def build_message(self, email: str, otp: str) -> EmailMessage:
        text, html = build_otp_message(otp, self.settings.otp_expire_minutes)
        msg = EmailMessage()
        msg["Subject"] = OTP_SUBJECT
        msg["From"] = f"{self.settings.mail_from_name} <{self.settings.mail_from}>"
        msg["To"] = email
        msg.set_content(text)
        msg.add_alternative(html, subtype="html")
        return msg

    def connect(self) -> smtplib.SMTP:
        """Open an authenticated SMTP session. Every socket op is bounded by the mail timeout."""
        s = self.settings
        use_ssl = s.smtp_use_ssl or s.smtp_port == 465
        if use_ssl:
            server = smtplib.SMTP_SSL(s.smtp_host, s.smtp_port, timeout=s.mail_timeout_seconds)
        else:
            server = smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.mail_timeout_seconds)
        try:
            if s.smtp_use_tls and not use_ssl:
                server.starttls()
            if s.smtp_username:
                server.login(s.smtp_username, s.smtp_password)
        except Exception:
            server.close()
            raise
        return server

    def send_otp(self, email: str, otp: str) -> None:
        msg = self.build_message(email, otp)
        try:
            with self.connect() as server:
                server.send_message(msg)
        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to send OTP email to %s via %s", email, self.settings.smtp_host)
            raise
        logger.info("OTP email sent to %s", email)


class ConsoleOtpMailer(OtpMailer):
    """Logs the code instead of mailing it. Development only."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def send_otp(self, email: str, otp: str) -> None:
        logger.warning(
            "SMTP not configured; OTP for %s is %s (valid %d minutes)",
            email, otp, self.settings.otp_expire_minutes
        )


@lru_cache()
def get_mailer() -> OtpMailer:
    """Get the configured mailer (singleton). Also used as a FastAPI dependency."""
    settings = get_settings()
    if settings.smtp_configured:
        return SmtpOtpMailer(settings)
    logger.warning("SMTP_HOST is not set; OTP codes will be logged instead of emailed.")
    return ConsoleOtpMailer(settings)
