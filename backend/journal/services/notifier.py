"""Outbound delivery of verification codes."""
import logging
import smtplib
from email.message import EmailMessage

from journal.config import Settings, settings
from journal.exceptions import NotifierError

logger = logging.getLogger(__name__)


class Notifier:
    """Delivers a verification code to a user's email address."""

    def send_verification_code(self, email: str, code: str) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Development notifier: writes the code to the application log."""

    def send_verification_code(self, email: str, code: str) -> None:
        logger.info("Verification code for %s: %s", email, code)


class SmtpNotifier(Notifier):
    """Sends the code as a plain-text email over SMTP."""

    def __init__(self, config: Settings):
        self.config = config

    def _build_message(self, email: str, code: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = "Your journal verification code"
        msg["From"] = self.config.SMTP_SENDER
        msg["To"] = email
        msg.set_content(
            f"Your verification code is {code}.\n"
            f"It expires in {self.config.VERIFICATION_CODE_TTL_MINUTES} minutes."
        )
        return msg

    def send_verification_code(self, email: str, code: str) -> None:
        msg = self._build_message(email, code)
        try:
            with smtplib.SMTP(self.config.SMTP_HOST, self.config.SMTP_PORT, timeout=10) as smtp:
                if self.config.SMTP_USE_TLS:
                    smtp.starttls()
                if self.config.SMTP_USERNAME:
                    smtp.login(self.config.SMTP_USERNAME, self.config.SMTP_PASSWORD or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception("Failed to deliver verification code to %s", email)
            raise NotifierError() from exc
        logger.info("Sent verification code email to %s", email)


def build_notifier(config: Settings = settings) -> Notifier:
    """Pick the notifier named by ``NOTIFIER_BACKEND``."""
    backend = config.NOTIFIER_BACKEND.lower()
    if backend == "smtp":
        return SmtpNotifier(config)
    if backend != "log":
        logger.warning("Unknown NOTIFIER_BACKEND %r, falling back to log", config.NOTIFIER_BACKEND)
    return LoggingNotifier()
