"""Transactional e-mail over SMTP."""
import logging
import smtplib
from email.message import EmailMessage

from starlette.concurrency import run_in_threadpool

from app.core.config import Settings, get_settings
from app.core.errors import DependencyFailure

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Password Reset"
RESET_HTML = (
    '<p>Click <a href="{link}">here</a> to reset your password. '
    "This link expires in {minutes} minutes.</p>"
)


class Mailer:
    """Sends mail through the configured SMTP server; does nothing when no host is set."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _deliver(self, message: EmailMessage) -> None:
        s = self.settings
        with smtplib.SMTP_SSL(s.smtp_host, s.smtp_port, timeout=15) as smtp:
            if s.smtp_user:
                smtp.login(s.smtp_user, s.smtp_password)
            smtp.send_message(message)

    async def send(self, to_email: str, subject: str, html: str) -> None:
        if not self.settings.smtp_host:
            logger.warning("SMTP host not configured, not sending %r to %s", subject, to_email)
            return

        message = EmailMessage()
        message["From"] = self.settings.mail_from
        message["To"] = to_email
        message["Subject"] = subject
        message.set_content(html, subtype="html")

        try:
            await run_in_threadpool(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception("Sending %r to %s failed", subject, to_email)
            raise DependencyFailure("Mail delivery failed") from exc
        logger.info("Sent %r to %s", subject, to_email)

    async def send_password_reset(self, to_email: str, link: str) -> None:
        html = RESET_HTML.format(link=link, minutes=self.settings.reset_token_expire_minutes)
        await self.send(to_email, RESET_SUBJECT, html)


def get_mailer() -> Mailer:
    return Mailer(get_settings())
