import asyncio
import logging
import smtplib
from email.mime.text import MIMEText

from menucard.core.config import Settings

logger = logging.getLogger(__name__)

PLACEHOLDER_HOSTS = {"smtp.example.com", ""}


class Mailer:
    """Best-effort verification-code delivery over SMTP.

    The transport settings are resolved on first use. When email is disabled
    or SMTP is not configured the mailer runs in disabled mode and only logs
    the code, so local development works without a mail server. Sending
    never raises: failures are logged and reported as ``False``.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._enabled: bool | None = None

    @property
    def enabled(self) -> bool:
        if self._enabled is None:
            s = self._settings
            configured = bool(s.SMTP_HOST) and s.SMTP_HOST not in PLACEHOLDER_HOSTS
            self._enabled = s.EMAIL_ENABLED and configured
            if not self._enabled:
                logger.warning("Email configuration not set. Email sending is disabled.")
        return self._enabled

    def _send_sync(self, to_email: str, subject: str, body: str) -> None:
        s = self._settings
        msg = MIMEText(body)
        msg["Subject"] = subject
        msg["From"] = s.MAIL_FROM or s.SMTP_USER or ""
        msg["To"] = to_email

        # Respect timeout to avoid hanging the worker thread
        server = smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=float(s.SMTP_TIMEOUT_SECONDS))
        try:
            if s.SMTP_TLS:
                server.starttls()
            if s.SMTP_USER:
                server.login(s.SMTP_USER, s.SMTP_PASSWORD or "")
            server.send_message(msg)
        finally:
            try:
                server.quit()
            except smtplib.SMTPException:
                server.close()

    async def send(self, to_email: str, subject: str, body: str) -> bool:
        if not self.enabled:
            logger.info("[EMAIL DISABLED] To: %s Subject: %s\n%s", to_email, subject, body)
            return False
        # Offload synchronous SMTP work to a thread so we don't block the event loop
        try:
            await asyncio.to_thread(self._send_sync, to_email, subject, body)
        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to send email to %s", to_email)
            return False
        return True

    async def send_verification_code(self, to_email: str, code: str) -> bool:
        ttl = self._settings.VERIFY_CODE_TTL_MINUTES
        body = (
            f"Your verification code is: {code}\n\n"
            f"This code will expire in {ttl} minutes.\n"
            "If you didn't request this code, please ignore this email."
        )
        sent = await self.send(to_email, "Your Verification Code", body)
        if not sent:
            # keep the code reachable for operators when delivery is unavailable
            logger.warning("Verification code for %s was not delivered: %s", to_email, code)
        return sent
