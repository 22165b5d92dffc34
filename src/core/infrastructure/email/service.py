"""Outbound email delivery.

Provides:
- SMTP provider (TLS/SSL, authentication)
- Retry with exponential backoff
- Circuit breaker after repeated failures
"""

import asyncio
import smtplib
import ssl
from dataclasses import dataclass
from datetime import UTC, datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

from loguru import logger

from src.core.config import Settings
from src.core.infrastructure.health import EmailHealthResult, HealthStatus


@dataclass
class EmailResult:
    """Email send result."""

    success: bool
    message_id: str | None = None
    error: str | None = None
    retry_count: int = 0


class SMTPProvider:
    """Synchronous SMTP provider."""

    def __init__(
        self,
        host: str | None,
        port: int = 587,
        user: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        use_ssl: bool = False,
        from_email: str | None = None,
        from_name: str | None = None,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.use_ssl = use_ssl
        self.from_email = from_email
        self.from_name = from_name
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SMTPProvider":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_TLS,
            use_ssl=settings.SMTP_SSL,
            from_email=settings.EMAILS_FROM_EMAIL,
            from_name=settings.EMAILS_FROM_NAME,
        )

    def is_configured(self) -> bool:
        return bool(self.host and self.from_email)

    def _create_connection(self) -> smtplib.SMTP | smtplib.SMTP_SSL:
        if self.use_ssl:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(
                self.host, self.port, context=context, timeout=self.timeout
            )
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            if self.use_tls:
                context = ssl.create_default_context()
                server.starttls(context=context)

        if self.user and self.password:
            server.login(self.user, self.password)

        return server

    def send(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        plain_body: str | None = None,
    ) -> EmailResult:
        """Send one email synchronously; failures are reported, not raised."""
        if not self.is_configured():
            return EmailResult(success=False, error="SMTP not configured")

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email
        msg["Date"] = datetime.now(UTC).strftime("%a, %d %b %Y %H:%M:%S +0000")
        msg["Message-ID"] = make_msgid()

        if plain_body:
            msg.attach(MIMEText(plain_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            with self._create_connection() as server:
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed: {e}")
            return EmailResult(success=False, error=f"Authentication failed: {e}")
        except smtplib.SMTPRecipientsRefused as e:
            logger.error(f"Recipient refused: {to_email}")
            return EmailResult(success=False, error=f"Recipient refused: {e}")
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP error: {e}")
            return EmailResult(success=False, error=f"SMTP error: {e}")

        logger.info(f"Email sent successfully to {to_email}")
        return EmailResult(success=True, message_id=msg["Message-ID"])


class EmailService:
    """Email service with retry and circuit breaker.

    The circuit opens after ``failure_threshold`` consecutive failed sends and
    closes again after ``reset_after_seconds``.
    """

    def __init__(
        self,
        provider: SMTPProvider,
        enabled: bool = True,
        max_retries: int = 3,
        base_delay: float = 1.0,
        failure_threshold: int = 5,
        reset_after_seconds: float = 300,
    ):
        self.provider = provider
        self.enabled = enabled
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.failure_threshold = failure_threshold
        self.reset_after_seconds = reset_after_seconds
        self._consecutive_failures = 0
        self._last_failure_time: datetime | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailService":
        return cls(
            provider=SMTPProvider.from_settings(settings),
            enabled=settings.EMAIL_ENABLED,
        )

    def is_available(self) -> bool:
        """Email is enabled and SMTP is configured."""
        return self.enabled and self.provider.is_configured()

    def is_circuit_open(self) -> bool:
        if self._consecutive_failures < self.failure_threshold:
            return False
        if self._last_failure_time:
            elapsed = (datetime.now(UTC) - self._last_failure_time).total_seconds()
            if elapsed < self.reset_after_seconds:
                return True
        self._consecutive_failures = 0
        return False

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        plain_body: str | None = None,
    ) -> EmailResult:
        """Send an email, retrying with exponential backoff."""
        if not self.is_available():
            logger.warning("Email service not available")
            return EmailResult(success=False, error="Email service not available")

        if self.is_circuit_open():
            logger.warning("Email circuit breaker is open")
            return EmailResult(
                success=False,
                error="Circuit breaker open - too many failures",
            )

        loop = asyncio.get_running_loop()
        last_error = None
        for attempt in range(self.max_retries):
            # smtplib blocks, keep it off the event loop
            result = await loop.run_in_executor(
                None,
                self.provider.send,
                to_email,
                subject,
                html_body,
                plain_body,
            )

            if result.success:
                self._consecutive_failures = 0
                result.retry_count = attempt
                return result

            last_error = result.error
            logger.warning(
                f"Email send attempt {attempt + 1}/{self.max_retries} failed: {last_error}"
            )

            if attempt < self.max_retries - 1:
                await asyncio.sleep(self.base_delay * (2**attempt))

        self._consecutive_failures += 1
        self._last_failure_time = datetime.now(UTC)

        logger.error(f"Email send failed after {self.max_retries} attempts")
        return EmailResult(
            success=False,
            error=last_error,
            retry_count=self.max_retries,
        )

    def get_health_status(self) -> EmailHealthResult:
        available = self.is_available()
        circuit_open = self.is_circuit_open()
        if not self.enabled:
            status = HealthStatus.SKIPPED
        elif not available:
            status = HealthStatus.ERROR
        elif circuit_open:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.OK
        return EmailHealthResult(
            status=status,
            available=available,
            circuit_open=circuit_open,
            consecutive_failures=self._consecutive_failures,
            smtp_configured=self.provider.is_configured(),
            email_enabled=self.enabled,
        )
