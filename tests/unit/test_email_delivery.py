"""Tests for the email service and the email-backed magic link notifier."""

import smtplib
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.core.infrastructure.email.service import EmailResult, EmailService, SMTPProvider
from src.core.infrastructure.health import HealthStatus
from src.modules.users.domain.exceptions import NotifierUnavailableError
from src.modules.users.infrastructure.notifier import EmailMagicLinkNotifier

pytestmark = pytest.mark.anyio


def _provider(**kwargs) -> SMTPProvider:
    params = {
        "host": "smtp.example.com",
        "from_email": "noreply@example.com",
        "from_name": "Expense Tracker",
    }
    params.update(kwargs)
    return SMTPProvider(**params)


def _service(provider: SMTPProvider, **kwargs) -> EmailService:
    return EmailService(provider, base_delay=0, **kwargs)


class TestSMTPProvider:
    def test_unconfigured_provider_reports_failure(self):
        result = _provider(host=None).send("a@example.com", "Hi", "<p>Hi</p>")

        assert result.success is False
        assert result.error == "SMTP not configured"

    def test_sends_multipart_message(self):
        server = MagicMock()
        with patch("smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value = server
            result = _provider(use_tls=False).send(
                "a@example.com", "Hi", "<p>Hi</p>", "Hi"
            )

        assert result.success is True
        assert result.message_id
        message = server.send_message.call_args.args[0]
        assert message["To"] == "a@example.com"
        assert message["From"] == "Expense Tracker <noreply@example.com>"
        assert message["Subject"] == "Hi"

    def test_smtp_errors_are_reported(self):
        with patch("smtplib.SMTP", side_effect=smtplib.SMTPConnectError(421, "busy")):
            result = _provider(use_tls=False).send("a@example.com", "Hi", "<p>Hi</p>")

        assert result.success is False
        assert "SMTP error" in result.error


class TestEmailService:
    async def test_disabled_service_does_not_send(self):
        provider = _provider()
        provider.send = MagicMock()
        service = _service(provider, enabled=False)

        result = await service.send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert result.success is False
        provider.send.assert_not_called()

    async def test_retries_until_success(self):
        provider = _provider()
        provider.send = MagicMock(
            side_effect=[
                EmailResult(success=False, error="boom"),
                EmailResult(success=True, message_id="<id>"),
            ]
        )
        service = _service(provider)

        result = await service.send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert result.success is True
        assert result.retry_count == 1
        assert provider.send.call_count == 2

    async def test_circuit_opens_after_repeated_failures(self):
        provider = _provider()
        provider.send = MagicMock(return_value=EmailResult(success=False, error="boom"))
        service = _service(provider, max_retries=1, failure_threshold=2)

        await service.send_email("a@example.com", "Hi", "<p>Hi</p>")
        await service.send_email("a@example.com", "Hi", "<p>Hi</p>")
        result = await service.send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert service.is_circuit_open() is True
        assert result.success is False
        assert "Circuit breaker" in result.error
        assert provider.send.call_count == 2
        assert service.get_health_status().status == HealthStatus.DEGRADED

    def test_health_reflects_configuration(self):
        assert _service(_provider()).get_health_status().status == HealthStatus.OK
        assert (
            _service(_provider(host=None)).get_health_status().status
            == HealthStatus.ERROR
        )
        assert (
            _service(_provider(), enabled=False).get_health_status().status
            == HealthStatus.SKIPPED
        )


class TestEmailMagicLinkNotifier:
    """Notifier contract: deliver or raise NotifierUnavailableError."""

    async def test_sends_rendered_email(self):
        service = MagicMock(spec=EmailService)
        service.is_available.return_value = True
        service.send_email = AsyncMock(return_value=EmailResult(success=True))
        notifier = EmailMagicLinkNotifier(service, project_name="Expense Tracker")

        await notifier.send_magic_link(
            email="a@example.com",
            link="https://app.example.com/auth/verify?token=abc",
            expires_at=datetime(2025, 1, 21, 12, 0, tzinfo=UTC),
        )

        kwargs = service.send_email.call_args.kwargs
        assert kwargs["to_email"] == "a@example.com"
        assert kwargs["subject"] == "Your sign-in link for Expense Tracker"
        assert "https://app.example.com/auth/verify?token=abc" in kwargs["plain_body"]

    async def test_unavailable_service_raises(self):
        service = MagicMock(spec=EmailService)
        service.is_available.return_value = False
        notifier = EmailMagicLinkNotifier(service, project_name="Expense Tracker")

        with pytest.raises(NotifierUnavailableError):
            await notifier.send_magic_link(
                email="a@example.com",
                link="https://app.example.com/auth/verify?token=abc",
                expires_at=datetime(2025, 1, 21, 12, 0, tzinfo=UTC),
            )

    async def test_failed_send_raises(self):
        service = MagicMock(spec=EmailService)
        service.is_available.return_value = True
        service.send_email = AsyncMock(
            return_value=EmailResult(success=False, error="SMTP error: down")
        )
        notifier = EmailMagicLinkNotifier(service, project_name="Expense Tracker")

        with pytest.raises(NotifierUnavailableError) as exc_info:
            await notifier.send_magic_link(
                email="a@example.com",
                link="https://app.example.com/auth/verify?token=abc",
                expires_at=datetime(2025, 1, 21, 12, 0, tzinfo=UTC),
            )

        assert exc_info.value.message == "SMTP error: down"
