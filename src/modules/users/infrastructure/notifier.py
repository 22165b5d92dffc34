"""Email-backed magic link notifier."""

from datetime import datetime

from src.core.infrastructure.email.service import EmailService
from src.core.infrastructure.logging import BusinessEvents
from src.modules.users.application.email_templates import render_magic_link_email
from src.modules.users.domain.exceptions import NotifierUnavailableError


class EmailMagicLinkNotifier:
    """Sends magic links through :class:`EmailService`.

    Implements the ``MagicLinkNotifier`` port.
    """

    def __init__(self, email_service: EmailService, project_name: str):
        self.email_service = email_service
        self.project_name = project_name

    async def send_magic_link(
        self, email: str, link: str, expires_at: datetime
    ) -> None:
        if not self.email_service.is_available():
            raise NotifierUnavailableError("Email delivery is disabled or not configured")

        subject, html_body, plain_body = render_magic_link_email(
            project_name=self.project_name,
            to_email=email,
            login_url=link,
            expires_at=expires_at,
        )
        result = await self.email_service.send_email(
            to_email=email,
            subject=subject,
            html_body=html_body,
            plain_body=plain_body,
        )
        BusinessEvents.email_sent(
            to_email=email,
            email_type="magic_link",
            success=result.success,
            retry_count=result.retry_count,
        )
        if not result.success:
            raise NotifierUnavailableError(result.error or "Email delivery failed")
