"""User command handlers."""

from datetime import timedelta

from loguru import logger

from src.core.domain.base_entity import utc_now
from src.core.domain.ports.token import TokenService
from src.core.infrastructure.logging import BusinessEvents, mask_email
from src.modules.users.application.commands import (
    RedeemMagicLinkCommand,
    RequestMagicLinkCommand,
    UpdateProfileCommand,
)
from src.modules.users.application.magic_link_service import (
    build_magic_link_url,
    generate_magic_link_token,
)
from src.modules.users.application.models import IssuedMagicLink, RedeemedSession
from src.modules.users.domain.entities import MagicLink, User
from src.modules.users.domain.exceptions import (
    InvalidOrExpiredTokenError,
    NotifierUnavailableError,
    UserNotFoundError,
)
from src.modules.users.domain.ports import MagicLinkNotifier
from src.modules.users.domain.repository import MagicLinkRepository, UserRepository


class RequestMagicLinkHandler:
    """Issue a magic link and hand it to the notifier.

    Earlier outstanding links for the same email stay valid.
    """

    def __init__(
        self,
        magic_link_repository: MagicLinkRepository,
        notifier: MagicLinkNotifier,
        verify_url: str,
        expire_minutes: int = 15,
        token_bytes: int = 32,
        expose_link: bool = False,
    ):
        self.magic_link_repository = magic_link_repository
        self.notifier = notifier
        self.verify_url = verify_url
        self.ttl = timedelta(minutes=expire_minutes)
        self.token_bytes = token_bytes
        self.expose_link = expose_link
        self.logger = logger

    async def handle(self, command: RequestMagicLinkCommand) -> IssuedMagicLink:
        email = command.email
        token = generate_magic_link_token(self.token_bytes)
        magic_link = await self.magic_link_repository.create(
            MagicLink.issue(email=email, token=token, ttl=self.ttl)
        )
        link = build_magic_link_url(self.verify_url, token)

        delivered = True
        try:
            await self.notifier.send_magic_link(
                email=email, link=link, expires_at=magic_link.expires_at
            )
        except NotifierUnavailableError as exc:
            delivered = False
            # Fallback delivery: the link goes to the local log instead.
            self.logger.warning(
                f"Magic link delivery unavailable ({exc.message}); "
                f"link for {mask_email(email)}: {link}"
            )
            BusinessEvents.magic_link_delivery_fallback(
                email=email, reason=exc.message
            )

        BusinessEvents.magic_link_issued(
            email=email, magic_link_id=magic_link.id, delivered=delivered
        )
        return IssuedMagicLink(
            magic_link=magic_link,
            link=link,
            delivered=delivered,
            exposed_link=link if self.expose_link else None,
        )


class RedeemMagicLinkHandler:
    """Consume a magic link, resolve its user and mint a session credential."""

    def __init__(
        self,
        user_repository: UserRepository,
        magic_link_repository: MagicLinkRepository,
        token_service: TokenService,
    ):
        self.user_repository = user_repository
        self.magic_link_repository = magic_link_repository
        self.token_service = token_service
        self.logger = logger

    async def handle(self, command: RedeemMagicLinkCommand) -> RedeemedSession:
        now = utc_now()

        # Check and mark-used are one store operation; a racing redemption
        # of the same token gets None here.
        magic_link = await self.magic_link_repository.consume(command.token, now)
        if magic_link is None:
            BusinessEvents.magic_link_redeem_rejected()
            raise InvalidOrExpiredTokenError()

        user, created = await self.user_repository.get_or_create_by_email(
            magic_link.email
        )
        if created:
            self.logger.info(f"Registered new user {user.id}")

        user.record_login(now)
        user = await self.user_repository.update(user)

        access_token = self.token_service.create_access_token(
            subject=str(user.id),
            extra_claims={"email": user.email},
        )
        BusinessEvents.magic_link_redeemed(
            user_id=user.id, magic_link_id=magic_link.id, new_user=created
        )
        return RedeemedSession(
            user=user,
            access_token=access_token,
            expires_at=now + self.token_service.access_token_ttl,
            is_new_user=created,
        )


class UpdateProfileHandler:
    """Handle user profile update."""

    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository
        self.logger = logger

    async def handle(self, command: UpdateProfileCommand) -> User:
        user = await self.user_repository.get_by_id(command.user_id)
        if not user:
            raise UserNotFoundError(user_id=command.user_id)

        updated_fields = user.update_profile(display_name=command.display_name)

        if updated_fields:
            user = await self.user_repository.update(user)
            self.logger.info(f"Updated profile for user {user.id}: {updated_fields}")

        return user
