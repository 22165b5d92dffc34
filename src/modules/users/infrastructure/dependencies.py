"""User module infrastructure dependencies."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.domain.events import get_event_bus
from src.core.infrastructure.database.session import get_db_session
from src.core.infrastructure.email.service import EmailService
from src.modules.users.infrastructure.mappers import MagicLinkMapper, UserMapper
from src.modules.users.infrastructure.notifier import EmailMagicLinkNotifier
from src.modules.users.infrastructure.repositories import (
    PostgreSQLMagicLinkRepository,
    PostgreSQLUserRepository,
)


def get_user_mapper() -> UserMapper:
    return UserMapper()


def get_magic_link_mapper() -> MagicLinkMapper:
    return MagicLinkMapper()


def get_email_service(request: Request) -> EmailService:
    """The email service built in the application lifespan."""
    return request.app.state.email_service


def get_magic_link_notifier(
    email_service: EmailService = Depends(get_email_service),
) -> EmailMagicLinkNotifier:
    return EmailMagicLinkNotifier(email_service, project_name=settings.PROJECT_NAME)


async def get_user_repository(
    session: AsyncSession = Depends(get_db_session, scope="function"),
    mapper: UserMapper = Depends(get_user_mapper),
) -> PostgreSQLUserRepository:
    return PostgreSQLUserRepository(session, mapper, get_event_bus())


async def get_magic_link_repository(
    session: AsyncSession = Depends(get_db_session, scope="function"),
    mapper: MagicLinkMapper = Depends(get_magic_link_mapper),
) -> PostgreSQLMagicLinkRepository:
    return PostgreSQLMagicLinkRepository(session, mapper, get_event_bus())
