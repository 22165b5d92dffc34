"""User repository implementations."""

from datetime import datetime

from loguru import logger
from sqlalchemy import Update, update
from sqlalchemy.dialects.postgresql import Insert, insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from src.core.domain.base_entity import utc_now
from src.core.domain.events import EventBus
from src.core.infrastructure.database.event_aware_repository import EventAwareRepository
from src.modules.users.domain.entities import MagicLink, User
from src.modules.users.domain.events import UserCreatedEvent
from src.modules.users.domain.exceptions import UserNotFoundError
from src.modules.users.domain.repository import MagicLinkRepository, UserRepository
from src.modules.users.infrastructure.mappers import MagicLinkMapper, UserMapper
from src.modules.users.infrastructure.models import MagicLinkModel, UserModel


def build_insert_user_statement(email: str, now: datetime) -> Insert:
    """INSERT that creates the identity for ``email`` unless one exists.

    A concurrent first login for the same email waits on the unique index and
    then inserts nothing, so RETURNING yields no row for the loser.
    """
    return (
        pg_insert(UserModel)
        .values(email=email, created_at=now, updated_at=now, is_deleted=False)
        .on_conflict_do_nothing(index_elements=["email"])
        .returning(UserModel.id)
    )


class PostgreSQLUserRepository(EventAwareRepository[User], UserRepository):
    """PostgreSQL user repository implementation."""

    def __init__(
        self,
        session: AsyncSession,
        mapper: UserMapper,
        event_publisher: EventBus,
    ):
        super().__init__(event_publisher)
        self.session = session
        self.mapper = mapper
        self.logger = logger

    async def get_by_id(self, user_id: int) -> User | None:
        statement = select(UserModel).where(
            UserModel.id == user_id,
            col(UserModel.is_deleted).is_(False),
        )
        result = await self.session.execute(statement)
        model = result.scalar_one_or_none()
        return self.mapper.to_domain(model) if model else None

    async def get_by_email(self, email: str) -> User | None:
        statement = select(UserModel).where(
            UserModel.email == email,
            col(UserModel.is_deleted).is_(False),
        )
        result = await self.session.execute(statement)
        model = result.scalar_one_or_none()
        return self.mapper.to_domain(model) if model else None

    async def get_or_create_by_email(self, email: str) -> tuple[User, bool]:
        result = await self.session.execute(
            build_insert_user_statement(email, utc_now())
        )
        created = result.scalar_one_or_none() is not None

        lookup = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        user = self.mapper.to_domain(lookup.scalar_one())

        if created:
            user.add_domain_event(UserCreatedEvent(user_id=user.id, email=user.email))
            await self._publish_events_from_entity(user)
        return user, created

    async def create(self, user: User) -> User:
        model = self.mapper.to_model(user)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        await self._publish_events_from_entity(user)
        return self.mapper.to_domain(model)

    async def update(self, user: User) -> User:
        existing = await self.session.get(UserModel, user.id)
        if not existing:
            raise UserNotFoundError(user_id=user.id)

        existing.display_name = user.display_name
        existing.last_login_at = user.last_login_at
        existing.updated_at = user.updated_at
        existing.is_deleted = user.is_deleted

        self.session.add(existing)
        await self.session.flush()
        await self.session.refresh(existing)
        await self._publish_events_from_entity(user)
        return self.mapper.to_domain(existing)


def build_consume_statement(token: str, now: datetime) -> Update:
    """Conditional UPDATE that redeems ``token`` only if unused and unexpired.

    The row lock taken by the UPDATE serializes concurrent redemptions; the
    loser re-evaluates the WHERE clause against the committed row and matches
    nothing.
    """
    return (
        update(MagicLinkModel)
        .where(
            col(MagicLinkModel.token) == token,
            col(MagicLinkModel.is_used).is_(False),
            col(MagicLinkModel.is_deleted).is_(False),
            col(MagicLinkModel.expires_at) > now,
        )
        .values(is_used=True, used_at=now, updated_at=now)
        .returning(MagicLinkModel)
        .execution_options(synchronize_session=False)
    )


class PostgreSQLMagicLinkRepository(
    EventAwareRepository[MagicLink], MagicLinkRepository
):
    """PostgreSQL magic link repository implementation."""

    def __init__(
        self,
        session: AsyncSession,
        mapper: MagicLinkMapper,
        event_publisher: EventBus,
    ):
        super().__init__(event_publisher)
        self.session = session
        self.mapper = mapper
        self.logger = logger

    async def get_by_id(self, magic_link_id: int) -> MagicLink | None:
        statement = select(MagicLinkModel).where(
            MagicLinkModel.id == magic_link_id,
            col(MagicLinkModel.is_deleted).is_(False),
        )
        result = await self.session.execute(statement)
        model = result.scalar_one_or_none()
        return self.mapper.to_domain(model) if model else None

    async def get_by_token(self, token: str) -> MagicLink | None:
        statement = select(MagicLinkModel).where(
            MagicLinkModel.token == token,
            col(MagicLinkModel.is_deleted).is_(False),
        )
        result = await self.session.execute(statement)
        model = result.scalar_one_or_none()
        return self.mapper.to_domain(model) if model else None

    async def consume(self, token: str, now: datetime) -> MagicLink | None:
        result = await self.session.execute(build_consume_statement(token, now))
        model = result.scalar_one_or_none()
        if model is None:
            self.logger.debug("Magic link consume matched no redeemable row")
            return None
        return self.mapper.to_domain(model)

    async def create(self, magic_link: MagicLink) -> MagicLink:
        model = self.mapper.to_model(magic_link)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        await self._publish_events_from_entity(magic_link)
        return self.mapper.to_domain(model)

    async def update(self, magic_link: MagicLink) -> MagicLink:
        existing = await self.session.get(MagicLinkModel, magic_link.id)
        if not existing:
            raise ValueError(f"MagicLink with id {magic_link.id} not found")

        existing.is_used = magic_link.is_used
        existing.used_at = magic_link.used_at
        existing.updated_at = magic_link.updated_at
        existing.is_deleted = magic_link.is_deleted

        self.session.add(existing)
        await self.session.flush()
        await self.session.refresh(existing)
        return self.mapper.to_domain(existing)
