"""User entity-model mappers."""

from src.core.infrastructure.database.mapper import BaseMapper
from src.modules.users.domain.entities import MagicLink, User
from src.modules.users.infrastructure.models import MagicLinkModel, UserModel


class UserMapper(BaseMapper[User, UserModel]):
    """User entity-model mapper."""

    def to_domain(self, model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            display_name=model.display_name,
            last_login_at=model.last_login_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            is_deleted=model.is_deleted,
        )

    def to_model(self, entity: User) -> UserModel:
        return UserModel(
            id=entity.id,
            email=entity.email,
            display_name=entity.display_name,
            last_login_at=entity.last_login_at,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            is_deleted=entity.is_deleted,
        )


class MagicLinkMapper(BaseMapper[MagicLink, MagicLinkModel]):
    """Magic link entity-model mapper."""

    def to_domain(self, model: MagicLinkModel) -> MagicLink:
        return MagicLink(
            id=model.id,
            email=model.email,
            token=model.token,
            expires_at=model.expires_at,
            is_used=model.is_used,
            used_at=model.used_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            is_deleted=model.is_deleted,
        )

    def to_model(self, entity: MagicLink) -> MagicLinkModel:
        return MagicLinkModel(
            id=entity.id,
            email=entity.email,
            token=entity.token,
            expires_at=entity.expires_at,
            is_used=entity.is_used,
            used_at=entity.used_at,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            is_deleted=entity.is_deleted,
        )
