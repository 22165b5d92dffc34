"""User query service."""

from src.modules.users.application.models import UserData
from src.modules.users.domain.entities import User
from src.modules.users.domain.exceptions import UserNotFoundError
from src.modules.users.domain.repository import UserRepository


def to_user_data(user: User) -> UserData:
    return UserData(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class UserQueryService:
    """Query service for user views."""

    def __init__(self, user_repository: UserRepository) -> None:
        self.user_repo = user_repository

    async def get_profile(self, user_id: int) -> UserData:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(user_id=user_id)
        return to_user_data(user)
