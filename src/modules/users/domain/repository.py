"""User repository interfaces."""

from abc import abstractmethod
from datetime import datetime

from src.core.domain.repository import BaseRepository
from src.modules.users.domain.entities import MagicLink, User


class UserRepository(BaseRepository[User]):
    """User repository interface."""

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Get user by (normalized) email."""
        pass

    @abstractmethod
    async def get_or_create_by_email(self, email: str) -> tuple[User, bool]:
        """Return the user for ``email``, creating it if needed.

        Must be safe under concurrent calls for the same email: exactly one
        row exists afterwards and no caller sees a uniqueness error. The flag
        is ``True`` only for the caller whose insert created the row.
        """
        pass


class MagicLinkRepository(BaseRepository[MagicLink]):
    """Magic link (credential store) repository interface."""

    @abstractmethod
    async def get_by_token(self, token: str) -> MagicLink | None:
        """Get a magic link by token value regardless of its state."""
        pass

    @abstractmethod
    async def consume(self, token: str, now: datetime) -> MagicLink | None:
        """Atomically mark an unused, unexpired token as used.

        The check and the write are one indivisible operation: of several
        concurrent calls for one token at most one gets the link back, the
        rest get ``None``. Unknown, used and expired tokens also give ``None``.
        """
        pass
