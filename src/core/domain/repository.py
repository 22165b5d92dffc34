"""Base repository interface."""

from abc import ABC, abstractmethod
from typing import TypeVar

T = TypeVar("T")


class BaseRepository[T](ABC):
    """Generic persistence operations shared by every aggregate."""

    @abstractmethod
    async def get_by_id(self, entity_id: int) -> T | None:
        """Get an entity by id, ignoring soft-deleted rows."""
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Persist a new entity and return it with its assigned id."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Persist changes to an existing entity."""
        pass
