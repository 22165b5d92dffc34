"""User domain events."""

from pydantic import Field

from src.core.domain.events import DomainEvent


class UserCreatedEvent(DomainEvent):
    """Raised when a first redemption registers a new user."""

    user_id: int = Field(..., description="User ID")
    email: str = Field(..., description="User email")


class UserProfileUpdatedEvent(DomainEvent):
    """Raised when a user's profile changes."""

    user_id: int = Field(..., description="User ID")
    updated_fields: list[str] = Field(..., description="Changed fields")
