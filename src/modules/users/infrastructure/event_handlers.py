"""User domain event subscribers."""

from src.core.domain.events import DomainEvent, DomainEventHandler, EventBus
from src.core.infrastructure.logging import BusinessEvents
from src.modules.users.domain.events import UserCreatedEvent, UserProfileUpdatedEvent


class UserCreatedLogger(DomainEventHandler):
    async def handle(self, event: DomainEvent) -> None:
        if not isinstance(event, UserCreatedEvent):
            return
        BusinessEvents.user_registered(user_id=event.user_id, email=event.email)


class UserProfileUpdatedLogger(DomainEventHandler):
    async def handle(self, event: DomainEvent) -> None:
        if not isinstance(event, UserProfileUpdatedEvent):
            return
        BusinessEvents.profile_updated(
            user_id=event.user_id, updated_fields=event.updated_fields
        )


def register_user_event_handlers(event_bus: EventBus) -> None:
    if event_bus.has_handlers(UserCreatedEvent):
        return
    event_bus.subscribe(UserCreatedEvent, UserCreatedLogger())
    event_bus.subscribe(UserProfileUpdatedEvent, UserProfileUpdatedLogger())
