"""Domain events infrastructure."""

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from uuid import uuid4

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field


class DomainEvent(BaseModel, ABC):
    """Base class for all domain events."""

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    event_version: int = Field(default=1)

    model_config = ConfigDict(frozen=True)

    @property
    def event_type(self) -> str:
        """Return the event type name."""
        return self.__class__.__name__


class DomainEventHandler(ABC):
    """Base class for domain event handlers."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """Handle the domain event."""
        pass


class EventBus:
    """In-process event bus for publishing and subscribing to domain events."""

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[DomainEventHandler]] = {}

    def subscribe(
        self, event_type: type[DomainEvent], handler: DomainEventHandler
    ) -> None:
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            f"Subscribed handler {handler.__class__.__name__} to {event_type.__name__}"
        )

    async def publish(self, event: DomainEvent) -> None:
        handlers = self._handlers.get(type(event), [])
        logger.debug(f"Publishing event {event.event_type} to {len(handlers)} handlers")

        for handler in handlers:
            # A failing subscriber must not roll back the write that raised the event.
            try:
                await handler.handle(event)
            except Exception:
                logger.exception(
                    f"Error handling event {event.event_type} "
                    f"by {handler.__class__.__name__}"
                )

    async def publish_all(self, events: list[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)

    def clear_handlers(self) -> None:
        self._handlers.clear()

    def has_handlers(self, event_type: type[DomainEvent]) -> bool:
        return bool(self._handlers.get(event_type))


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get the process-wide event bus."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus
