"""Aggregate root base class with domain event support."""

from typing import TYPE_CHECKING

from src.core.domain.base_entity import BaseEntity

if TYPE_CHECKING:
    from src.core.domain.events import DomainEvent


class AggregateRoot(BaseEntity):
    """Base class for aggregate roots."""

    def add_domain_event(self, event: "DomainEvent") -> None:
        """Add a domain event to be published."""
        self._add_domain_event(event)

    def has_domain_events(self) -> bool:
        """Check if there are any unpublished domain events."""
        return len(self._domain_events) > 0
