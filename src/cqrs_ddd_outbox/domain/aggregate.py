"""Aggregate Root base class with an observable domain-event buffer."""

from __future__ import annotations

from typing import Any, Generic, Protocol, TypeVar, runtime_checkable
from uuid import UUID

from pydantic import BaseModel, ConfigDict, PrivateAttr

from .collection import DomainEventCollection

ID = TypeVar("ID", str, int, UUID)


@runtime_checkable
class HasDomainEvents(Protocol):
    """Anything exposing a ``domain_events`` collection.

    The unit of work forwards tracked entities to its transaction hooks; the
    outbox tracker subscribes to entities matching this protocol.
    """

    @property
    def domain_events(self) -> DomainEventCollection: ...


class AggregateRoot(BaseModel, Generic[ID]):
    """Base class for all Aggregate Roots.

    Usage::

        class Order(AggregateRoot[str]):
            status: str = "pending"

            def place(self) -> None:
                self.status = "placed"
                self.add_event(OrderPlaced(order_id=self.id))
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: ID
    _domain_events: DomainEventCollection = PrivateAttr(
        default_factory=DomainEventCollection
    )

    @property
    def domain_events(self) -> DomainEventCollection:
        return self._domain_events

    def add_event(self, event: Any) -> None:
        """Record a domain event to be written to the outbox on commit."""
        self._domain_events.add(event)

    def collect_events(self) -> list[Any]:
        """Return all recorded events and clear the internal buffer."""
        events = list(self._domain_events)
        self._domain_events.clear()
        return events
