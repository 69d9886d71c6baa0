"""Domain primitives: aggregates and domain events."""

from __future__ import annotations

from .aggregate import AggregateRoot, HasDomainEvents
from .collection import DomainEventCollection
from .events import DomainEvent

__all__ = [
    "AggregateRoot",
    "DomainEvent",
    "DomainEventCollection",
    "HasDomainEvents",
]
