"""DomainEventCollection: observable buffer of domain events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


class DomainEventCollection:
    """Ordered list of domain events that notifies observers on every ``add``.

    Observers registered with :meth:`observe` are first replayed every event
    already in the collection, so an observer attached late still sees the
    full emission order.
    """

    def __init__(self) -> None:
        self._events: list[Any] = []
        self._observers: list[Callable[[Any], None]] = []

    def add(self, event: Any) -> None:
        self._events.append(event)
        for observer in list(self._observers):
            observer(event)

    def observe(self, observer: Callable[[Any], None]) -> None:
        """Subscribe *observer* and replay the events recorded so far."""
        if observer is None:
            raise ValueError("observer must not be None")
        self._observers.append(observer)
        for event in list(self._events):
            observer(event)

    def remove_observer(self, observer: Callable[[Any], None]) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def clear(self) -> None:
        self._events.clear()

    def __contains__(self, event: object) -> bool:
        return event in self._events

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)
