"""OutboxTracker: writes buffered domain events to the outbox on commit."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..domain.aggregate import HasDomainEvents

if TYPE_CHECKING:
    from ..ports.unit_of_work import UnitOfWork
    from .writer import OutboxWriter

logger = logging.getLogger("cqrs_ddd.outbox.tracker")


class OutboxTracker:
    """
    Transaction hook giving a unit of work transactional-outbox semantics.

    1. Every entity tracked by the unit of work that exposes a
       ``domain_events`` collection is observed; its events (including the
       ones recorded before tracking) are buffered in emission order.
    2. ``before_commit`` writes the whole buffer through
       :meth:`OutboxWriter.write_all`, inside the still-open transaction.
    3. ``after_commit`` drops the buffer and clears the tracked entities'
       collections, so a later save never re-sends them.
    4. ``after_rollback`` discards the buffer and clears the tracked
       entities' collections, so the rolled-back events are never written
       by a later unit of work. With ``clear_on_rollback=False`` both are
       kept and a retried save writes those events exactly once.

    Usage::

        uow = SQLAlchemyUnitOfWork(session_factory=factory)
        OutboxTracker.attach(uow, writer)
        async with uow:
            order = Order(id="o-1")
            uow.track(order)
            order.place()
    """

    def __init__(self, writer: OutboxWriter, *, clear_on_rollback: bool = True) -> None:
        self._writer = writer
        self.clear_on_rollback = clear_on_rollback
        self._entities: list[HasDomainEvents] = []
        self._pending: list[Any] = []
        self._flushed: list[Any] = []

    @classmethod
    def attach(
        cls,
        uow: UnitOfWork,
        writer: OutboxWriter,
        *,
        clear_on_rollback: bool = True,
    ) -> OutboxTracker:
        """Create a tracker and register it as a hook of *uow*."""
        tracker = cls(writer, clear_on_rollback=clear_on_rollback)
        uow.add_hook(tracker)
        return tracker

    @property
    def pending_events(self) -> list[Any]:
        return list(self._pending)

    # ── ITransactionHook ─────────────────────────────────────────

    def entity_tracked(self, entity: object) -> None:
        if not isinstance(entity, HasDomainEvents):
            return
        if any(tracked is entity for tracked in self._entities):
            return
        self._entities.append(entity)
        entity.domain_events.observe(self._pending.append)

    async def before_commit(self, uow: UnitOfWork) -> None:
        if not self._pending:
            return
        events = list(self._pending)
        await self._writer.write_all(events, uow)
        self._pending.clear()
        self._flushed.extend(events)
        logger.debug("Flushed %d domain events to the outbox", len(events))

    async def after_commit(self, uow: UnitOfWork) -> None:  # noqa: ARG002
        self._flushed.clear()
        for entity in self._entities:
            entity.domain_events.clear()

    async def after_rollback(self, uow: UnitOfWork) -> None:  # noqa: ARG002
        if self.clear_on_rollback:
            dropped = len(self._pending) + len(self._flushed)
            self._pending.clear()
            for entity in self._entities:
                entity.domain_events.clear()
            if dropped:
                logger.debug("Discarded %d domain events after rollback", dropped)
        else:
            self._pending[:0] = self._flushed
        self._flushed.clear()
