"""In-memory outbox stores for unit tests."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

from ...ports.outbox import (
    IOutboxConsumerStore,
    IOutboxMessageStore,
    OutboxConsumer,
    OutboxMessage,
)
from ...primitives.exceptions import ConsumerAlreadyExistsError, ConsumerNotFoundError

if TYPE_CHECKING:
    from ...ports.unit_of_work import UnitOfWork


class InMemoryOutboxMessageStore(IOutboxMessageStore):
    """In-memory implementation of ``IOutboxMessageStore``.

    Messages appended under a unit of work are staged as an ``on_commit``
    callback of that unit of work: they receive their id and become visible
    only when it commits, and vanish with it on rollback. Ids therefore
    follow commit order.
    """

    def __init__(self) -> None:
        self._messages: list[OutboxMessage] = []
        self._last_id = 0

    async def append(
        self,
        messages: list[OutboxMessage],
        uow: UnitOfWork | None = None,
    ) -> None:
        staged = list(messages)
        if uow is None:
            self._insert(staged)
            return

        async def _publish() -> None:
            self._insert(staged)

        uow.on_commit(_publish)

    async def get_after(
        self,
        last_id: int,
        limit: int,
        uow: UnitOfWork | None = None,  # noqa: ARG002
    ) -> list[OutboxMessage]:
        return [m for m in self._messages if m.id is not None and m.id > last_id][
            :limit
        ]

    async def get_by_type(
        self,
        message_type: str,
        version_type: int,
        uow: UnitOfWork | None = None,  # noqa: ARG002
    ) -> list[OutboxMessage]:
        return [
            m
            for m in self._messages
            if m.message_type == message_type and m.version_type == version_type
        ]

    async def max_id(self, uow: UnitOfWork | None = None) -> int:  # noqa: ARG002
        return self._last_id

    def _insert(self, messages: list[OutboxMessage]) -> None:
        for msg in messages:
            self._last_id += 1
            self._messages.append(dataclasses.replace(msg, id=self._last_id))

    # ── Test helpers ─────────────────────────────────────────────

    @property
    def messages(self) -> list[OutboxMessage]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)


class InMemoryOutboxConsumerStore(IOutboxConsumerStore):
    """In-memory implementation of ``IOutboxConsumerStore`` keyed by name."""

    def __init__(self) -> None:
        self._consumers: dict[str, OutboxConsumer] = {}

    async def get(self, name: str) -> OutboxConsumer | None:
        consumer = self._consumers.get(name)
        return dataclasses.replace(consumer) if consumer is not None else None

    async def add(self, consumer: OutboxConsumer) -> None:
        if consumer.name in self._consumers:
            raise ConsumerAlreadyExistsError(consumer.name)
        self._consumers[consumer.name] = dataclasses.replace(consumer)

    async def save_cursor(self, name: str, last_consumed_message_id: int) -> None:
        consumer = self._consumers.get(name)
        if consumer is None:
            raise ConsumerNotFoundError(name)
        consumer.last_consumed_message_id = last_consumed_message_id

    def __len__(self) -> int:
        return len(self._consumers)
