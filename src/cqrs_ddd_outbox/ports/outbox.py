"""Outbox storage ports: the append-only message log and the consumer cursors."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Protocol, runtime_checkable
from uuid import uuid4

if TYPE_CHECKING:
    from .unit_of_work import UnitOfWork


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OutboxMessage:
    """A message in the outbox log.

    ``id`` is assigned by the store on insert and is ``None`` until then.
    Once committed a message is never mutated.
    """

    message_type: str
    version_type: int
    payload: str
    key: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    id: int | None = None


@dataclass
class OutboxConsumer:
    """A named reader of the outbox with its own cursor."""

    name: str
    last_consumed_message_id: int = 0
    id: str = field(default_factory=lambda: str(uuid4()))


@dataclass(frozen=True)
class RetrievedMessages:
    """One page of unseen messages for a consumer, ascending by id."""

    messages: list[OutboxMessage]
    has_more: bool = False

    @property
    def count(self) -> int:
        return len(self.messages)

    @property
    def last_id(self) -> int | None:
        """Id of the last message of the page, the value to commit after it."""
        if not self.messages:
            return None
        return self.messages[-1].id


@runtime_checkable
class IOutboxMessageStore(Protocol):
    """Durable, append-only, sequentially-numbered message storage."""

    async def append(
        self, messages: list[OutboxMessage], uow: UnitOfWork | None = None
    ) -> None:
        """
        Insert messages as part of *uow*'s transaction.

        Args:
            messages: Messages to insert, in order.
            uow: The enclosing unit of work. The rows become visible only if
                 it commits. With ``None`` the store writes and commits on
                 its own.
        """
        ...

    async def get_after(
        self, last_id: int, limit: int, uow: UnitOfWork | None = None
    ) -> list[OutboxMessage]:
        """Return up to *limit* committed messages with ``id > last_id``, ascending."""
        ...

    async def get_by_type(
        self, message_type: str, version_type: int, uow: UnitOfWork | None = None
    ) -> list[OutboxMessage]:
        """Return every message of one logical type and version, ascending."""
        ...

    async def max_id(self, uow: UnitOfWork | None = None) -> int:
        """Return the highest committed message id, ``0`` for an empty log."""
        ...


@runtime_checkable
class IOutboxConsumerStore(Protocol):
    """Named, uniquely-keyed cursors into the outbox log."""

    async def get(self, name: str) -> OutboxConsumer | None:
        """Look up a consumer by its unique name."""
        ...

    async def add(self, consumer: OutboxConsumer) -> None:
        """
        Persist a new consumer.

        Raises:
            ConsumerAlreadyExistsError: if the name is already taken.
        """
        ...

    async def save_cursor(self, name: str, last_consumed_message_id: int) -> None:
        """
        Overwrite the cursor of an existing consumer.

        Raises:
            ConsumerNotFoundError: if no consumer has that name.
        """
        ...
