"""OutboxWriter: serializes domain events into the caller's transaction."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ..contracts import CreateMessage, validate_request
from ..instrumentation import WRITE, get_hook_registry, operation_name
from ..ports.outbox import OutboxMessage
from ..ports.unit_of_work import get_current_uow

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..ports.outbox import IOutboxMessageStore
    from ..ports.unit_of_work import UnitOfWork
    from ..registry import TypeRegistry

logger = logging.getLogger("cqrs_ddd.outbox.writer")


class OutboxWriter:
    """
    Turns domain events into outbox rows that share the business transaction.

    The writer never commits. Rows are appended to the given unit of work,
    or to the ambient one (:func:`get_current_uow`) when none is given, and
    become durable only if that unit of work commits. Without any unit of
    work the store writes on its own.

    Constructing a writer freezes the type registry.
    """

    def __init__(self, registry: TypeRegistry, store: IOutboxMessageStore) -> None:
        registry.freeze()
        self._registry = registry
        self._store = store

    async def write(
        self,
        event: Any,
        uow: UnitOfWork | None = None,
        *,
        key: str | None = None,
    ) -> OutboxMessage:
        """Serialize *event* and append it to the outbox.

        Raises:
            MessageTypeNotConfiguredError: the event's class is not registered.
                Nothing is appended.
            ValidationError: the serialized message breaks the
                ``CreateMessage`` contract.
        """
        message = self._build(event, key)

        async def _append() -> None:
            await self._store.append([message], self._resolve_uow(uow))

        await get_hook_registry().execute_all(
            operation_name(WRITE, message.message_type),
            {"message_type": message.message_type, "version": message.version_type},
            _append,
        )
        logger.debug(
            "Wrote %s v%d to outbox", message.message_type, message.version_type
        )
        return message

    async def write_all(
        self, events: Iterable[Any], uow: UnitOfWork | None = None
    ) -> list[OutboxMessage]:
        """Serialize every event first, then append them all in order.

        A single unregistered event fails the call before any row is appended.
        """
        messages = [self._build(event) for event in events]
        if not messages:
            return []

        async def _append() -> None:
            await self._store.append(messages, self._resolve_uow(uow))

        await get_hook_registry().execute_all(
            operation_name(WRITE, "batch"), {"count": len(messages)}, _append
        )
        logger.debug("Wrote %d messages to outbox", len(messages))
        return messages

    def _build(self, event: Any, key: str | None = None) -> OutboxMessage:
        if event is None:
            raise ValueError("Cannot write None to the outbox")

        metadata = self._registry.resolve_by_type(type(event))
        request = validate_request(
            CreateMessage,
            message_type=metadata.type_name,
            version_type=metadata.version,
            key=key if key is not None else metadata.key_for(event),
            payload=metadata.serialize(event),
        )
        occurred_at = getattr(event, "occurred_at", None)
        return OutboxMessage(
            message_type=request.message_type,
            version_type=request.version_type,
            key=request.key,
            payload=request.payload,
            created_at=(
                occurred_at
                if isinstance(occurred_at, datetime)
                else datetime.now(timezone.utc)
            ),
        )

    @staticmethod
    def _resolve_uow(uow: UnitOfWork | None) -> UnitOfWork | None:
        return uow if uow is not None else get_current_uow()
