"""Cursor-bounded, paginated reads of the outbox."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..contracts import DEFAULT_LIMIT, GetMessages, validate_request
from ..ports.outbox import RetrievedMessages
from ..primitives.exceptions import ConsumerNotFoundError

if TYPE_CHECKING:
    from ..ports.outbox import IOutboxConsumerStore, IOutboxMessageStore
    from ..registry import TypeRegistry

logger = logging.getLogger("cqrs_ddd.outbox.retriever")


class MessageRetriever:
    """Reads the messages a consumer has not committed yet.

    Reading never moves the cursor: two fetches without a commit in between
    return the same page.
    """

    def __init__(
        self,
        message_store: IOutboxMessageStore,
        consumer_store: IOutboxConsumerStore,
        registry: TypeRegistry,
    ) -> None:
        self._messages = message_store
        self._consumers = consumer_store
        self._registry = registry

    async def fetch(
        self, consumer_name: str, limit: int = DEFAULT_LIMIT
    ) -> RetrievedMessages:
        """Return up to *limit* messages after the consumer's cursor.

        ``limit <= 0`` falls back to the default of 10; above 1000 it is
        rejected.

        Raises:
            ValidationError: invalid name or limit.
            ConsumerNotFoundError: unknown consumer.
        """
        request = validate_request(GetMessages, consumer_name=consumer_name, limit=limit)
        consumer = await self._consumers.get(request.consumer_name)
        if consumer is None:
            raise ConsumerNotFoundError(request.consumer_name)

        # One extra row tells whether another page exists.
        rows = await self._messages.get_after(
            consumer.last_consumed_message_id, request.limit + 1
        )
        has_more = len(rows) > request.limit
        page = RetrievedMessages(messages=rows[: request.limit], has_more=has_more)
        logger.debug(
            "Fetched %d messages for %s after %d (has_more=%s)",
            page.count,
            consumer.name,
            consumer.last_consumed_message_id,
            has_more,
        )
        return page

    async def get_all(self, payload_type: type[Any]) -> list[Any]:
        """Deserialize every stored message of *payload_type*, oldest first.

        Raises:
            MessageTypeNotConfiguredError: *payload_type* is not registered.
        """
        metadata = self._registry.resolve_by_type(payload_type)
        rows = await self._messages.get_by_type(metadata.type_name, metadata.version)
        return [metadata.deserialize(row.payload) for row in rows]

    async def get_last(self, payload_type: type[Any]) -> Any | None:
        """Return the most recent stored message of *payload_type*, if any."""
        events = await self.get_all(payload_type)
        return events[-1] if events else None
