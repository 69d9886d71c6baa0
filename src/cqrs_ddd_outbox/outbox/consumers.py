"""Consumer registration and cursor commits."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..contracts import CommitConsumed, RegisterConsumer, validate_request
from ..ports.outbox import OutboxConsumer
from ..primitives.exceptions import (
    ConsumerNotFoundError,
    CursorRegressionError,
    ValidationError,
)

if TYPE_CHECKING:
    from ..ports.outbox import IOutboxConsumerStore, IOutboxMessageStore

logger = logging.getLogger("cqrs_ddd.outbox.consumers")


class ConsumerRegistry:
    """Creates named consumers, each with an independent cursor."""

    def __init__(
        self,
        consumer_store: IOutboxConsumerStore,
        message_store: IOutboxMessageStore,
    ) -> None:
        self._consumers = consumer_store
        self._messages = message_store

    async def register(
        self, consumer_name: str, consume_from_last_message: bool = False
    ) -> OutboxConsumer:
        """Register a consumer.

        The cursor starts at ``0`` (replay the whole log) or, when
        *consume_from_last_message* is true, at the current max message id
        (skip the backlog).

        Raises:
            ValidationError: invalid name.
            ConsumerAlreadyExistsError: the name is taken. Also raised when a
                concurrent registration wins the race.
        """
        request = validate_request(
            RegisterConsumer,
            consumer_name=consumer_name,
            consume_from_last_message=consume_from_last_message,
        )
        consumer = OutboxConsumer(name=request.consumer_name)
        if request.consume_from_last_message:
            consumer.last_consumed_message_id = await self._messages.max_id()

        await self._consumers.add(consumer)
        logger.info(
            "Registered outbox consumer %s at cursor %d",
            consumer.name,
            consumer.last_consumed_message_id,
        )
        return consumer

    async def can_register(self, consumer_name: str) -> bool:
        """Non-authoritative pre-check; ``register`` may still raise a conflict."""
        try:
            validate_request(RegisterConsumer, consumer_name=consumer_name)
        except ValidationError:
            return False
        return await self._consumers.get(consumer_name) is None

    async def get(self, consumer_name: str) -> OutboxConsumer:
        consumer = await self._consumers.get(consumer_name)
        if consumer is None:
            raise ConsumerNotFoundError(consumer_name)
        return consumer


class CursorAdvancer:
    """Records how far a consumer got through the log.

    By default a commit is last-writer-wins: the stored cursor is replaced
    with whatever id is given, so it may move backwards (to replay) or past
    the current max id. With ``reject_regression=True`` a commit lower than
    the stored cursor raises :class:`CursorRegressionError`.
    """

    def __init__(
        self,
        consumer_store: IOutboxConsumerStore,
        *,
        reject_regression: bool = False,
    ) -> None:
        self._consumers = consumer_store
        self.reject_regression = reject_regression

    async def commit(self, consumer_name: str, last_consumed_message_id: int) -> None:
        """
        Move the cursor of *consumer_name* to *last_consumed_message_id*.

        Raises:
            ConsumerNotFoundError: unknown consumer.
            ValidationError: negative id.
            CursorRegressionError: only with ``reject_regression``.
        """
        request = validate_request(
            CommitConsumed,
            consumer_name=consumer_name,
            last_consumed_message_id=last_consumed_message_id,
        )
        consumer = await self._consumers.get(request.consumer_name)
        if consumer is None:
            raise ConsumerNotFoundError(request.consumer_name)

        current = consumer.last_consumed_message_id
        target = request.last_consumed_message_id
        if target < current:
            if self.reject_regression:
                raise CursorRegressionError(consumer.name, current, target)
            logger.warning(
                "Cursor of outbox consumer %s moved back from %d to %d",
                consumer.name,
                current,
                target,
            )

        await self._consumers.save_cursor(consumer.name, target)
        logger.debug("Committed outbox consumer %s at %d", consumer.name, target)
