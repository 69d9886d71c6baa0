"""One fetch, dispatch and commit step of a consumer loop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..contracts import DEFAULT_LIMIT

if TYPE_CHECKING:
    from .consumers import CursorAdvancer
    from .dispatcher import MessageDispatcher
    from .retriever import MessageRetriever

logger = logging.getLogger("cqrs_ddd.outbox.processor")


class OutboxProcessor:
    """
    Delivers the next page of a consumer's messages to the dispatcher.

    Lifecycle per batch:
    1. Fetch unseen messages via :class:`MessageRetriever`.
    2. Dispatch them via :class:`MessageDispatcher`.
    3. Only if every observer succeeded, commit the last id via
       :class:`CursorAdvancer`.

    A failed dispatch propagates and leaves the cursor where it was, so the
    next call re-delivers the same page. Scheduling, retry and backoff
    belong to the caller.
    """

    def __init__(
        self,
        retriever: MessageRetriever,
        dispatcher: MessageDispatcher,
        advancer: CursorAdvancer,
    ) -> None:
        self.retriever = retriever
        self.dispatcher = dispatcher
        self.advancer = advancer

    async def process_batch(
        self, consumer_name: str, limit: int = DEFAULT_LIMIT
    ) -> int:
        """Process one page for *consumer_name*; return the number dispatched."""
        batch = await self.retriever.fetch(consumer_name, limit)
        if not batch.messages:
            return 0

        await self.dispatcher.dispatch_batch(batch.messages)

        last_id = batch.last_id
        if last_id is not None:
            await self.advancer.commit(consumer_name, last_id)
        logger.debug(
            "Consumer %s processed %d messages up to %s (has_more=%s)",
            consumer_name,
            batch.count,
            last_id,
            batch.has_more,
        )
        return batch.count
