"""Ports: protocols implemented by adapters."""

from __future__ import annotations

from cqrs_ddd_outbox.ports.outbox import (
    IOutboxConsumerStore,
    IOutboxMessageStore,
    OutboxConsumer,
    OutboxMessage,
    RetrievedMessages,
)
from cqrs_ddd_outbox.ports.unit_of_work import ITransactionHook, UnitOfWork, get_current_uow

__all__ = [
    "IOutboxConsumerStore",
    "IOutboxMessageStore",
    "ITransactionHook",
    "OutboxConsumer",
    "OutboxMessage",
    "RetrievedMessages",
    "UnitOfWork",
    "get_current_uow",
]
