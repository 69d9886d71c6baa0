from .outbox import InMemoryOutboxConsumerStore, InMemoryOutboxMessageStore
from .unit_of_work import InMemoryUnitOfWork

__all__ = [
    "InMemoryOutboxConsumerStore",
    "InMemoryOutboxMessageStore",
    "InMemoryUnitOfWork",
]
