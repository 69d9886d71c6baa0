"""SQLAlchemy persistence adapter for the outbox."""

from __future__ import annotations

from .exceptions import (
    SessionManagementError,
    SQLAlchemyPersistenceError,
    UnitOfWorkError,
)
from .models import Base, OutboxConsumerModel, OutboxMessageModel
from .outbox import SQLAlchemyOutboxConsumerStore, SQLAlchemyOutboxMessageStore
from .uow import SQLAlchemyUnitOfWork

__all__ = [
    # Core
    "SQLAlchemyOutboxConsumerStore",
    "SQLAlchemyOutboxMessageStore",
    "SQLAlchemyUnitOfWork",
    # Models
    "Base",
    "OutboxConsumerModel",
    "OutboxMessageModel",
    # Exceptions
    "SQLAlchemyPersistenceError",
    "SessionManagementError",
    "UnitOfWorkError",
]
