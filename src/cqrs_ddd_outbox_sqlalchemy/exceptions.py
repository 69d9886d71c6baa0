"""Exceptions for the SQLAlchemy outbox adapter."""

from __future__ import annotations

from cqrs_ddd_outbox.primitives.exceptions import PersistenceError, UnitOfWorkError


class SQLAlchemyPersistenceError(PersistenceError):
    """Base exception for all SQLAlchemy-specific persistence errors."""


class SessionManagementError(SQLAlchemyPersistenceError):
    """Raised when session creation or management fails."""


__all__: list[str] = [
    "SQLAlchemyPersistenceError",
    "SessionManagementError",
    "UnitOfWorkError",
]
