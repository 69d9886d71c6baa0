"""Primitives: exceptions."""

from __future__ import annotations

from .exceptions import (
    ConfigurationError,
    ConflictError,
    ConsumerAlreadyExistsError,
    ConsumerNotFoundError,
    CursorRegressionError,
    MessageTypeNotConfiguredError,
    NotFoundError,
    OutboxError,
    PersistenceError,
    TypeRegistrationError,
    UnitOfWorkError,
    ValidationError,
)

__all__ = [
    "ConfigurationError",
    "ConflictError",
    "ConsumerAlreadyExistsError",
    "ConsumerNotFoundError",
    "CursorRegressionError",
    "MessageTypeNotConfiguredError",
    "NotFoundError",
    "OutboxError",
    "PersistenceError",
    "TypeRegistrationError",
    "UnitOfWorkError",
    "ValidationError",
]
