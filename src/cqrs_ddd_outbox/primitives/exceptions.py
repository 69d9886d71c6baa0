"""Exceptions raised by the outbox toolkit."""

from __future__ import annotations


class OutboxError(Exception):
    """Root exception for the entire outbox toolkit."""


class ValidationError(OutboxError):
    """Raised when a request contract fails validation.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))


class NotFoundError(OutboxError):
    """Raised when a requested resource does not exist."""


class ConsumerNotFoundError(NotFoundError):
    """Raised when no consumer is registered under a name."""

    def __init__(self, consumer_name: str) -> None:
        self.consumer_name = consumer_name
        super().__init__(f"Outbox consumer {consumer_name!r} not found")


class ConflictError(OutboxError):
    """Raised when a request conflicts with the current state."""


class ConsumerAlreadyExistsError(ConflictError):
    """Raised when registering a consumer name that is already taken."""

    def __init__(self, consumer_name: str) -> None:
        self.consumer_name = consumer_name
        super().__init__(f"Outbox consumer {consumer_name!r} already exists")


class CursorRegressionError(ConflictError):
    """Raised when a commit would move a consumer cursor backwards.

    Only raised by a :class:`~cqrs_ddd_outbox.outbox.consumers.CursorAdvancer`
    configured with ``reject_regression=True``.
    """

    def __init__(self, consumer_name: str, current: int, requested: int) -> None:
        self.consumer_name = consumer_name
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot move cursor of consumer {consumer_name!r} "
            f"back from {current} to {requested}"
        )


class ConfigurationError(OutboxError):
    """Base class for programmer and start-up configuration errors."""


class MessageTypeNotConfiguredError(ConfigurationError):
    """Raised when a payload type or ``(name, version)`` pair is not registered."""

    def __init__(self, message_type: object, version: int | None = None) -> None:
        self.message_type = message_type
        self.version = version
        if isinstance(message_type, type):
            label = message_type.__name__
        elif version is not None:
            label = f"{message_type} (version {version})"
        else:
            label = str(message_type)
        super().__init__(
            f"Message type {label} is not configured; "
            "register it before writing or dispatching messages"
        )


class TypeRegistrationError(ConfigurationError):
    """Raised on duplicate registrations or registration after freeze."""


class PersistenceError(OutboxError):
    """Base class for all persistence-related errors."""


class UnitOfWorkError(PersistenceError):
    """Raised when Unit of Work operations fail."""
