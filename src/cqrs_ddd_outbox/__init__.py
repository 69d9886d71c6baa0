"""cqrs-ddd-outbox: transactional outbox with cursor-based multi-consumer delivery.

Infrastructure-free core; the SQLAlchemy adapter lives in
``cqrs_ddd_outbox_sqlalchemy``.
"""

from __future__ import annotations

# ── Adapters ────────────────────────────────────────────────────
from .adapters.memory import (
    InMemoryOutboxConsumerStore,
    InMemoryOutboxMessageStore,
    InMemoryUnitOfWork,
)

# ── Contracts ───────────────────────────────────────────────────
from .contracts import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    CommitConsumed,
    CreateMessage,
    GetMessages,
    RegisterConsumer,
)

# ── Domain ──────────────────────────────────────────────────────
from .domain import AggregateRoot, DomainEvent, DomainEventCollection, HasDomainEvents

# ── Instrumentation ─────────────────────────────────────────────
from .instrumentation import (
    HookRegistration,
    HookRegistry,
    InstrumentationHook,
    get_hook_registry,
    operation_name,
    set_hook_registry,
)

# ── Outbox ──────────────────────────────────────────────────────
from .outbox import (
    ConsumerRegistry,
    CursorAdvancer,
    MessageDispatcher,
    MessageObserver,
    MessageRetriever,
    OutboxProcessor,
    OutboxTracker,
    OutboxWriter,
)

# ── Ports ───────────────────────────────────────────────────────
from .ports import (
    IOutboxConsumerStore,
    IOutboxMessageStore,
    ITransactionHook,
    OutboxConsumer,
    OutboxMessage,
    RetrievedMessages,
    UnitOfWork,
    get_current_uow,
)

# ── Primitives ──────────────────────────────────────────────────
from .primitives import (
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

# ── Registry ────────────────────────────────────────────────────
from .registry import SerializationOptions, TypeMetadata, TypeRegistry

__all__: list[str] = [
    # Adapters
    "InMemoryOutboxConsumerStore",
    "InMemoryOutboxMessageStore",
    "InMemoryUnitOfWork",
    # Contracts
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "CommitConsumed",
    "CreateMessage",
    "GetMessages",
    "RegisterConsumer",
    # Domain
    "AggregateRoot",
    "DomainEvent",
    "DomainEventCollection",
    "HasDomainEvents",
    # Instrumentation
    "HookRegistration",
    "HookRegistry",
    "InstrumentationHook",
    "get_hook_registry",
    "operation_name",
    "set_hook_registry",
    # Outbox
    "ConsumerRegistry",
    "CursorAdvancer",
    "MessageDispatcher",
    "MessageObserver",
    "MessageRetriever",
    "OutboxProcessor",
    "OutboxTracker",
    "OutboxWriter",
    # Ports
    "IOutboxConsumerStore",
    "IOutboxMessageStore",
    "ITransactionHook",
    "OutboxConsumer",
    "OutboxMessage",
    "RetrievedMessages",
    "UnitOfWork",
    "get_current_uow",
    # Primitives
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
    # Registry
    "SerializationOptions",
    "TypeMetadata",
    "TypeRegistry",
]
