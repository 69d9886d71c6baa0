from __future__ import annotations

import pytest

from cqrs_ddd_outbox import (
    InMemoryOutboxConsumerStore,
    InMemoryOutboxMessageStore,
    TypeRegistry,
)

from .events import build_registry


@pytest.fixture
def registry() -> TypeRegistry:
    return build_registry()


@pytest.fixture
def message_store() -> InMemoryOutboxMessageStore:
    return InMemoryOutboxMessageStore()


@pytest.fixture
def consumer_store() -> InMemoryOutboxConsumerStore:
    return InMemoryOutboxConsumerStore()
