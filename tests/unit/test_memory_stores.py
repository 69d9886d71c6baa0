"""Tests for the in-memory outbox stores."""

from __future__ import annotations

import pytest

from cqrs_ddd_outbox import (
    ConsumerAlreadyExistsError,
    ConsumerNotFoundError,
    InMemoryOutboxConsumerStore,
    InMemoryOutboxMessageStore,
    InMemoryUnitOfWork,
    IOutboxConsumerStore,
    IOutboxMessageStore,
    OutboxConsumer,
    OutboxMessage,
)


def _message(message_type: str = "order.placed", version: int = 1) -> OutboxMessage:
    return OutboxMessage(message_type=message_type, version_type=version, payload="{}")


def test_stores_satisfy_ports() -> None:
    assert isinstance(InMemoryOutboxMessageStore(), IOutboxMessageStore)
    assert isinstance(InMemoryOutboxConsumerStore(), IOutboxConsumerStore)


class TestInMemoryOutboxMessageStore:
    @pytest.mark.asyncio
    async def test_ids_are_sequential(self) -> None:
        store = InMemoryOutboxMessageStore()
        await store.append([_message(), _message()])
        await store.append([_message()])

        assert [m.id for m in store.messages] == [1, 2, 3]
        assert await store.max_id() == 3

    @pytest.mark.asyncio
    async def test_empty_store(self) -> None:
        store = InMemoryOutboxMessageStore()
        assert await store.max_id() == 0
        assert await store.get_after(0, 10) == []

    @pytest.mark.asyncio
    async def test_get_after_respects_cursor_and_limit(self) -> None:
        store = InMemoryOutboxMessageStore()
        await store.append([_message() for _ in range(5)])

        page = await store.get_after(2, 2)

        assert [m.id for m in page] == [3, 4]

    @pytest.mark.asyncio
    async def test_get_by_type(self) -> None:
        store = InMemoryOutboxMessageStore()
        await store.append(
            [_message("a"), _message("b"), _message("a", 2), _message("a")]
        )

        assert [m.id for m in await store.get_by_type("a", 1)] == [1, 4]
        assert [m.id for m in await store.get_by_type("a", 2)] == [3]

    @pytest.mark.asyncio
    async def test_uow_commit_publishes_and_rollback_discards(self) -> None:
        store = InMemoryOutboxMessageStore()

        with pytest.raises(RuntimeError):
            async with InMemoryUnitOfWork() as uow:
                await store.append([_message()], uow)
                raise RuntimeError("rollback")
        assert len(store) == 0

        async with InMemoryUnitOfWork() as uow:
            await store.append([_message()], uow)
        assert [m.id for m in store.messages] == [1]


class TestInMemoryOutboxConsumerStore:
    @pytest.mark.asyncio
    async def test_add_get_and_save_cursor(self) -> None:
        store = InMemoryOutboxConsumerStore()
        await store.add(OutboxConsumer(name="billing"))

        await store.save_cursor("billing", 5)

        consumer = await store.get("billing")
        assert consumer is not None
        assert consumer.last_consumed_message_id == 5
        assert await store.get("nobody") is None

    @pytest.mark.asyncio
    async def test_returned_consumers_are_copies(self) -> None:
        store = InMemoryOutboxConsumerStore()
        await store.add(OutboxConsumer(name="billing"))

        consumer = await store.get("billing")
        assert consumer is not None
        consumer.last_consumed_message_id = 99

        stored = await store.get("billing")
        assert stored is not None
        assert stored.last_consumed_message_id == 0

    @pytest.mark.asyncio
    async def test_duplicate_and_missing(self) -> None:
        store = InMemoryOutboxConsumerStore()
        await store.add(OutboxConsumer(name="billing"))

        with pytest.raises(ConsumerAlreadyExistsError):
            await store.add(OutboxConsumer(name="billing"))
        with pytest.raises(ConsumerNotFoundError):
            await store.save_cursor("nobody", 1)
