"""Tests for ConsumerRegistry and CursorAdvancer."""

from __future__ import annotations

import logging

import pytest

from cqrs_ddd_outbox import (
    ConsumerAlreadyExistsError,
    ConsumerNotFoundError,
    ConsumerRegistry,
    CursorAdvancer,
    CursorRegressionError,
    InMemoryOutboxConsumerStore,
    InMemoryOutboxMessageStore,
    OutboxMessage,
    ValidationError,
)


def _message(n: int) -> OutboxMessage:
    return OutboxMessage(message_type="order.placed", version_type=1, payload=f"{n}")


@pytest.fixture
def consumers(
    consumer_store: InMemoryOutboxConsumerStore,
    message_store: InMemoryOutboxMessageStore,
) -> ConsumerRegistry:
    return ConsumerRegistry(consumer_store, message_store)


class TestConsumerRegistry:
    @pytest.mark.asyncio
    async def test_register_starts_at_zero(
        self,
        consumers: ConsumerRegistry,
        message_store: InMemoryOutboxMessageStore,
    ) -> None:
        await message_store.append([_message(1), _message(2)])

        consumer = await consumers.register("billing")

        assert consumer.name == "billing"
        assert consumer.last_consumed_message_id == 0
        assert (await consumers.get("billing")).last_consumed_message_id == 0

    @pytest.mark.asyncio
    async def test_register_from_last_message_skips_backlog(
        self,
        consumers: ConsumerRegistry,
        message_store: InMemoryOutboxMessageStore,
    ) -> None:
        await message_store.append([_message(1), _message(2), _message(3)])

        consumer = await consumers.register("billing", consume_from_last_message=True)

        assert consumer.last_consumed_message_id == 3

    @pytest.mark.asyncio
    async def test_register_from_last_message_on_empty_log(
        self, consumers: ConsumerRegistry
    ) -> None:
        consumer = await consumers.register("billing", consume_from_last_message=True)
        assert consumer.last_consumed_message_id == 0

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, consumers: ConsumerRegistry) -> None:
        await consumers.register("billing")

        with pytest.raises(ConsumerAlreadyExistsError):
            await consumers.register("billing")

    @pytest.mark.asyncio
    async def test_duplicate_name_leaves_first_cursor(
        self,
        consumers: ConsumerRegistry,
        message_store: InMemoryOutboxMessageStore,
    ) -> None:
        await message_store.append([_message(1), _message(2)])
        await consumers.register("billing", consume_from_last_message=True)

        with pytest.raises(ConsumerAlreadyExistsError):
            await consumers.register("billing", consume_from_last_message=False)

        assert (await consumers.get("billing")).last_consumed_message_id == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "ab", "   ", "\t \n", "x" * 101])
    async def test_invalid_name_rejected(
        self,
        consumers: ConsumerRegistry,
        consumer_store: InMemoryOutboxConsumerStore,
        name: str,
    ) -> None:
        with pytest.raises(ValidationError):
            await consumers.register(name)
        assert len(consumer_store) == 0

    @pytest.mark.asyncio
    async def test_can_register(self, consumers: ConsumerRegistry) -> None:
        assert await consumers.can_register("billing") is True
        assert await consumers.can_register("ab") is False
        assert await consumers.can_register("   ") is False

        await consumers.register("billing")

        assert await consumers.can_register("billing") is False

    @pytest.mark.asyncio
    async def test_get_unknown_raises(self, consumers: ConsumerRegistry) -> None:
        with pytest.raises(ConsumerNotFoundError):
            await consumers.get("nobody")


class TestCursorAdvancer:
    @pytest.mark.asyncio
    async def test_commit_moves_cursor(
        self,
        consumers: ConsumerRegistry,
        consumer_store: InMemoryOutboxConsumerStore,
    ) -> None:
        await consumers.register("billing")

        await CursorAdvancer(consumer_store).commit("billing", 7)

        assert (await consumers.get("billing")).last_consumed_message_id == 7

    @pytest.mark.asyncio
    async def test_commit_is_idempotent(
        self,
        consumers: ConsumerRegistry,
        consumer_store: InMemoryOutboxConsumerStore,
    ) -> None:
        await consumers.register("billing")
        advancer = CursorAdvancer(consumer_store)

        await advancer.commit("billing", 4)
        await advancer.commit("billing", 4)

        assert (await consumers.get("billing")).last_consumed_message_id == 4

    @pytest.mark.asyncio
    async def test_cursors_are_independent(
        self,
        consumers: ConsumerRegistry,
        consumer_store: InMemoryOutboxConsumerStore,
    ) -> None:
        await consumers.register("billing")
        await consumers.register("shipping")

        await CursorAdvancer(consumer_store).commit("billing", 5)

        assert (await consumers.get("billing")).last_consumed_message_id == 5
        assert (await consumers.get("shipping")).last_consumed_message_id == 0

    @pytest.mark.asyncio
    async def test_commit_unknown_consumer(
        self, consumer_store: InMemoryOutboxConsumerStore
    ) -> None:
        with pytest.raises(ConsumerNotFoundError):
            await CursorAdvancer(consumer_store).commit("nobody", 1)

    @pytest.mark.asyncio
    async def test_negative_id_rejected(
        self,
        consumers: ConsumerRegistry,
        consumer_store: InMemoryOutboxConsumerStore,
    ) -> None:
        await consumers.register("billing")

        with pytest.raises(ValidationError):
            await CursorAdvancer(consumer_store).commit("billing", -1)

    @pytest.mark.asyncio
    async def test_regression_is_allowed_and_logged_by_default(
        self,
        consumers: ConsumerRegistry,
        consumer_store: InMemoryOutboxConsumerStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        await consumers.register("billing")
        advancer = CursorAdvancer(consumer_store)
        await advancer.commit("billing", 10)

        with caplog.at_level(logging.WARNING, logger="cqrs_ddd.outbox.consumers"):
            await advancer.commit("billing", 3)

        assert (await consumers.get("billing")).last_consumed_message_id == 3
        assert "moved back from 10 to 3" in caplog.text

    @pytest.mark.asyncio
    async def test_regression_rejected_when_configured(
        self,
        consumers: ConsumerRegistry,
        consumer_store: InMemoryOutboxConsumerStore,
    ) -> None:
        await consumers.register("billing")
        advancer = CursorAdvancer(consumer_store, reject_regression=True)
        await advancer.commit("billing", 10)

        with pytest.raises(CursorRegressionError):
            await advancer.commit("billing", 3)

        assert (await consumers.get("billing")).last_consumed_message_id == 10

    @pytest.mark.asyncio
    async def test_commit_past_max_id_is_accepted(
        self,
        consumers: ConsumerRegistry,
        consumer_store: InMemoryOutboxConsumerStore,
    ) -> None:
        await consumers.register("billing")

        await CursorAdvancer(consumer_store).commit("billing", 999)

        assert (await consumers.get("billing")).last_consumed_message_id == 999
