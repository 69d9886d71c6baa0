"""Tests for request contracts and the exception hierarchy."""

from __future__ import annotations

import pytest

from cqrs_ddd_outbox import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    CommitConsumed,
    ConflictError,
    ConsumerAlreadyExistsError,
    ConsumerNotFoundError,
    CreateMessage,
    CursorRegressionError,
    GetMessages,
    MessageTypeNotConfiguredError,
    NotFoundError,
    OutboxError,
    RegisterConsumer,
    ValidationError,
)
from cqrs_ddd_outbox.contracts import validate_request


class TestRegisterConsumer:
    @pytest.mark.parametrize("name", ["abc", "x" * 100, "billing-service"])
    def test_valid_names(self, name: str) -> None:
        request = validate_request(RegisterConsumer, consumer_name=name)
        assert request.consumer_name == name
        assert request.consume_from_last_message is False

    @pytest.mark.parametrize("name", ["", "ab", "   ", "\t \n", "x" * 101])
    def test_invalid_names(self, name: str) -> None:
        with pytest.raises(ValidationError) as exc:
            validate_request(RegisterConsumer, consumer_name=name)
        assert "consumer_name" in exc.value.errors


class TestGetMessages:
    @pytest.mark.parametrize("limit", [0, -1, -500])
    def test_non_positive_limit_defaults(self, limit: int) -> None:
        request = validate_request(GetMessages, consumer_name="abc", limit=limit)
        assert request.limit == DEFAULT_LIMIT

    def test_limit_bounds(self) -> None:
        assert validate_request(GetMessages, consumer_name="abc", limit=1).limit == 1
        assert (
            validate_request(GetMessages, consumer_name="abc", limit=MAX_LIMIT).limit
            == MAX_LIMIT
        )
        with pytest.raises(ValidationError) as exc:
            validate_request(GetMessages, consumer_name="abc", limit=MAX_LIMIT + 1)
        assert "limit" in exc.value.errors

    def test_default_limit(self) -> None:
        assert validate_request(GetMessages, consumer_name="abc").limit == 10


class TestCommitConsumed:
    def test_zero_is_allowed(self) -> None:
        request = validate_request(
            CommitConsumed, consumer_name="abc", last_consumed_message_id=0
        )
        assert request.last_consumed_message_id == 0

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc:
            validate_request(
                CommitConsumed, consumer_name="abc", last_consumed_message_id=-1
            )
        assert "last_consumed_message_id" in exc.value.errors


class TestCreateMessage:
    def test_valid(self) -> None:
        request = validate_request(
            CreateMessage,
            message_type="order.placed",
            version_type=1,
            key=None,
            payload="{}",
        )
        assert request.key is None

    @pytest.mark.parametrize(
        ("field", "value"),
        [("message_type", ""), ("version_type", 0), ("payload", ""), ("key", "")],
    )
    def test_invalid_fields(self, field: str, value: object) -> None:
        data: dict[str, object] = {
            "message_type": "order.placed",
            "version_type": 1,
            "key": "k",
            "payload": "{}",
        }
        data[field] = value
        with pytest.raises(ValidationError) as exc:
            validate_request(CreateMessage, **data)
        assert field in exc.value.errors


class TestExceptions:
    def test_hierarchy(self) -> None:
        assert issubclass(ValidationError, OutboxError)
        assert issubclass(ConsumerNotFoundError, NotFoundError)
        assert issubclass(ConsumerAlreadyExistsError, ConflictError)
        assert issubclass(CursorRegressionError, ConflictError)
        assert issubclass(MessageTypeNotConfiguredError, OutboxError)

    def test_validation_error_normalizes_input(self) -> None:
        assert ValidationError("bad").errors == {"__root__": ["bad"]}
        assert ValidationError().errors == {}
        assert ValidationError({"limit": ["too big"]}).errors == {"limit": ["too big"]}

    def test_consumer_errors_carry_the_name(self) -> None:
        assert ConsumerNotFoundError("billing").consumer_name == "billing"
        assert "billing" in str(ConsumerAlreadyExistsError("billing"))

    def test_cursor_regression_details(self) -> None:
        exc = CursorRegressionError("billing", 10, 4)
        assert (exc.current, exc.requested) == (10, 4)
