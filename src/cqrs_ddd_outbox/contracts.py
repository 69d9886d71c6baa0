"""Request contracts of the outbox operations, validated with pydantic."""

from __future__ import annotations

from typing import Annotated, Any, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from .primitives.exceptions import ValidationError

DEFAULT_LIMIT = 10
MAX_LIMIT = 1000
CONSUMER_NAME_MIN_LENGTH = 3
CONSUMER_NAME_MAX_LENGTH = 100


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


ConsumerName = Annotated[
    str,
    StringConstraints(
        min_length=CONSUMER_NAME_MIN_LENGTH, max_length=CONSUMER_NAME_MAX_LENGTH
    ),
    AfterValidator(_not_blank),
]

C = TypeVar("C", bound=BaseModel)


class _Contract(BaseModel):
    model_config = ConfigDict(frozen=True)


class RegisterConsumer(_Contract):
    """Request to register a consumer for the outbox."""

    consumer_name: ConsumerName
    consume_from_last_message: bool = False


class GetMessages(_Contract):
    """Request to read the next messages of a consumer."""

    consumer_name: ConsumerName
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)

    @field_validator("limit", mode="before")
    @classmethod
    def _default_non_positive_limit(cls, value: Any) -> Any:
        if isinstance(value, int) and value <= 0:
            return DEFAULT_LIMIT
        return value


class CommitConsumed(_Contract):
    """Request to record the last message a consumer processed."""

    consumer_name: str
    last_consumed_message_id: int = Field(ge=0)


class CreateMessage(_Contract):
    """Request to append one serialized message to the outbox."""

    message_type: str = Field(min_length=1)
    version_type: int = Field(ge=1)
    key: str | None = Field(default=None, min_length=1)
    payload: str = Field(min_length=1)


def validate_request(contract: type[C], **data: Any) -> C:
    """Build *contract* from *data*, raising the toolkit's ``ValidationError``.

    Pydantic errors are flattened into ``{field: [messages]}``.
    """
    try:
        return contract.model_validate(data)
    except PydanticValidationError as exc:
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            loc = ".".join(str(p) for p in error.get("loc", ())) or "__root__"
            errors.setdefault(loc, []).append(error.get("msg", "validation error"))
        raise ValidationError(errors) from exc


__all__ = [
    "CONSUMER_NAME_MAX_LENGTH",
    "CONSUMER_NAME_MIN_LENGTH",
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "CommitConsumed",
    "CreateMessage",
    "GetMessages",
    "RegisterConsumer",
    "validate_request",
]
