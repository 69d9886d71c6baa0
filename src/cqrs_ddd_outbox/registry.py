"""TypeRegistry: maps logical message types to payload classes and serialization."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter

from .primitives.exceptions import MessageTypeNotConfiguredError, TypeRegistrationError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("cqrs_ddd.outbox.registry")


@dataclass(frozen=True)
class SerializationOptions:
    """Options passed to pydantic when dumping a payload to JSON."""

    by_alias: bool = True
    exclude_none: bool = False
    exclude_defaults: bool = False


@dataclass(frozen=True)
class TypeMetadata:
    """Serialization metadata of one payload type stored in the outbox.

    Attributes:
        type_name: Logical name persisted as ``message_type``.
        version: Payload version persisted as ``version_type``.
        payload_type: Concrete class of the payload (pydantic model,
            dataclass, TypedDict, anything ``TypeAdapter`` accepts).
        options: Serialization options for this type.
        key_selector: Optional callable extracting the message key
            from a payload.
    """

    type_name: str
    version: int
    payload_type: type[Any]
    options: SerializationOptions
    key_selector: Callable[[Any], str | None] | None = None
    _adapter: TypeAdapter[Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_adapter", TypeAdapter(self.payload_type))

    def serialize(self, payload: Any) -> str:
        """Dump *payload* to a JSON string."""
        return self._adapter.dump_json(
            payload,
            by_alias=self.options.by_alias,
            exclude_none=self.options.exclude_none,
            exclude_defaults=self.options.exclude_defaults,
        ).decode()

    def deserialize(self, data: str | bytes) -> Any:
        """Rebuild a payload instance from its JSON form."""
        return self._adapter.validate_json(data)

    def key_for(self, payload: Any) -> str | None:
        if self.key_selector is None:
            return None
        return self.key_selector(payload)


class TypeRegistry:
    """Registry of the payload types the outbox can write and dispatch.

    Populated once at start-up, then frozen: the writer and the dispatcher
    freeze the registry they are constructed with. Every entry is unique by
    ``(type_name, version)`` and by payload type.

    Usage::

        registry = TypeRegistry()
        registry.register("order.placed", 1, OrderPlaced)
        registry.add_message_type(OrderCancelled, "order.cancelled")

        writer = OutboxWriter(registry, message_store)
    """

    def __init__(self, default_options: SerializationOptions | None = None) -> None:
        self.default_options = default_options or SerializationOptions()
        self._by_name: dict[tuple[str, int], TypeMetadata] = {}
        self._by_type: dict[type[Any], TypeMetadata] = {}
        self._frozen = False

    # ── Registration ─────────────────────────────────────────────

    def register(
        self,
        name: str,
        version: int,
        payload_type: type[Any],
        options: SerializationOptions | None = None,
        *,
        key_selector: Callable[[Any], str | None] | None = None,
    ) -> TypeMetadata:
        """Register *payload_type* under ``(name, version)``."""
        if self._frozen:
            raise TypeRegistrationError(
                f"Cannot register {payload_type.__name__}: the type registry is frozen"
            )
        if not name:
            raise TypeRegistrationError("Message type name must not be empty")
        if version < 1:
            raise TypeRegistrationError(
                f"Version of {name!r} must be >= 1, got {version}"
            )

        existing = self._by_name.get((name, version))
        if existing is not None:
            raise TypeRegistrationError(
                f"Duplicate message type {name!r} version {version}: "
                f"already mapped to {existing.payload_type.__name__}"
            )
        existing = self._by_type.get(payload_type)
        if existing is not None:
            raise TypeRegistrationError(
                f"Duplicate payload type {payload_type.__name__}: already registered "
                f"as {existing.type_name!r} version {existing.version}"
            )

        metadata = TypeMetadata(
            type_name=name,
            version=version,
            payload_type=payload_type,
            options=options or self.default_options,
            key_selector=key_selector,
        )
        self._by_name[(name, version)] = metadata
        self._by_type[payload_type] = metadata
        logger.debug(
            "Registered outbox type %s v%d -> %s", name, version, payload_type.__name__
        )
        return metadata

    def add_message_type(
        self,
        payload_type: type[Any],
        name: str,
        options: SerializationOptions | None = None,
    ) -> TypeRegistry:
        """Register *payload_type* as version 1 of *name*; chainable."""
        self.register(name, 1, payload_type, options)
        return self

    def freeze(self) -> None:
        """Forbid any further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ── Resolution ───────────────────────────────────────────────

    def resolve_by_name(self, name: str, version: int) -> TypeMetadata:
        metadata = self._by_name.get((name, version))
        if metadata is None:
            raise MessageTypeNotConfiguredError(name, version)
        return metadata

    def resolve_by_type(self, payload_type: type[Any]) -> TypeMetadata:
        metadata = self._by_type.get(payload_type)
        if metadata is None:
            raise MessageTypeNotConfiguredError(payload_type)
        return metadata

    def try_resolve_by_type(self, payload_type: type[Any]) -> TypeMetadata | None:
        return self._by_type.get(payload_type)

    def list_registered(self) -> list[tuple[str, int]]:
        """Return all registered ``(type_name, version)`` pairs."""
        return list(self._by_name.keys())

    def __contains__(self, payload_type: object) -> bool:
        return payload_type in self._by_type

    def __len__(self) -> int:
        return len(self._by_type)
