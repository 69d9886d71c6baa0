"""MessageDispatcher: routes outbox messages to their observers."""

from __future__ import annotations

import logging
from inspect import isawaitable
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, TypeVar

from ..instrumentation import DISPATCH, OBSERVER, get_hook_registry, operation_name

if TYPE_CHECKING:
    from collections.abc import Awaitable, Iterable

    from ..ports.outbox import OutboxMessage
    from ..registry import TypeMetadata, TypeRegistry

logger = logging.getLogger("cqrs_ddd.outbox.dispatcher")

M_contra = TypeVar("M_contra", contravariant=True)


class MessageObserverProtocol(Protocol[M_contra]):
    """Object observing messages of one payload type read from the outbox."""

    def handle(self, message: M_contra) -> Awaitable[None] | None: ...


class MessageObserverCallable(Protocol[M_contra]):
    def __call__(self, message: M_contra) -> Awaitable[None] | None: ...


MessageObserver: TypeAlias = "MessageObserverCallable[Any] | MessageObserverProtocol[Any]"


class MessageDispatcher:
    """Deserializes outbox messages and hands them to subscribed observers.

    Observers are bound to a concrete payload type at configuration time.
    For each message the dispatcher resolves its ``(message_type,
    version_type)`` in the type registry, rebuilds the payload and awaits
    every observer of that payload type one after the other.

    There is no partial-success bookkeeping: the first failing observer
    aborts the batch and its exception propagates. Nothing here moves a
    consumer cursor.

    Constructing a dispatcher freezes the type registry.
    """

    def __init__(self, registry: TypeRegistry) -> None:
        registry.freeze()
        self._registry = registry
        self._observers: dict[type[Any], list[MessageObserver]] = {}

    # ── Registration ─────────────────────────────────────────────

    def subscribe(self, payload_type: type[Any], observer: MessageObserver) -> None:
        """Subscribe *observer* to messages whose payload is *payload_type*.

        Raises:
            MessageTypeNotConfiguredError: *payload_type* is not registered.
        """
        self._registry.resolve_by_type(payload_type)
        observers = self._observers.setdefault(payload_type, [])
        if observer not in observers:
            observers.append(observer)

    def observers_for(self, payload_type: type[Any]) -> list[MessageObserver]:
        return list(self._observers.get(payload_type, []))

    # ── Dispatching ──────────────────────────────────────────────

    async def dispatch_batch(self, messages: Iterable[OutboxMessage]) -> None:
        """Dispatch *messages* in order.

        Raises:
            MessageTypeNotConfiguredError: a message's type/version is not
                registered.
            Exception: whatever the first failing observer raised.
        """
        for message in messages:
            await self.dispatch(message)

    async def dispatch(self, message: OutboxMessage) -> None:
        metadata = self._registry.resolve_by_name(
            message.message_type, message.version_type
        )
        payload = metadata.deserialize(message.payload)
        observers = self._observers.get(metadata.payload_type, [])
        if not observers:
            logger.debug(
                "No observer for outbox message %s (%s)",
                message.id,
                metadata.type_name,
            )
            return

        attributes: dict[str, object] = {
            "message_type": metadata.type_name,
            "version": metadata.version,
            "message_id": message.id,
        }

        async def _notify_all() -> None:
            for observer in list(observers):
                await self._notify(observer, payload, metadata, attributes)

        await get_hook_registry().execute_all(
            operation_name(DISPATCH, metadata.type_name), attributes, _notify_all
        )

    async def _notify(
        self,
        observer: MessageObserver,
        payload: Any,
        metadata: TypeMetadata,
        attributes: dict[str, object],
    ) -> None:
        observer_name = getattr(observer, "__name__", type(observer).__name__)

        async def _invoke() -> None:
            try:
                if hasattr(observer, "handle"):
                    result = observer.handle(payload)
                elif callable(observer):
                    result = observer(payload)
                else:
                    raise TypeError(
                        "Observer must be a callable or have a handle() method"
                    )
                if isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Observer %s failed for outbox message %s (%s)",
                    observer_name,
                    attributes.get("message_id"),
                    metadata.type_name,
                )
                raise

        await get_hook_registry().execute_all(
            operation_name(OBSERVER, metadata.type_name, observer_name),
            {"observer": observer_name, **attributes},
            _invoke,
        )

    # ── Introspection ────────────────────────────────────────────

    def clear(self) -> None:
        """Remove all subscriptions (testing utility)."""
        self._observers.clear()
