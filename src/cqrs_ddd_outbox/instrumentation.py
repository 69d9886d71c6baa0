"""Instrumentation hooks around outbox writes and deliveries.

A hook is an async wrapper ``(operation, attributes, next_handler)`` that
must await ``next_handler()`` and return its result. The outbox emits:

- ``outbox.write.<message_type>`` and ``outbox.write.batch``
- ``outbox.dispatch.<message_type>``
- ``outbox.observer.<message_type>.<observer>``

Attributes always carry the logical ``message_type`` when there is one, so
hooks can be scoped to message types as well as operation patterns.
"""

from __future__ import annotations

import fnmatch
import functools
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

WRITE = "outbox.write"
DISPATCH = "outbox.dispatch"
OBSERVER = "outbox.observer"


def operation_name(kind: str, *parts: str) -> str:
    """Join an operation kind and its qualifiers: ``outbox.write.order.placed``."""
    return ".".join((kind, *parts))


@runtime_checkable
class InstrumentationHook(Protocol):
    """Protocol for instrumentation hooks (tracing, metrics, etc.)."""

    async def __call__(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Awaitable[Any]],
    ) -> Any: ...


class HookRegistration:
    """A hook plus the operations and message types it applies to.

    Empty ``operations`` or ``message_types`` mean "any". Operations are
    fnmatch patterns; message types are logical names compared with the
    ``message_type`` attribute.
    """

    def __init__(
        self,
        hook: InstrumentationHook,
        *,
        priority: int = 0,
        operations: list[str] | None = None,
        message_types: list[str] | None = None,
        enabled: bool = True,
    ) -> None:
        self.hook = hook
        self.priority = priority
        self.operations = tuple(operations or ())
        self.message_types = frozenset(message_types or ())
        self.enabled = enabled

    def matches(self, operation: str, attributes: dict[str, Any]) -> bool:
        if not self.enabled:
            return False
        if self.operations and not any(
            fnmatch.fnmatchcase(operation, p) for p in self.operations
        ):
            return False
        if self.message_types:
            return attributes.get("message_type") in self.message_types
        return True


class HookRegistry:
    """Priority-ordered hooks; lower priorities wrap outermost."""

    def __init__(self) -> None:
        self._registrations: list[HookRegistration] = []

    def register(
        self,
        hook: InstrumentationHook,
        *,
        priority: int = 0,
        operations: list[str] | None = None,
        message_types: list[str] | None = None,
        enabled: bool = True,
    ) -> HookRegistration:
        registration = HookRegistration(
            hook,
            priority=priority,
            operations=operations,
            message_types=message_types,
            enabled=enabled,
        )
        self._registrations.append(registration)
        # Stable sort keeps registration order within a priority.
        self._registrations.sort(key=lambda r: r.priority)
        return registration

    def unregister(self, registration: HookRegistration) -> None:
        if registration in self._registrations:
            self._registrations.remove(registration)

    async def execute_all(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Run *next_handler* inside every hook matching *operation*."""
        handler = next_handler
        for registration in reversed(self._registrations):
            if registration.matches(operation, attributes):
                handler = functools.partial(
                    registration.hook, operation, attributes, handler
                )
        return await handler()

    def clear(self) -> None:
        self._registrations.clear()

    def __len__(self) -> int:
        return len(self._registrations)


_hook_registry_var: ContextVar[HookRegistry | None] = ContextVar(
    "outbox_hook_registry", default=None
)


def get_hook_registry() -> HookRegistry:
    """Return the registry of the current context, creating it on first use."""
    registry = _hook_registry_var.get()
    if registry is None:
        registry = HookRegistry()
        _hook_registry_var.set(registry)
    return registry


def set_hook_registry(registry: HookRegistry) -> None:
    _hook_registry_var.set(registry)
