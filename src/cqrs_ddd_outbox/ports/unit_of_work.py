"""UnitOfWork: abstract transaction boundary with explicit transaction hooks."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger("cqrs_ddd.outbox.uow")

_current_uow: ContextVar[UnitOfWork | None] = ContextVar("current_uow", default=None)


def get_current_uow() -> UnitOfWork | None:
    """Return the active UoW (or *None* outside any ``async with uow`` block)."""
    return _current_uow.get()


@runtime_checkable
class ITransactionHook(Protocol):
    """Participant in a unit of work's lifecycle.

    The unit of work calls these synchronously with its own lifecycle:
    ``entity_tracked`` for every entity handed to :meth:`UnitOfWork.track`,
    ``before_commit`` right before the final commit (still inside the
    transaction), then either ``after_commit`` or ``after_rollback``.
    """

    def entity_tracked(self, entity: object) -> None: ...

    async def before_commit(self, uow: UnitOfWork) -> None: ...

    async def after_commit(self, uow: UnitOfWork) -> None: ...

    async def after_rollback(self, uow: UnitOfWork) -> None: ...


class UnitOfWork(ABC):
    """
    Abstract base class for Unit of Work implementations.

    Lifecycle on a clean ``async with`` exit:

    1. ``before_commit`` of every registered :class:`ITransactionHook`
       (writes still join the open transaction)
    2. :meth:`commit`
    3. ``after_commit`` hooks, then the ``on_commit`` callbacks; a failure
       in either is logged and the remaining ones still run

    If the block raises, or a ``before_commit`` hook or the commit itself
    fails, the transaction is rolled back, ``after_rollback`` hooks run,
    pending ``on_commit`` callbacks are discarded and the error propagates.

    Example:
        ```python
        class SQLAlchemyUnitOfWork(UnitOfWork):
            def __init__(self, session):
                super().__init__()
                self._session = session

            async def commit(self):
                await self._session.commit()

            async def rollback(self):
                await self._session.rollback()
        ```
    """

    def __init__(self) -> None:
        self._on_commit_hooks: deque[Callable[[], Awaitable[Any]]] = deque()
        self._transaction_hooks: list[ITransactionHook] = []
        self._token: Token[UnitOfWork | None] | None = None

    # ── Hooks ────────────────────────────────────────────────────

    def add_hook(self, hook: ITransactionHook) -> None:
        """Register a transaction hook. Adding the same hook twice is a no-op."""
        if hook not in self._transaction_hooks:
            self._transaction_hooks.append(hook)

    @property
    def hooks(self) -> list[ITransactionHook]:
        return list(self._transaction_hooks)

    def track(self, entity: object) -> None:
        """Announce an entity taking part in this unit of work to every hook."""
        for hook in self._transaction_hooks:
            hook.entity_tracked(entity)

    def on_commit(self, callback: Callable[[], Awaitable[Any]]) -> None:
        """Register an async callback to be executed after a successful commit."""
        self._on_commit_hooks.append(callback)

    async def trigger_commit_hooks(self) -> None:
        """Execute all registered on_commit callbacks.

        The transaction is already committed; a failing callback is logged
        and does not stop the remaining ones.
        """
        while self._on_commit_hooks:
            callback = self._on_commit_hooks.popleft()
            try:
                await callback()
            except Exception as exc:
                logger.error("Error in on_commit hook: %s", exc, exc_info=True)

    # ── Transaction control ──────────────────────────────────────

    @abstractmethod
    async def commit(self) -> None:
        """Commit the transaction. Must be implemented by subclasses."""
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """Rollback the transaction. Must be implemented by subclasses."""
        ...

    async def complete(self) -> None:
        """Run pre-commit hooks, commit, then post-commit hooks."""
        try:
            for hook in list(self._transaction_hooks):
                await hook.before_commit(self)
            await self.commit()
        except BaseException:
            await self.abort()
            raise

        # Committed: post-commit failures are logged, never raised.
        for hook in list(self._transaction_hooks):
            try:
                await hook.after_commit(self)
            except Exception as exc:
                logger.error("Error in after_commit hook: %s", exc, exc_info=True)
        await self.trigger_commit_hooks()

    async def abort(self) -> None:
        """Roll back and notify hooks; pending on_commit callbacks are dropped."""
        self._on_commit_hooks.clear()
        try:
            await self.rollback()
        finally:
            for hook in list(self._transaction_hooks):
                await hook.after_rollback(self)

    async def __aenter__(self) -> UnitOfWork:
        self._token = _current_uow.set(self)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if exc_type is None:
                await self.complete()
            else:
                await self.abort()
        finally:
            if self._token is not None:
                _current_uow.reset(self._token)
                self._token = None
