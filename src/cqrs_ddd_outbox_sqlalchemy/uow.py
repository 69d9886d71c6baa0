"""
Unit of work over a SQLAlchemy ``AsyncSession``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cqrs_ddd_outbox.ports.unit_of_work import UnitOfWork
from cqrs_ddd_outbox.primitives.exceptions import PersistenceError

from .exceptions import SessionManagementError, UnitOfWorkError

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncSession

    AsyncSessionFactory = Callable[[], AsyncSession]

logger = logging.getLogger("cqrs_ddd.outbox.uow")


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    Transaction boundary shared by business writes and outbox rows.

    Rows appended through :class:`SQLAlchemyOutboxMessageStore` with this
    unit of work are added to :attr:`session`, so they are inserted by the
    same commit as the business changes or discarded by the same rollback.

    Either hand over a session the caller owns::

        async with SQLAlchemyUnitOfWork(session=session) as uow:
            ...

    or a factory; the unit of work then opens a session on enter and closes
    it on exit::

        factory = async_sessionmaker(engine, expire_on_commit=False)
        async with SQLAlchemyUnitOfWork(session_factory=factory) as uow:
            ...
    """

    def __init__(
        self,
        session: AsyncSession | None = None,
        session_factory: AsyncSessionFactory | None = None,
    ) -> None:
        if (session is None) == (session_factory is None):
            raise SessionManagementError(
                "Pass exactly one of 'session' or 'session_factory'"
            )
        super().__init__()
        self._session = session
        self._session_factory = session_factory

    @property
    def owns_session(self) -> bool:
        return self._session_factory is not None

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise UnitOfWorkError(
                "No session yet: enter the unit of work with 'async with' first"
            )
        return self._session

    async def __aenter__(self) -> SQLAlchemyUnitOfWork:
        await self._begin()
        await super().__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            await super().__aexit__(exc_type, exc_val, exc_tb)
        finally:
            if self.owns_session:
                await self._release()

    async def commit(self) -> None:
        # A failed commit is rolled back by UnitOfWork.abort().
        try:
            await self.session.commit()
        except Exception as exc:  # noqa: BLE001
            raise UnitOfWorkError(
                f"Commit of outbox transaction failed: {exc}"
            ) from exc

    async def rollback(self) -> None:
        if not self.session.in_transaction():
            return
        try:
            await self.session.rollback()
        except Exception as exc:  # noqa: BLE001
            raise UnitOfWorkError(
                f"Rollback of outbox transaction failed: {exc}"
            ) from exc

    async def _begin(self) -> None:
        try:
            if self._session_factory is not None:
                self._session = self._session_factory()
            if not self.session.in_transaction():
                await self.session.begin()
        except PersistenceError:
            if self.owns_session:
                await self._release()
            raise
        except Exception as exc:  # noqa: BLE001
            if self.owns_session:
                await self._release()
            raise SessionManagementError(
                f"Could not open outbox transaction: {exc}"
            ) from exc

    async def _release(self) -> None:
        session, self._session = self._session, None
        if session is None:
            return
        try:
            await session.close()
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to close session: %s", exc, exc_info=True)
            raise SessionManagementError(f"Could not close session: {exc}") from exc
