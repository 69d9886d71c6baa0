"""
SQLAlchemy implementations of the outbox message log and consumer cursors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from cqrs_ddd_outbox.ports.outbox import (
    IOutboxConsumerStore,
    IOutboxMessageStore,
    OutboxConsumer,
    OutboxMessage,
)
from cqrs_ddd_outbox.primitives.exceptions import (
    ConsumerAlreadyExistsError,
    ConsumerNotFoundError,
)

from .exceptions import SessionManagementError
from .models import OutboxConsumerModel, OutboxMessageModel

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql import Select

    from cqrs_ddd_outbox.ports.unit_of_work import UnitOfWork

    AsyncSessionFactory = Callable[[], Any]


def _session_of(uow: UnitOfWork | None) -> AsyncSession | None:
    if uow is None:
        return None
    session = getattr(uow, "session", None)
    if session is None:
        raise SessionManagementError(
            f"{type(uow).__name__} does not expose an AsyncSession; "
            "outbox writes need a SQLAlchemyUnitOfWork to share its transaction"
        )
    return session


def _to_message(model: OutboxMessageModel) -> OutboxMessage:
    return OutboxMessage(
        id=model.id,
        created_at=model.created_at,
        message_type=model.message_type,
        version_type=model.version_type,
        key=model.key,
        payload=model.payload,
    )


class SQLAlchemyOutboxMessageStore(IOutboxMessageStore):
    """
    Outbox log stored in the ``outbox_messages`` table.

    ``append`` adds the rows to the unit of work's session, so they are
    inserted and committed (or discarded) with the business changes. Reads
    run in the unit of work's session when one is given, otherwise in a
    short-lived session from *session_factory*.
    """

    def __init__(self, session_factory: AsyncSessionFactory) -> None:
        self._session_factory = session_factory

    async def append(
        self,
        messages: list[OutboxMessage],
        uow: UnitOfWork | None = None,
    ) -> None:
        models = [
            OutboxMessageModel(
                created_at=msg.created_at,
                message_type=msg.message_type,
                version_type=msg.version_type,
                key=msg.key,
                payload=msg.payload,
            )
            for msg in messages
        ]
        session = _session_of(uow)
        if session is not None:
            session.add_all(models)
            return
        async with self._session_factory() as own_session:
            own_session.add_all(models)
            await own_session.commit()

    async def get_after(
        self,
        last_id: int,
        limit: int,
        uow: UnitOfWork | None = None,
    ) -> list[OutboxMessage]:
        stmt = (
            select(OutboxMessageModel)
            .where(OutboxMessageModel.id > last_id)
            .order_by(OutboxMessageModel.id)
            .limit(limit)
        )
        return await self._fetch(stmt, uow)

    async def get_by_type(
        self,
        message_type: str,
        version_type: int,
        uow: UnitOfWork | None = None,
    ) -> list[OutboxMessage]:
        stmt = (
            select(OutboxMessageModel)
            .where(
                OutboxMessageModel.message_type == message_type,
                OutboxMessageModel.version_type == version_type,
            )
            .order_by(OutboxMessageModel.id)
        )
        return await self._fetch(stmt, uow)

    async def max_id(self, uow: UnitOfWork | None = None) -> int:
        stmt = select(func.coalesce(func.max(OutboxMessageModel.id), 0))
        session = _session_of(uow)
        if session is not None:
            return int((await session.execute(stmt)).scalar_one())
        async with self._session_factory() as own_session:
            return int((await own_session.execute(stmt)).scalar_one())

    async def _fetch(
        self, stmt: Select[Any], uow: UnitOfWork | None
    ) -> list[OutboxMessage]:
        session = _session_of(uow)
        if session is not None:
            result = await session.execute(stmt)
            return [_to_message(m) for m in result.scalars().all()]
        async with self._session_factory() as own_session:
            result = await own_session.execute(stmt)
            return [_to_message(m) for m in result.scalars().all()]


class SQLAlchemyOutboxConsumerStore(IOutboxConsumerStore):
    """
    Consumer cursors stored in the ``outbox_consumers`` table.

    Every call runs and commits in its own session: registering a consumer
    or committing a cursor is independent of any business transaction. The
    unique index on ``name`` settles concurrent registrations.
    """

    def __init__(self, session_factory: AsyncSessionFactory) -> None:
        self._session_factory = session_factory

    async def get(self, name: str) -> OutboxConsumer | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(OutboxConsumerModel).where(OutboxConsumerModel.name == name)
            )
            model = result.scalar_one_or_none()
            if model is None:
                return None
            return OutboxConsumer(
                id=model.id,
                name=model.name,
                last_consumed_message_id=model.last_consumed_message_id,
            )

    async def add(self, consumer: OutboxConsumer) -> None:
        async with self._session_factory() as session:
            session.add(
                OutboxConsumerModel(
                    id=consumer.id,
                    name=consumer.name,
                    last_consumed_message_id=consumer.last_consumed_message_id,
                )
            )
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise ConsumerAlreadyExistsError(consumer.name) from exc

    async def save_cursor(self, name: str, last_consumed_message_id: int) -> None:
        async with self._session_factory() as session:
            result = await session.execute(
                update(OutboxConsumerModel)
                .where(OutboxConsumerModel.name == name)
                .values(last_consumed_message_id=last_consumed_message_id)
            )
            if result.rowcount == 0:
                await session.rollback()
                raise ConsumerNotFoundError(name)
            await session.commit()
