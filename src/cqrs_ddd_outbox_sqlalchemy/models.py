"""Declarative models of the outbox tables."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base holding the outbox tables' metadata."""


class OutboxMessageModel(Base):
    """Row of the append-only outbox log."""

    __tablename__ = "outbox_messages"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    message_type: Mapped[str] = mapped_column(String(100), nullable=False)
    version_type: Mapped[int] = mapped_column(Integer, nullable=False)
    key: Mapped[str | None] = mapped_column(String, nullable=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("ix_outbox_messages_type_version", "message_type", "version_type"),
    )


class OutboxConsumerModel(Base):
    """Row holding one consumer's cursor."""

    __tablename__ = "outbox_consumers"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_consumed_message_id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), default=0, nullable=False
    )

    __table_args__ = (Index("ux_outbox_consumers_name", "name", unique=True),)
