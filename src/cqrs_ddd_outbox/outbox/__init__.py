"""Outbox operations: write, track, register, fetch, commit, dispatch."""

from __future__ import annotations

from .consumers import ConsumerRegistry, CursorAdvancer
from .dispatcher import MessageDispatcher, MessageObserver
from .processor import OutboxProcessor
from .retriever import MessageRetriever
from .tracker import OutboxTracker
from .writer import OutboxWriter

__all__ = [
    "ConsumerRegistry",
    "CursorAdvancer",
    "MessageDispatcher",
    "MessageObserver",
    "MessageRetriever",
    "OutboxProcessor",
    "OutboxTracker",
    "OutboxWriter",
]
