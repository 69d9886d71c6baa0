"""Unit of work for tests and in-process wiring."""

from __future__ import annotations

from typing import Literal

from ...ports.unit_of_work import UnitOfWork

Outcome = Literal["committed", "rolled_back"]


class InMemoryUnitOfWork(UnitOfWork):
    """Unit of work with no backing transaction.

    The in-memory outbox store stages its rows as ``on_commit`` callbacks,
    which is all the atomicity this needs. The first commit or rollback
    settles :attr:`outcome`; later calls are ignored but still counted in
    :attr:`history`.
    """

    def __init__(self) -> None:
        super().__init__()
        self.outcome: Outcome | None = None
        self.history: list[str] = []

    @property
    def committed(self) -> bool:
        return self.outcome == "committed"

    @property
    def rolled_back(self) -> bool:
        return self.outcome == "rolled_back"

    @property
    def commit_count(self) -> int:
        return self.history.count("commit")

    @property
    def rollback_count(self) -> int:
        return self.history.count("rollback")

    async def commit(self) -> None:
        self.history.append("commit")
        if self.outcome is None:
            self.outcome = "committed"

    async def rollback(self) -> None:
        self.history.append("rollback")
        if self.outcome is None:
            self.outcome = "rolled_back"
