"""Shared in-memory store and unit of work for testing."""

import asyncio
from typing import Any

from kin.domain.repository import UnitOfWork


class InMemoryDatabase:
    """Tables shared by the in-memory repositories of one container scope.

    Each table is a dict keyed by entity ID holding immutable models, so a
    shallow copy of every dict is a complete snapshot.
    """

    TABLES = (
        "users",
        "families",
        "memberships",
        "invites",
        "family_invites",
        "verification_tokens",
        "channels",
    )

    def __init__(self) -> None:
        self.users: dict[Any, Any] = {}
        self.families: dict[Any, Any] = {}
        self.memberships: dict[Any, Any] = {}
        self.invites: dict[Any, Any] = {}
        self.family_invites: dict[Any, Any] = {}
        self.verification_tokens: dict[Any, Any] = {}
        self.channels: dict[Any, Any] = {}
        self.lock = asyncio.Lock()

    def snapshot(self) -> dict[str, dict[Any, Any]]:
        return {name: dict(getattr(self, name)) for name in self.TABLES}

    def restore(self, snapshot: dict[str, dict[Any, Any]]) -> None:
        for name, rows in snapshot.items():
            setattr(self, name, dict(rows))


class InMemoryUnitOfWork(UnitOfWork):
    """Serializes units of work and restores a snapshot on rollback."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db
        self._snapshot: dict[str, dict[Any, Any]] | None = None

    async def begin(self) -> None:
        await self.db.lock.acquire()
        self._snapshot = self.db.snapshot()

    async def commit(self) -> None:
        self._snapshot = None
        self.db.lock.release()

    async def rollback(self) -> None:
        if self._snapshot is not None:
            self.db.restore(self._snapshot)
        self._snapshot = None
        self.db.lock.release()
