"""Unit of work interface."""

from abc import ABC, abstractmethod
from types import TracebackType


class UnitOfWork(ABC):
    """Transaction boundary for multi-row writes.

    Used as an async context manager: every repository write made inside the
    block is committed on clean exit and rolled back if the block raises.

    Usage:
        async with uow:
            await user_repository.save(user)
            await membership_repository.save(membership)
    """

    async def __aenter__(self) -> "UnitOfWork":
        await self.begin()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()
        return False

    @abstractmethod
    async def begin(self) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass
