"""SQLAlchemy unit of work."""

import logfire
from sqlalchemy.ext.asyncio import AsyncSession

from kin.domain.repository import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Commits or rolls back the request session around a block of writes.

    Repositories share the same request-scoped session, so every statement
    they issue inside the block belongs to one database transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize unit of work.

        Args:
            session: Request-scoped SQLAlchemy async session
        """
        self.session = session

    async def begin(self) -> None:
        # The session autobegins on its first statement
        pass

    async def commit(self) -> None:
        await self.session.commit()
        logfire.debug("Unit of work committed")

    async def rollback(self) -> None:
        await self.session.rollback()
        logfire.info("Unit of work rolled back")
