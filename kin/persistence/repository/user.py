"""PostgreSQL implementation of User repository."""

from typing import Optional

from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from kin.domain.error import ConflictError
from kin.domain.model import User
from kin.domain.repository import UserRepository
from kin.domain.value import UserId
from kin.persistence.mappers import row_to_user, user_to_dict
from kin.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_active_by_email(self, email: str) -> Optional[User]:
        """Find a live user by email.

        Uses the partial unique index on lower(email).
        """
        stmt = select(users_table).where(
            and_(
                func.lower(users_table.c.email) == email.strip().lower(),
                users_table.c.deleted_at.is_(None),
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_ids(self, user_ids: list[UserId]) -> list[User]:
        if not user_ids:
            return []
        stmt = select(users_table).where(users_table.c.id.in_(user_ids))
        result = await self.session.execute(stmt)
        return [row_to_user(dict(row)) for row in result.mappings().all()]

    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Raises:
            ConflictError: If another live account uses the email
        """
        user_dict = user_to_dict(user)

        existing = await self.find_by_id(user.id)

        try:
            if existing:
                stmt = (
                    update(users_table)
                    .where(users_table.c.id == user.id)
                    .values(**user_dict)
                )
            else:
                stmt = insert(users_table).values(**user_dict)
            await self.session.execute(stmt)
            await self.session.flush()
        except IntegrityError:
            raise ConflictError("Email already registered")

        return user
