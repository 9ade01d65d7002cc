"""PostgreSQL implementation of VerificationToken repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from kin.domain.model import EmailVerificationToken
from kin.domain.repository import VerificationTokenRepository
from kin.domain.value import UserId, VerificationTokenId
from kin.persistence.mappers import (
    row_to_verification_token,
    verification_token_to_dict,
)
from kin.persistence.tables import email_verification_tokens_table

tokens = email_verification_tokens_table


class PostgresVerificationTokenRepository(VerificationTokenRepository):
    """PostgreSQL implementation of VerificationTokenRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_hash(self, token_hash: str) -> Optional[EmailVerificationToken]:
        stmt = select(tokens).where(tokens.c.token_hash == token_hash)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_verification_token(dict(row)) if row else None

    async def save(self, token: EmailVerificationToken) -> EmailVerificationToken:
        stmt = insert(tokens).values(**verification_token_to_dict(token))
        await self.session.execute(stmt)
        await self.session.flush()
        return token

    async def mark_used(self, token_id: VerificationTokenId, at: datetime) -> bool:
        stmt = (
            update(tokens)
            .where(and_(tokens.c.id == token_id, tokens.c.used_at.is_(None)))
            .values(used_at=at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def invalidate_unused_for_user(self, user_id: UserId, at: datetime) -> int:
        stmt = (
            update(tokens)
            .where(and_(tokens.c.user_id == user_id, tokens.c.used_at.is_(None)))
            .values(used_at=at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
