"""PostgreSQL implementations of the invite repositories."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from kin.domain.error import ConflictError
from kin.domain.model import EmailBoundInvite, EncryptedInvite
from kin.domain.repository import FamilyInviteRepository, InviteRepository
from kin.domain.value import (
    OPEN_INVITE_STATUSES,
    FamilyId,
    FamilyInviteId,
    InviteId,
    InviteStatus,
    UserId,
)
from kin.persistence.mappers import (
    family_invite_to_dict,
    invite_to_dict,
    row_to_family_invite,
    row_to_invite,
)
from kin.persistence.tables import family_invites_table, invites_table

_OPEN_STATUS_VALUES = [status.value for status in OPEN_INVITE_STATUSES]


class PostgresInviteRepository(InviteRepository):
    """PostgreSQL implementation of InviteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, invite_id: InviteId) -> Optional[EncryptedInvite]:
        stmt = select(invites_table).where(invites_table.c.id == invite_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    async def find_by_code(self, invite_code: str) -> Optional[EncryptedInvite]:
        stmt = select(invites_table).where(invites_table.c.invite_code == invite_code)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    async def find_open_for_email(
        self, family_id: FamilyId, invitee_email: str
    ) -> Optional[EncryptedInvite]:
        stmt = select(invites_table).where(
            and_(
                invites_table.c.family_id == family_id,
                func.lower(invites_table.c.invitee_email)
                == invitee_email.strip().lower(),
                invites_table.c.status.in_(_OPEN_STATUS_VALUES),
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    async def list_pending_for_email(
        self, invitee_email: str, now: datetime
    ) -> list[EncryptedInvite]:
        stmt = (
            select(invites_table)
            .where(
                and_(
                    func.lower(invites_table.c.invitee_email)
                    == invitee_email.strip().lower(),
                    invites_table.c.status == InviteStatus.PENDING.value,
                    invites_table.c.expires_at > now,
                )
            )
            .order_by(invites_table.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row_to_invite(dict(row)) for row in result.mappings().all()]

    async def list_by_family(self, family_id: FamilyId) -> list[EncryptedInvite]:
        stmt = (
            select(invites_table)
            .where(invites_table.c.family_id == family_id)
            .order_by(invites_table.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row_to_invite(dict(row)) for row in result.mappings().all()]

    async def save(self, invite: EncryptedInvite) -> EncryptedInvite:
        """Save an invite (create or update).

        Raises:
            ConflictError: On a duplicate code or a second open invite for the
                same family and email
        """
        invite_dict = invite_to_dict(invite)

        existing = await self.find_by_id(invite.id)

        try:
            if existing:
                stmt = (
                    update(invites_table)
                    .where(invites_table.c.id == invite.id)
                    .values(**invite_dict)
                )
            else:
                stmt = insert(invites_table).values(**invite_dict)
            await self.session.execute(stmt)
            await self.session.flush()
        except IntegrityError:
            raise ConflictError("An invite with this code or email already exists")

        return invite

    async def mark_accepted(self, invite_id: InviteId, at: datetime) -> bool:
        """Conditionally accept: only rows still PENDING are updated."""
        stmt = (
            update(invites_table)
            .where(
                and_(
                    invites_table.c.id == invite_id,
                    invites_table.c.status == InviteStatus.PENDING.value,
                )
            )
            .values(status=InviteStatus.ACCEPTED.value, accepted_at=at, updated_at=at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def mark_expired(self, invite_id: InviteId, at: datetime) -> bool:
        stmt = (
            update(invites_table)
            .where(
                and_(
                    invites_table.c.id == invite_id,
                    invites_table.c.status.in_(_OPEN_STATUS_VALUES),
                )
            )
            .values(status=InviteStatus.EXPIRED.value, updated_at=at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def revoke_open_for_email(
        self, invitee_email: str, at: datetime, family_id: FamilyId | None = None
    ) -> int:
        conditions = [
            func.lower(invites_table.c.invitee_email) == invitee_email.strip().lower(),
            invites_table.c.status.in_(_OPEN_STATUS_VALUES),
        ]
        if family_id is not None:
            conditions.append(invites_table.c.family_id == family_id)

        stmt = (
            update(invites_table)
            .where(and_(*conditions))
            .values(status=InviteStatus.REVOKED.value, updated_at=at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0


class PostgresFamilyInviteRepository(FamilyInviteRepository):
    """PostgreSQL implementation of FamilyInviteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_code_hash(self, code_hash: str) -> Optional[EmailBoundInvite]:
        stmt = select(family_invites_table).where(
            family_invites_table.c.code_hash == code_hash
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_family_invite(dict(row)) if row else None

    async def list_by_family(self, family_id: FamilyId) -> list[EmailBoundInvite]:
        stmt = (
            select(family_invites_table)
            .where(family_invites_table.c.family_id == family_id)
            .order_by(family_invites_table.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row_to_family_invite(dict(row)) for row in result.mappings().all()]

    async def save(self, invite: EmailBoundInvite) -> EmailBoundInvite:
        stmt = insert(family_invites_table).values(**family_invite_to_dict(invite))
        await self.session.execute(stmt)
        await self.session.flush()
        return invite

    async def mark_redeemed(
        self, invite_id: FamilyInviteId, user_id: UserId, at: datetime
    ) -> bool:
        """Conditionally redeem: only rows with no redemption marker change."""
        stmt = (
            update(family_invites_table)
            .where(
                and_(
                    family_invites_table.c.id == invite_id,
                    family_invites_table.c.redeemed_at.is_(None),
                )
            )
            .values(redeemed_at=at, redeemed_by_user_id=user_id)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
