"""PostgreSQL implementations of Family and Membership repositories."""

from typing import Optional

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from kin.domain.error import ConflictError
from kin.domain.model import Family, FamilyMembership
from kin.domain.repository import FamilyRepository, MembershipRepository
from kin.domain.value import FamilyId, UserId
from kin.persistence.mappers import (
    family_to_dict,
    membership_to_dict,
    row_to_family,
    row_to_membership,
)
from kin.persistence.tables import families_table, family_memberships_table


class PostgresFamilyRepository(FamilyRepository):
    """PostgreSQL implementation of FamilyRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(
        self, family_id: FamilyId, for_update: bool = False
    ) -> Optional[Family]:
        """Find a family by ID, optionally taking a row lock.

        The lock (SELECT ... FOR UPDATE) is held until the surrounding
        transaction commits or rolls back.
        """
        stmt = select(families_table).where(families_table.c.id == family_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_family(dict(row)) if row else None

    async def find_by_invite_code(self, invite_code: str) -> Optional[Family]:
        stmt = select(families_table).where(
            families_table.c.invite_code == invite_code
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_family(dict(row)) if row else None

    async def find_by_ids(self, family_ids: list[FamilyId]) -> list[Family]:
        if not family_ids:
            return []
        stmt = select(families_table).where(families_table.c.id.in_(family_ids))
        result = await self.session.execute(stmt)
        return [row_to_family(dict(row)) for row in result.mappings().all()]

    async def save(self, family: Family) -> Family:
        family_dict = family_to_dict(family)

        existing = await self.find_by_id(family.id)

        try:
            if existing:
                stmt = (
                    update(families_table)
                    .where(families_table.c.id == family.id)
                    .values(**family_dict)
                )
            else:
                stmt = insert(families_table).values(**family_dict)
            await self.session.execute(stmt)
            await self.session.flush()
        except IntegrityError:
            raise ConflictError("Invite code already in use")

        return family


class PostgresMembershipRepository(MembershipRepository):
    """PostgreSQL implementation of MembershipRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find(
        self, user_id: UserId, family_id: FamilyId
    ) -> Optional[FamilyMembership]:
        stmt = select(family_memberships_table).where(
            and_(
                family_memberships_table.c.user_id == user_id,
                family_memberships_table.c.family_id == family_id,
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_membership(dict(row)) if row else None

    async def list_by_user(self, user_id: UserId) -> list[FamilyMembership]:
        stmt = (
            select(family_memberships_table)
            .where(family_memberships_table.c.user_id == user_id)
            .order_by(family_memberships_table.c.joined_at.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_membership(dict(row)) for row in result.mappings().all()]

    async def list_by_family(self, family_id: FamilyId) -> list[FamilyMembership]:
        stmt = (
            select(family_memberships_table)
            .where(family_memberships_table.c.family_id == family_id)
            .order_by(family_memberships_table.c.joined_at.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_membership(dict(row)) for row in result.mappings().all()]

    async def count_by_family(self, family_id: FamilyId) -> int:
        stmt = (
            select(func.count())
            .select_from(family_memberships_table)
            .where(family_memberships_table.c.family_id == family_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def save(self, membership: FamilyMembership) -> FamilyMembership:
        """Save a membership (create or update).

        Raises:
            ConflictError: On a duplicate (user, family) pair
        """
        membership_dict = membership_to_dict(membership)

        stmt = select(family_memberships_table.c.id).where(
            family_memberships_table.c.id == membership.id
        )
        exists = (await self.session.execute(stmt)).first() is not None

        try:
            if exists:
                write = (
                    update(family_memberships_table)
                    .where(family_memberships_table.c.id == membership.id)
                    .values(**membership_dict)
                )
            else:
                write = insert(family_memberships_table).values(**membership_dict)
            await self.session.execute(write)
            await self.session.flush()
        except IntegrityError:
            raise ConflictError("User is already a member of this family")

        return membership

    async def delete(self, user_id: UserId, family_id: FamilyId) -> bool:
        stmt = delete(family_memberships_table).where(
            and_(
                family_memberships_table.c.user_id == user_id,
                family_memberships_table.c.family_id == family_id,
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def delete_all_for_user(self, user_id: UserId) -> int:
        stmt = delete(family_memberships_table).where(
            family_memberships_table.c.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
