"""In-memory family and membership repositories for testing."""

from typing import Optional

from kin.domain.error import ConflictError
from kin.domain.model import Family, FamilyMembership
from kin.domain.repository import FamilyRepository, MembershipRepository
from kin.domain.value import FamilyId, UserId

from .database import InMemoryDatabase


class InMemoryFamilyRepository(FamilyRepository):
    """In-memory implementation of FamilyRepository for testing.

    Row locks are implicit: units of work are already serialized.
    """

    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db

    async def find_by_id(
        self, family_id: FamilyId, for_update: bool = False
    ) -> Optional[Family]:
        return self.db.families.get(family_id)

    async def find_by_invite_code(self, invite_code: str) -> Optional[Family]:
        for family in self.db.families.values():
            if family.invite_code == invite_code:
                return family
        return None

    async def find_by_ids(self, family_ids: list[FamilyId]) -> list[Family]:
        return [self.db.families[fid] for fid in family_ids if fid in self.db.families]

    async def save(self, family: Family) -> Family:
        other = await self.find_by_invite_code(family.invite_code)
        if other and other.id != family.id:
            raise ConflictError("Invite code already in use")
        self.db.families[family.id] = family
        return family


class InMemoryMembershipRepository(MembershipRepository):
    """In-memory implementation of MembershipRepository for testing."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db

    async def find(
        self, user_id: UserId, family_id: FamilyId
    ) -> Optional[FamilyMembership]:
        for membership in self.db.memberships.values():
            if membership.user_id == user_id and membership.family_id == family_id:
                return membership
        return None

    async def list_by_user(self, user_id: UserId) -> list[FamilyMembership]:
        matches = [m for m in self.db.memberships.values() if m.user_id == user_id]
        return sorted(matches, key=lambda m: m.joined_at)

    async def list_by_family(self, family_id: FamilyId) -> list[FamilyMembership]:
        matches = [m for m in self.db.memberships.values() if m.family_id == family_id]
        return sorted(matches, key=lambda m: m.joined_at)

    async def count_by_family(self, family_id: FamilyId) -> int:
        return sum(1 for m in self.db.memberships.values() if m.family_id == family_id)

    async def save(self, membership: FamilyMembership) -> FamilyMembership:
        """Save a membership (create or update).

        Raises:
            ConflictError: On a duplicate (user, family) pair
        """
        existing = await self.find(membership.user_id, membership.family_id)
        if existing and existing.id != membership.id:
            raise ConflictError("User is already a member of this family")
        self.db.memberships[membership.id] = membership
        return membership

    async def delete(self, user_id: UserId, family_id: FamilyId) -> bool:
        existing = await self.find(user_id, family_id)
        if not existing:
            return False
        del self.db.memberships[existing.id]
        return True

    async def delete_all_for_user(self, user_id: UserId) -> int:
        doomed = [m.id for m in self.db.memberships.values() if m.user_id == user_id]
        for membership_id in doomed:
            del self.db.memberships[membership_id]
        return len(doomed)
