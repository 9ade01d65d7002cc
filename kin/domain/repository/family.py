"""Family and membership repository interfaces."""

from abc import ABC, abstractmethod

from kin.domain.model import Family, FamilyMembership
from kin.domain.value import FamilyId, UserId


class FamilyRepository(ABC):
    """Repository for Family aggregate."""

    @abstractmethod
    async def find_by_id(
        self, family_id: FamilyId, for_update: bool = False
    ) -> Family | None:
        """Find a family by ID.

        Args:
            family_id: The family's unique identifier
            for_update: Lock the family row until the unit of work ends.
                Capacity checks take this lock so that concurrent joins
                serialize on the family.

        Returns:
            The family if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_invite_code(self, invite_code: str) -> Family | None:
        """Find a family by its shared invite code.

        Args:
            invite_code: Exact legacy invite code

        Returns:
            The family if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, family_ids: list[FamilyId]) -> list[Family]:
        """Find families by IDs."""
        pass

    @abstractmethod
    async def save(self, family: Family) -> Family:
        """Save a family (create or update).

        Raises:
            ConflictError: If the invite code is already taken
        """
        pass


class MembershipRepository(ABC):
    """Repository for FamilyMembership entities."""

    @abstractmethod
    async def find(
        self, user_id: UserId, family_id: FamilyId
    ) -> FamilyMembership | None:
        """Find the membership of a user in a family.

        Args:
            user_id: Member's user ID
            family_id: Family ID

        Returns:
            The membership if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_user(self, user_id: UserId) -> list[FamilyMembership]:
        """List a user's memberships, oldest first."""
        pass

    @abstractmethod
    async def list_by_family(self, family_id: FamilyId) -> list[FamilyMembership]:
        """List a family's memberships, oldest first."""
        pass

    @abstractmethod
    async def count_by_family(self, family_id: FamilyId) -> int:
        """Count members of a family."""
        pass

    @abstractmethod
    async def save(self, membership: FamilyMembership) -> FamilyMembership:
        """Save a membership (create or update).

        Raises:
            ConflictError: If the user is already a member of the family
        """
        pass

    @abstractmethod
    async def delete(self, user_id: UserId, family_id: FamilyId) -> bool:
        """Delete one membership.

        Returns:
            True if a membership was deleted
        """
        pass

    @abstractmethod
    async def delete_all_for_user(self, user_id: UserId) -> int:
        """Delete every membership of a user.

        Returns:
            Number of memberships deleted
        """
        pass
