"""Family and membership domain service."""

from uuid import uuid4

import logfire

from kin.domain.error import ConflictError, ForbiddenError, NotFoundError
from kin.domain.model import Channel, Family, FamilyMembership, User
from kin.domain.model.channel import DEFAULT_CHANNEL_DESCRIPTION, DEFAULT_CHANNEL_NAME
from kin.domain.model.common import utc_now
from kin.domain.repository import (
    ChannelRepository,
    FamilyRepository,
    MembershipRepository,
    UserRepository,
)
from kin.domain.value import ChannelId, FamilyId, MembershipId, Role, UserId
from kin.util.crypto import generate_legacy_invite_code

from .base import Service

# Retries when a generated legacy code collides with an existing one
MAX_CODE_ATTEMPTS = 5


class FamilyService(Service):
    """Domain service for families and their memberships.

    Methods that write are expected to run inside a unit of work.
    """

    def __init__(
        self,
        family_repository: FamilyRepository,
        membership_repository: MembershipRepository,
        channel_repository: ChannelRepository,
        user_repository: UserRepository,
        default_max_members: int = 10,
    ) -> None:
        """Initialize family service.

        Args:
            family_repository: Family repository
            membership_repository: Membership repository
            channel_repository: Channel repository
            user_repository: User repository
            default_max_members: Capacity for new families
        """
        self.family_repository = family_repository
        self.membership_repository = membership_repository
        self.channel_repository = channel_repository
        self.user_repository = user_repository
        self.default_max_members = default_max_members

    async def get_by_id(self, family_id: FamilyId) -> Family:
        """Get family by ID.

        Raises:
            NotFoundError: If family not found
        """
        with logfire.span("family_service.get_by_id", family_id=str(family_id)):
            family = await self.family_repository.find_by_id(family_id)
            if not family:
                logfire.warn("Family not found", family_id=str(family_id))
                raise NotFoundError("Family", str(family_id))
            return family

    async def find_by_invite_code(self, invite_code: str) -> Family | None:
        """Find the family whose shared invite code matches exactly."""
        return await self.family_repository.find_by_invite_code(invite_code)

    async def allocate_invite_code(self, requested: str | None = None) -> str:
        """Pick a shared invite code for a new family.

        Args:
            requested: Client-chosen code, used as-is if free

        Returns:
            An unused code

        Raises:
            ConflictError: If the requested code is taken, or generation keeps
                colliding
        """
        if requested:
            if await self.family_repository.find_by_invite_code(requested):
                raise ConflictError("Invite code already in use")
            return requested

        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_legacy_invite_code()
            if not await self.family_repository.find_by_invite_code(code):
                return code
        raise ConflictError("Could not allocate a unique invite code")

    async def create_family(
        self, creator: User, name: str, invite_code: str
    ) -> tuple[Family, User]:
        """Create a family with its creator as ADMIN.

        Writes the family, the ADMIN membership, the default channel and the
        creator's role/active family. Run inside a unit of work so the writes
        land together.

        Args:
            creator: User creating the family
            name: Family name
            invite_code: Shared invite code

        Returns:
            Tuple of (family, updated creator)
        """
        with logfire.span(
            "family_service.create_family", creator_id=str(creator.id), name=name
        ):
            family = await self.family_repository.save(
                Family(
                    id=FamilyId(uuid4()),
                    name=name,
                    invite_code=invite_code,
                    max_members=self.default_max_members,
                    created_by=creator.id,
                )
            )
            await self.membership_repository.save(
                FamilyMembership(
                    id=MembershipId(uuid4()),
                    user_id=creator.id,
                    family_id=family.id,
                    role=Role.ADMIN,
                )
            )
            await self.channel_repository.save(
                Channel(
                    id=ChannelId(uuid4()),
                    family_id=family.id,
                    name=DEFAULT_CHANNEL_NAME,
                    description=DEFAULT_CHANNEL_DESCRIPTION,
                    is_default=True,
                    created_by=creator.id,
                )
            )
            updated_creator = await self.user_repository.save(
                creator.model_copy(
                    update={
                        "role": Role.ADMIN,
                        "active_family_id": family.id,
                        "updated_at": utc_now(),
                    }
                )
            )
            logfire.info(
                "Family created", family_id=str(family.id), creator_id=str(creator.id)
            )
            return family, updated_creator

    async def get_membership(
        self, user_id: UserId, family_id: FamilyId
    ) -> FamilyMembership | None:
        """Get a user's membership in a family, if any."""
        return await self.membership_repository.find(user_id, family_id)

    async def require_membership(
        self, user_id: UserId, family_id: FamilyId
    ) -> FamilyMembership:
        """Get a user's membership in a family.

        Raises:
            ForbiddenError: If the user is not a member
        """
        membership = await self.membership_repository.find(user_id, family_id)
        if not membership:
            logfire.warn(
                "Not a family member", user_id=str(user_id), family_id=str(family_id)
            )
            raise ForbiddenError("You are not a member of this family")
        return membership

    async def require_admin(
        self, user_id: UserId, family_id: FamilyId, message: str
    ) -> FamilyMembership:
        """Get a user's ADMIN membership in a family.

        Args:
            user_id: Caller
            family_id: Family
            message: Failure message naming the attempted action

        Raises:
            ForbiddenError: If the user is not an admin of the family
        """
        membership = await self.membership_repository.find(user_id, family_id)
        if not membership or membership.role != Role.ADMIN:
            logfire.warn(
                "Admin role required", user_id=str(user_id), family_id=str(family_id)
            )
            raise ForbiddenError(message)
        return membership

    async def has_any_membership(self, user_id: UserId) -> bool:
        return bool(await self.membership_repository.list_by_user(user_id))

    async def add_member(
        self, family_id: FamilyId, user_id: UserId, role: Role = Role.MEMBER
    ) -> FamilyMembership:
        """Add a user to a family, enforcing uniqueness and capacity.

        Locks the family row for the rest of the unit of work so concurrent
        joins cannot both take the last seat.

        Args:
            family_id: Family to join
            user_id: Joining user
            role: Membership role

        Returns:
            Saved membership

        Raises:
            NotFoundError: If the family does not exist
            ConflictError: If already a member, or the family is full
        """
        with logfire.span(
            "family_service.add_member", family_id=str(family_id), user_id=str(user_id)
        ):
            family = await self.family_repository.find_by_id(family_id, for_update=True)
            if not family:
                raise NotFoundError("Family", str(family_id))

            if await self.membership_repository.find(user_id, family_id):
                logfire.warn("Already a member", family_id=str(family_id))
                raise ConflictError("User is already a member of this family")

            count = await self.membership_repository.count_by_family(family_id)
            if count >= family.max_members:
                logfire.warn(
                    "Family is full",
                    family_id=str(family_id),
                    count=count,
                    max_members=family.max_members,
                )
                raise ConflictError("Family is full")

            membership = await self.membership_repository.save(
                FamilyMembership(
                    id=MembershipId(uuid4()),
                    user_id=user_id,
                    family_id=family_id,
                    role=role,
                )
            )
            logfire.info(
                "Member added",
                family_id=str(family_id),
                user_id=str(user_id),
                member_count=count + 1,
            )
            return membership

    async def set_role(self, membership: FamilyMembership, role: Role) -> FamilyMembership:
        """Change a membership's role."""
        return await self.membership_repository.save(
            membership.model_copy(update={"role": role})
        )

    async def remove_member(self, user_id: UserId, family_id: FamilyId) -> bool:
        """Delete a membership.

        Returns:
            True if a membership was deleted
        """
        with logfire.span(
            "family_service.remove_member",
            family_id=str(family_id),
            user_id=str(user_id),
        ):
            return await self.membership_repository.delete(user_id, family_id)

    async def remove_all_memberships(self, user_id: UserId) -> int:
        """Delete every membership of a user.

        Returns:
            Number of memberships deleted
        """
        with logfire.span(
            "family_service.remove_all_memberships", user_id=str(user_id)
        ):
            return await self.membership_repository.delete_all_for_user(user_id)

    async def list_memberships(self, user_id: UserId) -> list[FamilyMembership]:
        return await self.membership_repository.list_by_user(user_id)

    async def list_members(self, family_id: FamilyId) -> list[FamilyMembership]:
        return await self.membership_repository.list_by_family(family_id)

    async def get_families(self, family_ids: list[FamilyId]) -> dict[FamilyId, Family]:
        families = await self.family_repository.find_by_ids(family_ids)
        return {family.id: family for family in families}
