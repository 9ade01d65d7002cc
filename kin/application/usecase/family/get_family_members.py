"""Get family members use case."""

from datetime import datetime

from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id, parse_uuid
from kin.domain.service import FamilyService, UserService
from kin.domain.value import FamilyId, Role, UserId


class GetFamilyMembersRequest(BaseModel):
    """Get family members request."""

    user_id: str  # From authenticated user
    family_id: str


class FamilyMemberItem(BaseModel):
    """A member as listed to other members."""

    user_id: str
    name: str
    email: str
    role: Role
    public_key: str | None
    joined_at: datetime


class GetFamilyMembersResponse(BaseModel):
    """Get family members response."""

    members: list[FamilyMemberItem]


class GetFamilyMembersUseCase(BaseUseCase):
    """Use case for listing a family's members with their public keys."""

    def __init__(self, user_service: UserService, family_service: FamilyService) -> None:
        """Initialize get family members use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
        """
        self.user_service = user_service
        self.family_service = family_service

    async def execute(self, request: GetFamilyMembersRequest) -> GetFamilyMembersResponse:
        """Execute listing.

        Raises:
            ForbiddenError: If the caller is not a member
        """
        caller_id = UserId(parse_caller_id(request.user_id))
        family_id = FamilyId(parse_uuid(request.family_id, "family ID"))

        await self.family_service.require_membership(caller_id, family_id)
        memberships = await self.family_service.list_members(family_id)
        users = await self.user_service.get_active_users(
            [m.user_id for m in memberships]
        )

        members = []
        for membership in memberships:
            user = users.get(membership.user_id)
            if user is None:
                continue
            members.append(
                FamilyMemberItem(
                    user_id=str(user.id),
                    name=user.name,
                    email=user.email,
                    role=membership.role,
                    public_key=user.public_key,
                    joined_at=membership.joined_at,
                )
            )
        return GetFamilyMembersResponse(members=members)
