"""Remove family member use case."""

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id, parse_uuid
from kin.application.usecase.views import GenericResponse
from kin.domain.error import BadRequestError, ForbiddenError, NotFoundError
from kin.domain.repository import UnitOfWork
from kin.domain.service import FamilyService, InviteService, UserService
from kin.domain.value import FamilyId, Role, UserId


class RemoveFamilyMemberRequest(BaseModel):
    """Remove family member request."""

    user_id: str  # From authenticated user
    target_user_id: str
    family_id: str


class RemoveFamilyMemberUseCase(BaseUseCase):
    """Use case for an admin removing a member from their family.

    Admins cannot remove other admins, and nobody removes themselves here;
    leaving is done by deregistering.
    """

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        uow: UnitOfWork,
    ) -> None:
        """Initialize remove family member use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            invite_service: Invite domain service
            uow: Unit of work for the removal cascade
        """
        self.user_service = user_service
        self.family_service = family_service
        self.invite_service = invite_service
        self.uow = uow

    async def execute(self, request: RemoveFamilyMemberRequest) -> GenericResponse:
        """Execute removal.

        Deletes the membership, clears the target's active family if it was
        this one, and revokes open invites to the target's email for this
        family.

        Raises:
            BadRequestError: If the caller targets themselves
            ForbiddenError: If the caller is not an admin, or the target is
            NotFoundError: If the target is not a member
        """
        caller_id = UserId(parse_caller_id(request.user_id))
        target_id = UserId(parse_uuid(request.target_user_id, "user ID"))
        family_id = FamilyId(parse_uuid(request.family_id, "family ID"))

        with logfire.span(
            "remove_family_member.execute",
            caller_id=str(caller_id),
            target_id=str(target_id),
            family_id=str(family_id),
        ):
            if caller_id == target_id:
                raise BadRequestError(
                    "Use deregisterSelf to remove yourself from a family"
                )

            await self.family_service.require_admin(
                caller_id, family_id, "Only family admins can remove members"
            )

            target_membership = await self.family_service.get_membership(
                target_id, family_id
            )
            if not target_membership:
                raise NotFoundError("Family member", str(target_id))
            if target_membership.role == Role.ADMIN:
                raise ForbiddenError("Cannot remove other admins from the family")

            target = await self.user_service.get_by_id(target_id)

            async with self.uow:
                await self.family_service.remove_member(target_id, family_id)
                if target.active_family_id == family_id:
                    await self.user_service.update(target, active_family_id=None)
                revoked = await self.invite_service.revoke_open_for_email(
                    target.email, family_id
                )

            logfire.info(
                "Family member removed",
                family_id=str(family_id),
                target_id=str(target_id),
                invites_revoked=revoked,
            )
            return GenericResponse(message="Member removed from family")
