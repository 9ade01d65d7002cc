"""Join family as existing member use case."""

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id
from kin.application.usecase.views import FamilyMembershipView
from kin.domain.error import BadRequestError, ConflictError
from kin.domain.model import EmailBoundInvite
from kin.domain.model.common import utc_now
from kin.domain.repository import UnitOfWork
from kin.domain.service import FamilyService, InviteService, UserService
from kin.domain.value import Role, UserId


class JoinFamilyAsMemberRequest(BaseModel):
    """Join an additional family with an invite code."""

    user_id: str  # From authenticated user
    invite_code: str
    make_active: bool = True


class JoinFamilyAsMemberUseCase(BaseUseCase):
    """Use case for a signed-in user joining another family.

    Codes resolve the same way as on the anonymous join path: email-bound
    invite first, then the family's shared code.
    """

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        uow: UnitOfWork,
    ) -> None:
        """Initialize join family as member use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            invite_service: Invite domain service
            uow: Unit of work for the membership writes
        """
        self.user_service = user_service
        self.family_service = family_service
        self.invite_service = invite_service
        self.uow = uow

    async def execute(self, request: JoinFamilyAsMemberRequest) -> FamilyMembershipView:
        """Execute join.

        The conditional redemption is the first write of the unit of work, so
        a concurrent loser fails as already used.

        Raises:
            BadRequestError: If the code is unknown
            InviteExpiredError: If an email-bound invite has expired
            InviteAlreadyUsedError: If an email-bound invite was redeemed
            InviteEmailMismatchError: If an email-bound invite targets another email
            ConflictError: If already a member, or the family is full
        """
        user_id = UserId(parse_caller_id(request.user_id))

        with logfire.span("join_family_as_member.execute", user_id=str(user_id)):
            user = await self.user_service.get_active(user_id)

            invite = await self.invite_service.resolve_join_code(request.invite_code)
            if invite is None:
                raise BadRequestError("Invalid invite code")

            now = utc_now()
            invite.ensure_redeemable(now)
            if isinstance(invite, EmailBoundInvite):
                self.invite_service.ensure_recipient(invite, user.email)

            family = await self.family_service.get_by_id(invite.family_id)

            async with self.uow:
                await self.invite_service.redeem(invite, user.id, now)
                if await self.family_service.get_membership(user.id, family.id):
                    raise ConflictError("You are already a member of this family")
                membership = await self.family_service.add_member(
                    family.id, user.id, Role.MEMBER
                )
                if request.make_active or not user.active_family_id:
                    user = await self.user_service.update(
                        user, active_family_id=family.id, role=membership.role
                    )

            logfire.info(
                "Joined additional family",
                user_id=str(user.id),
                family_id=str(family.id),
                invite_kind=invite.kind,
            )
            return FamilyMembershipView.build(membership, family, user)
