"""Accept invite use case."""

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id
from kin.domain.error import (
    BadRequestError,
    ConflictError,
    InviteEmailMismatchError,
    InviteExpiredError,
)
from kin.domain.model.common import utc_now
from kin.domain.repository import UnitOfWork
from kin.domain.service import FamilyService, InviteService, UserService
from kin.domain.value import Role, UserId


class AcceptInviteRequest(BaseModel):
    """Accept invite request."""

    user_id: str  # From authenticated user
    invite_code: str


class AcceptInviteResponse(BaseModel):
    """Everything the client needs to open the family key."""

    family_id: str
    family_name: str
    encrypted_family_key: str | None
    nonce: str | None
    inviter_public_key: str | None


class AcceptInviteUseCase(BaseUseCase):
    """Use case for a signed-in user accepting a per-invitee invite."""

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        uow: UnitOfWork,
    ) -> None:
        """Initialize accept invite use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            invite_service: Invite domain service
            uow: Unit of work for the acceptance writes
        """
        self.user_service = user_service
        self.family_service = family_service
        self.invite_service = invite_service
        self.uow = uow

    async def execute(self, request: AcceptInviteRequest) -> AcceptInviteResponse:
        """Execute acceptance.

        An open invite found past its expiry is marked EXPIRED and committed
        before the error is raised. The conditional accept is the first write
        of the unit of work, so a concurrent loser fails as already used.

        Raises:
            BadRequestError: If the code is unknown, revoked, or still waiting
                for key material
            InviteExpiredError: If the invite has expired
            InviteAlreadyUsedError: If the invite was accepted, including by a
                concurrent request
            InviteEmailMismatchError: If the invite targets another email
            ConflictError: If already a member, or the family is full
        """
        user_id = UserId(parse_caller_id(request.user_id))

        with logfire.span("accept_invite.execute", user_id=str(user_id)):
            user = await self.user_service.get_active(user_id)

            invite = await self.invite_service.get_by_code(request.invite_code)
            if invite is None:
                raise BadRequestError("Invalid invite code")

            now = utc_now()
            if invite.status.is_open and invite.expires_at <= now:
                async with self.uow:
                    await self.invite_service.expire(invite)
                raise InviteExpiredError()

            invite.ensure_redeemable(now)

            if user.email != invite.invitee_email:
                logfire.warn("Invite email mismatch", invite_id=str(invite.id))
                raise InviteEmailMismatchError()

            family = await self.family_service.get_by_id(invite.family_id)

            async with self.uow:
                await self.invite_service.accept(invite, now)
                if await self.family_service.get_membership(user.id, family.id):
                    raise ConflictError("You are already a member of this family")
                membership = await self.family_service.add_member(
                    family.id, user.id, Role.MEMBER
                )
                if not user.active_family_id:
                    await self.user_service.update(
                        user, active_family_id=family.id, role=membership.role
                    )

            inviters = await self.user_service.get_active_users([invite.inviter_id])
            inviter = inviters.get(invite.inviter_id)

            logfire.info(
                "Invite accepted", invite_id=str(invite.id), family_id=str(family.id)
            )
            return AcceptInviteResponse(
                family_id=str(family.id),
                family_name=family.name,
                encrypted_family_key=invite.encrypted_family_key,
                nonce=invite.nonce,
                inviter_public_key=inviter.public_key if inviter else None,
            )
