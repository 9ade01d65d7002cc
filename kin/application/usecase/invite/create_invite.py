"""Create invite use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id, parse_value
from kin.domain.error import BadRequestError
from kin.domain.repository import UnitOfWork
from kin.domain.service import FamilyService, InviteService, UserService
from kin.domain.value import EmailAddress, UserId


class CreateInviteRequest(BaseModel):
    """Create email-bound invite request."""

    user_id: str  # From authenticated user
    invitee_email: str


class CreateInviteResponse(BaseModel):
    """Created invite. ``invite_code`` is only ever returned here."""

    invite_code: str
    invitee_email: str
    expires_at: datetime


class CreateInviteUseCase(BaseUseCase):
    """Use case for issuing a single-use invite bound to an email address.

    The invite targets the inviter's active family.
    """

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        uow: UnitOfWork,
    ) -> None:
        """Initialize create invite use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            invite_service: Invite domain service
            uow: Unit of work for the invite write
        """
        self.user_service = user_service
        self.family_service = family_service
        self.invite_service = invite_service
        self.uow = uow

    async def execute(self, request: CreateInviteRequest) -> CreateInviteResponse:
        """Execute invite creation.

        Raises:
            BadRequestError: If the inviter has no active family
            ForbiddenError: If the inviter is not a member of it
            ValidationError: If the email is malformed
        """
        inviter_id = UserId(parse_caller_id(request.user_id))
        email = parse_value(EmailAddress, request.invitee_email, "Invalid email address")

        with logfire.span("create_invite.execute", inviter_id=str(inviter_id)):
            inviter = await self.user_service.get_active(inviter_id)
            if not inviter.active_family_id:
                raise BadRequestError("You must be in a family to create invites")
            await self.family_service.require_membership(
                inviter.id, inviter.active_family_id
            )

            async with self.uow:
                invite, code = await self.invite_service.create_email_bound_invite(
                    inviter.active_family_id, inviter.id, email.root
                )

            return CreateInviteResponse(
                invite_code=code,
                invitee_email=email.root,
                expires_at=invite.expires_at,
            )
