"""Create encrypted invite use case."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel, Field

from kin.application.usecase.base import (
    BaseUseCase,
    parse_caller_id,
    parse_uuid,
    parse_value,
)
from kin.application.usecase.views import InviteView
from kin.domain.error import ConflictError
from kin.domain.model.common import utc_now
from kin.domain.repository import UnitOfWork
from kin.domain.service import (
    FamilyService,
    InviteService,
    Notifier,
    UserService,
    dispatch_notification,
)
from kin.domain.value import EmailAddress, FamilyId, UserId


class CreateEncryptedInviteRequest(BaseModel):
    """Create encrypted invite request.

    ``encrypted_family_key`` and ``nonce`` are sealed client-side for the
    invitee's public key and stored as-is.
    """

    user_id: str  # From authenticated user
    family_id: str
    invitee_email: str
    encrypted_family_key: str = Field(min_length=1)
    nonce: str = Field(min_length=1)
    invite_code: str = Field(min_length=1, max_length=64)
    expires_at: datetime


class CreateEncryptedInviteUseCase(BaseUseCase):
    """Use case for inviting a registered user with the family key attached."""

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        notifier: Notifier,
        uow: UnitOfWork,
    ) -> None:
        """Initialize create encrypted invite use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            invite_service: Invite domain service
            notifier: Outbound email port
            uow: Unit of work for the invite write
        """
        self.user_service = user_service
        self.family_service = family_service
        self.invite_service = invite_service
        self.notifier = notifier
        self.uow = uow

    async def execute(self, request: CreateEncryptedInviteRequest) -> InviteView:
        """Execute invite creation.

        Raises:
            ForbiddenError: If the inviter is not a member of the family
            ValidationError: If the invitee email is malformed
            ConflictError: If the invitee is already a member, a pending
                invite exists, or the code is taken
            BadRequestError: If the expiry is not in the future
        """
        inviter_id = UserId(parse_caller_id(request.user_id))
        family_id = FamilyId(parse_uuid(request.family_id, "family ID"))
        email = parse_value(EmailAddress, request.invitee_email, "Invalid email address")
        expires_at = request.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        with logfire.span(
            "create_encrypted_invite.execute",
            inviter_id=str(inviter_id),
            family_id=str(family_id),
        ):
            inviter = await self.user_service.get_active(inviter_id)
            await self.family_service.require_membership(inviter.id, family_id)
            family = await self.family_service.get_by_id(family_id)

            invitee = await self.user_service.find_active_by_email(email.root)
            if invitee and await self.family_service.get_membership(
                invitee.id, family_id
            ):
                raise ConflictError("User is already a member of this family")

            async with self.uow:
                invite = await self.invite_service.create_encrypted_invite(
                    family_id=family_id,
                    inviter_id=inviter.id,
                    invitee_email=email.root,
                    encrypted_family_key=request.encrypted_family_key,
                    nonce=request.nonce,
                    invite_code=request.invite_code,
                    expires_at=expires_at,
                )

            if invitee:
                await dispatch_notification(
                    self.notifier.send_invite_notification(
                        invitee.email, inviter.name, family.name, invite.invite_code
                    ),
                    "invite_notification",
                    invite_id=str(invite.id),
                )

            return InviteView.from_encrypted(invite, utc_now())
