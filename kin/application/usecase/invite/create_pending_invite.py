"""Create pending invite use case."""

import logfire
from pydantic import BaseModel

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
from kin.domain.value import (
    SUPPORTED_LANGUAGES,
    EmailAddress,
    FamilyId,
    Language,
    UserId,
)


class CreatePendingInviteRequest(BaseModel):
    """Create pending invite request."""

    user_id: str  # From authenticated user
    family_id: str
    invitee_email: str
    invitee_language: str | None = None  # Language of the registration email


class CreatePendingInviteUseCase(BaseUseCase):
    """Use case for inviting someone who has no account yet.

    The invite carries no key material; the inviter completes it with the
    encrypted-invite flow once the invitee has registered.
    """

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        notifier: Notifier,
        uow: UnitOfWork,
    ) -> None:
        """Initialize create pending invite use case.

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

    async def execute(self, request: CreatePendingInviteRequest) -> InviteView:
        """Execute pending invite creation.

        Raises:
            ForbiddenError: If the inviter is not a member of the family
            ValidationError: If the email or language is invalid
            ConflictError: If the invitee is already registered, or an open
                invite exists
        """
        inviter_id = UserId(parse_caller_id(request.user_id))
        family_id = FamilyId(parse_uuid(request.family_id, "family ID"))
        email = parse_value(EmailAddress, request.invitee_email, "Invalid email address")
        language = None
        if request.invitee_language:
            language = parse_value(
                Language,
                request.invitee_language,
                "Unsupported language. Supported: " + ", ".join(SUPPORTED_LANGUAGES),
            ).root

        with logfire.span(
            "create_pending_invite.execute",
            inviter_id=str(inviter_id),
            family_id=str(family_id),
        ):
            inviter = await self.user_service.get_active(inviter_id)
            await self.family_service.require_membership(inviter.id, family_id)
            family = await self.family_service.get_by_id(family_id)

            invitee = await self.user_service.find_active_by_email(email.root)
            if invitee and invitee.public_key:
                raise ConflictError(
                    "This user is already registered. Send an encrypted invite instead."
                )

            async with self.uow:
                invite = await self.invite_service.create_pending_registration_invite(
                    family_id=family_id,
                    inviter_id=inviter.id,
                    invitee_email=email.root,
                    invitee_language=language,
                )

            await dispatch_notification(
                self.notifier.send_registration_invite(
                    invite.invitee_email,
                    inviter.name,
                    family.name,
                    invite.invite_code,
                    language,
                ),
                "registration_invite",
                invite_id=str(invite.id),
            )

            return InviteView.from_encrypted(invite, utc_now())
