"""Get pending invites use case."""

from datetime import datetime

from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id
from kin.domain.model import author_display_name
from kin.domain.service import FamilyService, InviteService, UserService
from kin.domain.value import UserId


class GetPendingInvitesRequest(BaseModel):
    """Get pending invites request."""

    user_id: str  # From authenticated user


class PendingInviteItem(BaseModel):
    """An invite waiting for the caller."""

    invite_code: str
    family_id: str
    family_name: str
    inviter_name: str
    inviter_public_key: str | None
    encrypted_family_key: str | None
    nonce: str | None
    expires_at: datetime
    created_at: datetime


class GetPendingInvitesResponse(BaseModel):
    """Get pending invites response."""

    invites: list[PendingInviteItem]


class GetPendingInvitesUseCase(BaseUseCase):
    """Use case for listing unexpired PENDING invites to the caller's email."""

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
    ) -> None:
        """Initialize get pending invites use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            invite_service: Invite domain service
        """
        self.user_service = user_service
        self.family_service = family_service
        self.invite_service = invite_service

    async def execute(self, request: GetPendingInvitesRequest) -> GetPendingInvitesResponse:
        user = await self.user_service.get_active(UserId(parse_caller_id(request.user_id)))

        invites = await self.invite_service.list_pending_for_email(user.email)
        families = await self.family_service.get_families(
            [invite.family_id for invite in invites]
        )
        inviters = await self.user_service.get_active_users(
            [invite.inviter_id for invite in invites]
        )

        items = []
        for invite in invites:
            family = families.get(invite.family_id)
            if family is None:
                continue
            inviter = inviters.get(invite.inviter_id)
            items.append(
                PendingInviteItem(
                    invite_code=invite.invite_code,
                    family_id=str(family.id),
                    family_name=family.name,
                    inviter_name=author_display_name(inviter),
                    inviter_public_key=inviter.public_key if inviter else None,
                    encrypted_family_key=invite.encrypted_family_key,
                    nonce=invite.nonce,
                    expires_at=invite.expires_at,
                    created_at=invite.created_at,
                )
            )
        return GetPendingInvitesResponse(invites=items)
