"""Get family invites use case."""

from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id, parse_uuid
from kin.application.usecase.views import InviteView
from kin.domain.model import EmailBoundInvite
from kin.domain.model.common import utc_now
from kin.domain.service import FamilyService, InviteService
from kin.domain.value import FamilyId, UserId


class GetFamilyInvitesRequest(BaseModel):
    """Get family invites request."""

    user_id: str  # From authenticated user
    family_id: str


class GetFamilyInvitesResponse(BaseModel):
    """Get family invites response."""

    invites: list[InviteView]


class GetFamilyInvitesUseCase(BaseUseCase):
    """Use case for listing every invite of a family, newest first.

    Email-bound invitee addresses are decrypted for display; an envelope that
    cannot be opened shows no address.
    """

    def __init__(
        self, family_service: FamilyService, invite_service: InviteService
    ) -> None:
        """Initialize get family invites use case.

        Args:
            family_service: Family domain service
            invite_service: Invite domain service
        """
        self.family_service = family_service
        self.invite_service = invite_service

    async def execute(self, request: GetFamilyInvitesRequest) -> GetFamilyInvitesResponse:
        """Execute listing.

        Raises:
            ForbiddenError: If the caller is not a member
        """
        caller_id = UserId(parse_caller_id(request.user_id))
        family_id = FamilyId(parse_uuid(request.family_id, "family ID"))

        await self.family_service.require_membership(caller_id, family_id)

        now = utc_now()
        views = []
        for invite in await self.invite_service.list_family_invites(family_id):
            if isinstance(invite, EmailBoundInvite):
                email = self.invite_service.decrypt_invitee_email(invite)
                views.append(InviteView.from_email_bound(invite, email, now))
            else:
                views.append(InviteView.from_encrypted(invite, now))
        return GetFamilyInvitesResponse(invites=views)
