"""Report invite decrypt failure use case."""

import logfire
from pydantic import BaseModel, Field

from kin.application.usecase.base import BaseUseCase, parse_caller_id
from kin.application.usecase.views import GenericResponse
from kin.domain.service import InviteService
from kin.domain.value import UserId


class ReportInviteDecryptFailureRequest(BaseModel):
    """Report invite decrypt failure request."""

    user_id: str  # From authenticated user
    invite_code: str
    reason: str = Field(min_length=1, max_length=500)


class ReportInviteDecryptFailureUseCase(BaseUseCase):
    """Use case for a client reporting it could not open an invite's family key.

    Only logs; inviters re-issue the invite. The response never reveals
    whether the code exists.
    """

    def __init__(self, invite_service: InviteService) -> None:
        """Initialize report invite decrypt failure use case.

        Args:
            invite_service: Invite domain service
        """
        self.invite_service = invite_service

    async def execute(
        self, request: ReportInviteDecryptFailureRequest
    ) -> GenericResponse:
        user_id = UserId(parse_caller_id(request.user_id))

        invite = await self.invite_service.get_by_code(request.invite_code)
        logfire.warn(
            "Invite decrypt failure reported",
            user_id=str(user_id),
            invite_code=request.invite_code[:8] + "...",
            invite_id=str(invite.id) if invite else None,
            family_id=str(invite.family_id) if invite else None,
            inviter_id=str(invite.inviter_id) if invite else None,
            reason=request.reason,
        )
        return GenericResponse(message="Report received")
