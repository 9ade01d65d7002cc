"""Deregister self use case."""

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id
from kin.application.usecase.views import GenericResponse
from kin.domain.error import BadRequestError
from kin.domain.model.common import utc_now
from kin.domain.repository import UnitOfWork
from kin.domain.service import FamilyService, InviteService, UserService
from kin.domain.value import UserId


class DeregisterSelfRequest(BaseModel):
    """Deregister self request."""

    user_id: str  # From authenticated user


class DeregisterSelfUseCase(BaseUseCase):
    """Use case for a user deleting their own account.

    The account is soft-deleted so authored messages keep their author
    reference; they render with the removed-user placeholder.
    """

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        invite_service: InviteService,
        uow: UnitOfWork,
    ) -> None:
        """Initialize deregister self use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            invite_service: Invite domain service
            uow: Unit of work for the deregistration cascade
        """
        self.user_service = user_service
        self.family_service = family_service
        self.invite_service = invite_service
        self.uow = uow

    async def execute(self, request: DeregisterSelfRequest) -> GenericResponse:
        """Execute deregistration.

        In one unit of work: mark the account deleted, clear its active
        family, delete every membership and revoke every open invite to its
        email in any family.

        Raises:
            NotFoundError: If the user does not exist
            BadRequestError: If the account is already deleted
        """
        user_id = UserId(parse_caller_id(request.user_id))

        with logfire.span("deregister_self.execute", user_id=str(user_id)):
            user = await self.user_service.get_by_id(user_id)
            if user.is_deleted:
                raise BadRequestError("Account is already deleted")

            async with self.uow:
                await self.user_service.update(
                    user, deleted_at=utc_now(), active_family_id=None
                )
                memberships = await self.family_service.remove_all_memberships(user.id)
                revoked = await self.invite_service.revoke_open_for_email(user.email)

            logfire.info(
                "User deregistered",
                user_id=str(user.id),
                memberships_removed=memberships,
                invites_revoked=revoked,
            )
            return GenericResponse(message="Your account has been deleted")
