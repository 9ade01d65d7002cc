"""Promote to admin use case."""

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id, parse_uuid
from kin.application.usecase.views import GenericResponse
from kin.domain.error import NotFoundError
from kin.domain.repository import UnitOfWork
from kin.domain.service import FamilyService, UserService
from kin.domain.value import FamilyId, Role, UserId


class PromoteToAdminRequest(BaseModel):
    """Promote to admin request."""

    user_id: str  # From authenticated user
    target_user_id: str
    family_id: str


class PromoteToAdminUseCase(BaseUseCase):
    """Use case for an admin granting ADMIN to another member."""

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        uow: UnitOfWork,
    ) -> None:
        """Initialize promote to admin use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            uow: Unit of work for the role writes
        """
        self.user_service = user_service
        self.family_service = family_service
        self.uow = uow

    async def execute(self, request: PromoteToAdminRequest) -> GenericResponse:
        """Execute promotion. Promoting an admin again changes nothing.

        Raises:
            ForbiddenError: If the caller is not an admin of the family
            NotFoundError: If the target is not a member
        """
        caller_id = UserId(parse_caller_id(request.user_id))
        target_id = UserId(parse_uuid(request.target_user_id, "user ID"))
        family_id = FamilyId(parse_uuid(request.family_id, "family ID"))

        with logfire.span(
            "promote_to_admin.execute",
            caller_id=str(caller_id),
            target_id=str(target_id),
            family_id=str(family_id),
        ):
            await self.family_service.require_admin(
                caller_id, family_id, "Only family admins can promote members"
            )
            membership = await self.family_service.get_membership(target_id, family_id)
            if not membership:
                raise NotFoundError("Family member", str(target_id))

            if membership.role == Role.ADMIN:
                return GenericResponse(message="Member is already an admin")

            target = await self.user_service.get_by_id(target_id)
            async with self.uow:
                await self.family_service.set_role(membership, Role.ADMIN)
                if target.active_family_id == family_id:
                    await self.user_service.update(target, role=Role.ADMIN)

            logfire.info(
                "Member promoted", family_id=str(family_id), target_id=str(target_id)
            )
            return GenericResponse(message="Member promoted to admin")
