"""Switch active family use case."""

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id, parse_uuid
from kin.application.usecase.views import FamilyView, UserView
from kin.domain.service import FamilyService, JWTService, UserService
from kin.domain.value import FamilyId, UserId


class SwitchActiveFamilyRequest(BaseModel):
    """Switch active family request."""

    user_id: str  # From authenticated user
    family_id: str


class SwitchActiveFamilyResponse(BaseModel):
    """New active family with a matching access token."""

    user: UserView
    family: FamilyView
    access_token: str


class SwitchActiveFamilyUseCase(BaseUseCase):
    """Use case for changing which family the user is currently in."""

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        jwt_service: JWTService,
    ) -> None:
        """Initialize switch active family use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            jwt_service: JWT token domain service
        """
        self.user_service = user_service
        self.family_service = family_service
        self.jwt_service = jwt_service

    async def execute(
        self, request: SwitchActiveFamilyRequest
    ) -> SwitchActiveFamilyResponse:
        """Execute switch.

        The user's role follows the membership of the new active family.

        Raises:
            ForbiddenError: If the caller is not a member of the family
        """
        user_id = UserId(parse_caller_id(request.user_id))
        family_id = FamilyId(parse_uuid(request.family_id, "family ID"))

        with logfire.span(
            "switch_active_family.execute",
            user_id=str(user_id),
            family_id=str(family_id),
        ):
            user = await self.user_service.get_active(user_id)
            membership = await self.family_service.require_membership(
                user.id, family_id
            )
            family = await self.family_service.get_by_id(family_id)

            user = await self.user_service.update(
                user, active_family_id=family.id, role=membership.role
            )
            logfire.info("Active family switched", user_id=str(user.id))

            return SwitchActiveFamilyResponse(
                user=UserView.from_user(user),
                family=FamilyView.from_family(family),
                access_token=self.jwt_service.create_access_token(user),
            )
