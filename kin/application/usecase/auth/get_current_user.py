"""Get current user use case."""

from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase, parse_caller_id
from kin.application.usecase.views import FamilyMembershipView, FamilyView, UserView
from kin.domain.error import NotFoundError, UnauthorizedError
from kin.domain.service import FamilyService, UserService
from kin.domain.value import UserId


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    user_id: str  # From authenticated user


class GetCurrentUserResponse(BaseModel):
    """Get current user response."""

    user: UserView
    active_family: FamilyView | None
    memberships: list[FamilyMembershipView]


class GetCurrentUserUseCase(BaseUseCase):
    """Use case for getting the signed-in user's profile and families."""

    def __init__(self, user_service: UserService, family_service: FamilyService) -> None:
        """Initialize get current user use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
        """
        self.user_service = user_service
        self.family_service = family_service

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        """Execute get current user.

        Raises:
            UnauthorizedError: If the account is missing or deleted
        """
        user_id = UserId(parse_caller_id(request.user_id))
        try:
            user = await self.user_service.get_active(user_id)
        except NotFoundError:
            raise UnauthorizedError("User not found")

        memberships = await self.family_service.list_memberships(user.id)
        families = await self.family_service.get_families(
            [m.family_id for m in memberships]
        )

        active = families.get(user.active_family_id) if user.active_family_id else None
        return GetCurrentUserResponse(
            user=UserView.from_user(user),
            active_family=FamilyView.from_family(active) if active else None,
            memberships=[
                FamilyMembershipView.build(m, families[m.family_id], user)
                for m in memberships
                if m.family_id in families
            ],
        )
