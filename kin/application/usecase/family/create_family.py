"""Create family use case."""

import logfire
from pydantic import BaseModel, Field

from kin.application.usecase.base import BaseUseCase, parse_caller_id
from kin.application.usecase.views import AuthResponse, FamilyView, UserView
from kin.domain.error import ConflictError, EmailVerificationRequiredError
from kin.domain.repository import UnitOfWork
from kin.domain.service import FamilyService, JWTService, UserService
from kin.domain.value import UserId


class CreateFamilyRequest(BaseModel):
    """Create family request."""

    user_id: str  # From authenticated user
    name: str = Field(min_length=1, max_length=100)
    invite_code: str | None = None  # Client-chosen shared code


class CreateFamilyUseCase(BaseUseCase):
    """Use case for a verified user without a family founding one."""

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        jwt_service: JWTService,
        uow: UnitOfWork,
    ) -> None:
        """Initialize create family use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            jwt_service: JWT token domain service
            uow: Unit of work for the family writes
        """
        self.user_service = user_service
        self.family_service = family_service
        self.jwt_service = jwt_service
        self.uow = uow

    async def execute(self, request: CreateFamilyRequest) -> AuthResponse:
        """Execute family creation.

        The family, the ADMIN membership, the default channel and the
        creator's active family are written together.

        Raises:
            EmailVerificationRequiredError: If the creator is unverified
            ConflictError: If the creator already belongs to a family, or the
                invite code is taken
        """
        user_id = UserId(parse_caller_id(request.user_id))

        with logfire.span("create_family.execute", user_id=str(user_id)):
            user = await self.user_service.get_active(user_id)
            if not user.email_verified:
                raise EmailVerificationRequiredError(user.email)
            if await self.family_service.has_any_membership(user.id):
                logfire.warn("Creator already in a family", user_id=str(user.id))
                raise ConflictError("You already belong to a family")

            async with self.uow:
                invite_code = await self.family_service.allocate_invite_code(
                    request.invite_code
                )
                family, user = await self.family_service.create_family(
                    user, request.name, invite_code
                )

            tokens = self.jwt_service.issue_session(user)
            return AuthResponse(
                user=UserView.from_user(user),
                family=FamilyView.from_family(family),
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
            )
