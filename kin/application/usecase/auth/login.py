"""Login use case."""

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase
from kin.application.usecase.views import AuthResponse, FamilyView, UserView
from kin.domain.error import EmailVerificationRequiredError
from kin.domain.model.common import utc_now
from kin.domain.service import FamilyService, JWTService, UserService


class LoginRequest(BaseModel):
    """Login request."""

    email: str
    password: str


class LoginUseCase(BaseUseCase):
    """Use case for email/password sign-in."""

    def __init__(
        self,
        user_service: UserService,
        family_service: FamilyService,
        jwt_service: JWTService,
    ) -> None:
        """Initialize login use case.

        Args:
            user_service: User domain service
            family_service: Family domain service
            jwt_service: JWT token domain service
        """
        self.user_service = user_service
        self.family_service = family_service
        self.jwt_service = jwt_service

    async def execute(self, request: LoginRequest) -> AuthResponse:
        """Execute login.

        Raises:
            UnauthorizedError: If the credentials are invalid
            EmailVerificationRequiredError: If the email is not verified yet
        """
        with logfire.span("login.execute"):
            user = await self.user_service.authenticate(
                request.email.strip(), request.password
            )
            if not user.email_verified:
                logfire.warn("Login blocked, email unverified", user_id=str(user.id))
                raise EmailVerificationRequiredError(user.email)

            user = await self.user_service.update(user, last_seen_at=utc_now())

            family = None
            if user.active_family_id:
                family = await self.family_service.get_by_id(user.active_family_id)

            tokens = self.jwt_service.issue_session(user)
            logfire.info("User logged in", user_id=str(user.id))

            return AuthResponse(
                user=UserView.from_user(user),
                family=FamilyView.from_family(family) if family else None,
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
            )
