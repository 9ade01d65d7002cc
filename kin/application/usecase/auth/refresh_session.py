"""Refresh session use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase
from kin.domain.error import NotFoundError, UnauthorizedError
from kin.domain.service import JWTService, UserService
from kin.domain.value import UserId
from kin.util.jwt import JWTError


class RefreshSessionRequest(BaseModel):
    """Refresh session request."""

    refresh_token: str


class RefreshSessionResponse(BaseModel):
    """Fresh token pair."""

    access_token: str
    refresh_token: str


class RefreshSessionUseCase(BaseUseCase):
    """Use case for exchanging a refresh token for a new token pair."""

    def __init__(self, jwt_service: JWTService, user_service: UserService) -> None:
        """Initialize refresh session use case.

        Args:
            jwt_service: JWT token domain service
            user_service: User domain service
        """
        self.jwt_service = jwt_service
        self.user_service = user_service

    async def execute(self, request: RefreshSessionRequest) -> RefreshSessionResponse:
        """Execute refresh.

        The new access token carries the user's current active family.

        Raises:
            UnauthorizedError: If the token is invalid or the account is gone
        """
        with logfire.span("refresh_session.execute"):
            try:
                payload = self.jwt_service.verify_refresh_token(request.refresh_token)
                user = await self.user_service.get_active(
                    UserId(UUID(payload.user_id))
                )
            except (JWTError, ValueError, NotFoundError) as e:
                logfire.warn("Session refresh rejected", error=str(e))
                raise UnauthorizedError("Invalid refresh token")

            tokens = self.jwt_service.issue_session(user)
            return RefreshSessionResponse(
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
            )
